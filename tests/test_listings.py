import pytest

from proposal_engine.listings import format_listing


def test_pms_scheme_fields():
    raw = {
        "scheme_name": "Alpha Growth",
        "scheme_objective": "Long-term capital growth",
        "active_returns_1_month": "2.1%",
        "scheme_risk_grade": "High",
        "scheme_min_investment": 5000000,
        "scheme_benchmark_name": "Nifty 500",
        "fund_managers": [{"fund_manager_name": "R. Iyer"}],
    }
    p = format_listing([raw], "pms")[0]
    assert p["name"] == "Alpha Growth"
    assert p["minimumInvestment"] == "₹5,000,000"
    assert p["benchmark"] == "Nifty 500"
    assert p["fundManager"] == "R. Iyer"
    assert p["lockInPeriod"] == "Variable"
    assert p["dataSource"] == "live"


def test_debt_paper_fields():
    raw = {
        "instrument_name": "XYZ NCD 2027",
        "yield": "9.5%",
        "maturity_date": "2027-03-31",
        "rating": "AA",
        "face_value": 1000,
        "manufacturer_id": {"manufacturer_name": "XYZ Finance"},
        "listed": True,
    }
    p = format_listing([raw], "debtPapers", data_source="static-listing")[0]
    assert p["lockInPeriod"] == "Until 2027-03-31"
    assert p["faceValue"] == "₹1,000"
    assert p["issuer"] == "XYZ Finance"
    assert p["listed"] == "Yes"
    assert p["minimumInvestment"] == "Not specified"
    assert p["dataSource"] == "static-listing"


def test_unlisted_stock_picks_uploaded_logo():
    raw = {
        "script_name": "Acme Pvt",
        "isin_number": "INE000A01010",
        "documents": [
            {"document_name": "Script Logo", "is_uploaded": False, "path": "old.png"},
            {"document_name": "Script Logo", "is_uploaded": True, "path": "logo.png"},
        ],
    }
    p = format_listing([raw], "unlistedStocks")[0]
    assert p["description"] == "Unlisted stock with ISIN: INE000A01010"
    assert p["logoUrl"] == "logo.png"
    assert p["risk"] == "High"


def test_aif_accepts_either_field_family():
    p = format_listing([{"scheme_name": "Beta Fund", "minimum_investment": "1 Crore"}], "aif")[0]
    assert p["name"] == "Beta Fund"
    assert p["minimumInvestment"] == "1 Crore"
    assert p["strategy"] == "Not specified"


def test_non_dict_records_are_skipped():
    assert format_listing(["oops", None, {"scheme_name": "Ok"}], "pms")[0]["name"] == "Ok"
    assert len(format_listing(["oops", None, {"scheme_name": "Ok"}], "pms")) == 1


def test_unknown_vehicle_type_raises():
    with pytest.raises(ValueError):
        format_listing([{}], "mutualFunds")
