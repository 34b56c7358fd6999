import pytest

from proposal_engine.model_impl.static_source import StaticProductSource
from proposal_engine.model_interface.product_source import ProductSource, ProductSourceError
from proposal_engine.products import (
    FetchPolicy,
    fetch_candidates,
    fetch_with_policy,
    recommend_products,
    vehicle_weights,
)


class FlakySource(ProductSource):
    name = "fake"

    def __init__(self, failures, records=None):
        self.failures = failures
        self.records = records if records is not None else [{"scheme_name": "Live PMS"}]
        self.calls = []

    def fetch_candidates(self, vehicle_type, lookback="1 Month"):
        self.calls.append((vehicle_type, lookback))
        if len(self.calls) <= self.failures:
            raise ProductSourceError("listing api down")
        return list(self.records)


def _policy(**kw):
    sleeps = []
    kw.setdefault("sleep", sleeps.append)
    kw.setdefault("delay", 0.5)
    kw.setdefault("retries", 2)
    return FetchPolicy(**kw), sleeps


def test_retry_until_success_with_fixed_delay():
    policy, sleeps = _policy()
    src = FlakySource(failures=2)
    out = fetch_with_policy(src, "pms", policy)
    assert out.ok
    assert out.attempts == 3
    assert sleeps == [0.5, 0.5]


def test_retries_exhausted_carries_error():
    policy, sleeps = _policy()
    out = fetch_with_policy(FlakySource(failures=10), "pms", policy)
    assert not out.ok
    assert out.error == "listing api down"
    assert out.attempts == 3
    assert len(sleeps) == 2


def test_empty_listing_is_not_retried():
    policy, sleeps = _policy()
    src = FlakySource(failures=0, records=[])
    out = fetch_with_policy(src, "aif", policy)
    assert not out.ok
    assert len(src.calls) == 1
    assert sleeps == []


def test_lookback_is_passed_through():
    policy, _ = _policy(lookback="3 Months")
    src = FlakySource(failures=0)
    fetch_with_policy(src, "pms", policy)
    assert src.calls == [("pms", "3 Months")]


def test_failed_fetch_uses_fallback_snapshot():
    policy, _ = _policy()
    out = fetch_candidates(FlakySource(failures=10), "pms", policy)
    assert out[0]["name"] == "Seven Island"
    assert {p["dataSource"] for p in out} == {"static-listing"}


def test_no_fallback_gives_empty_list():
    policy, _ = _policy(fallback=None)
    assert fetch_candidates(FlakySource(failures=10), "pms", policy) == []


def test_live_records_are_formatted():
    policy, _ = _policy()
    out = fetch_candidates(FlakySource(failures=0), "pms", policy)
    assert out[0]["name"] == "Live PMS"
    assert out[0]["dataSource"] == "fake"


def test_vehicle_weights_from_engine_sub_buckets():
    weights, defaulted = vehicle_weights("equity", 60, {"PMS": 24, "Large Cap": 14, "Mid Cap": 11, "Small Cap": 11})
    assert weights == {"pms": 40.0, "mutualFunds": 60.0}
    assert defaulted is False


def test_vehicle_weights_pass_through_and_defaults():
    assert vehicle_weights("debt", 40, {"mutualFunds": 50, "debtPapers": 50}) == (
        {"mutualFunds": 50.0, "debtPapers": 50.0}, False)
    assert vehicle_weights("goldSilver", 10, None) == ({"etf": 70, "physical": 30}, True)


def test_vehicle_weights_reject_mixed_forms():
    with pytest.raises(ValueError):
        vehicle_weights("equity", 60, {"Large Cap": 30, "pms": 30})


def test_pms_is_gated_below_fifty_lakh():
    policy, _ = _policy()
    split = {"equity": {"mutualFunds": 60, "pms": 40}, "debt": {"mutualFunds": 100}}
    small = recommend_products("Moderate", {"equity": 60, "debt": 40}, split, 3_000_000,
                               source=StaticProductSource(), policy=policy)
    assert "pms" not in small["equity"]
    assert "mutualFunds" in small["equity"]

    at_gate = recommend_products("Moderate", {"equity": 60, "debt": 40}, split, 5_000_000,
                                 source=StaticProductSource(), policy=policy)
    assert at_gate["equity"]["pms"]["products"][0]["name"] == "Seven Island"


def test_amounts_follow_class_and_vehicle_percentages():
    policy, _ = _policy()
    out = recommend_products("Moderate", {"equity": 60, "debt": 40},
                             {"equity": {"mutualFunds": 60, "pms": 40}}, 100_000_000,
                             source=StaticProductSource(), policy=policy)
    assert out["equity"]["mutualFunds"]["amount"] == pytest.approx(36_000_000)
    assert out["equity"]["pms"]["amount"] == pytest.approx(24_000_000)
    assert out["equity"]["mutualFunds"]["allocation"] == 60
    assert out["debt"]["direct"]["products"][0]["name"] == "Fixed Deposit - HDFC Bank"
    assert out["goldSilver"] == {}


def test_fully_gated_class_gets_default_vehicle():
    policy, _ = _policy()
    out = recommend_products("Aggressive", {"equity": 80, "debt": 20}, {"equity": {"pms": 100}},
                             1_000_000, source=StaticProductSource(), policy=policy)
    assert list(out["equity"]) == ["mutualFunds"]
    assert out["equity"]["mutualFunds"]["allocation"] == 100
    assert out["equity"]["mutualFunds"]["amount"] == pytest.approx(800_000)
    assert out["equity"]["mutualFunds"]["products"][0]["name"] == "Mid Cap Fund E"


def test_failing_source_degrades_to_catalog():
    policy, _ = _policy(fallback=None)
    out = recommend_products("Moderate", {"equity": 100, "debt": 0}, {"equity": {"pms": 50, "aif": 50}},
                             200_000_000, source=FlakySource(failures=100), policy=policy)
    assert out["equity"]["pms"]["products"][0]["name"] == "Multi-Strategy PMS I"
    assert out["equity"]["aif"]["products"][0]["dataSource"] == "catalog"


def test_engine_split_fetches_every_live_vehicle():
    policy, _ = _policy()
    src = FlakySource(failures=0)
    recommend_products("Ultra Aggressive", {"equity": 90, "debt": 10},
                       {"equity": {"AIF": 55, "PMS": 22, "Large Cap": 5, "Mid Cap": 4, "Small Cap": 4}, "debt": {}},
                       300_000_000, source=src, policy=policy)
    assert sorted(v for v, _ in src.calls) == ["aif", "pms"]


def test_unknown_category_uses_moderate_catalog():
    policy, _ = _policy()
    out = recommend_products("Balanced", {"equity": 100}, None, 1_000_000,
                             source=StaticProductSource(), policy=policy)
    assert out["equity"]["mutualFunds"]["products"][0]["name"] == "Multi Cap Fund C"
    assert "Based on your Moderate risk profile" in out["summary"]


def test_ultra_aggressive_reads_aggressive_catalog():
    policy, _ = _policy()
    out = recommend_products("Ultra Aggressive", {"equity": 100}, {"equity": {"mutualFunds": 100}}, 1_000_000,
                             source=StaticProductSource(), policy=policy)
    assert [p["name"] for p in out["equity"]["mutualFunds"]["products"]] == [
        "Mid Cap Fund E", "Small Cap Fund F", "Sectoral Fund G"]


class CrashingSource(ProductSource):
    name = "crashing"

    def fetch_candidates(self, vehicle_type, lookback="1 Month"):
        raise RuntimeError("kaboom")


@pytest.mark.parametrize("size, equity_aif, debt_aif", [
    (9_999_999, False, False),
    (10_000_000, True, False),
    (49_999_999, True, False),
    (50_000_000, True, True),
])
def test_aif_gates_per_asset_class(size, equity_aif, debt_aif):
    policy, _ = _policy()
    split = {"equity": {"mutualFunds": 50, "aif": 50}, "debt": {"mutualFunds": 50, "aif": 50}}
    out = recommend_products("Moderate", {"equity": 60, "debt": 40}, split, size,
                             source=StaticProductSource(), policy=policy)
    assert ("aif" in out["equity"]) is equity_aif
    assert ("aif" in out["debt"]) is debt_aif
    assert "mutualFunds" in out["equity"]
    assert "mutualFunds" in out["debt"]


def test_unexpected_source_error_is_contained_per_vehicle():
    policy, sleeps = _policy(fallback=None)
    out = recommend_products("Moderate", {"equity": 100}, {"equity": {"mutualFunds": 50, "pms": 50}},
                             10_000_000, source=CrashingSource(), policy=policy)
    assert [p["name"] for p in out["equity"]["pms"]["products"]] == ["Multi-Strategy PMS I"]
    assert [p["name"] for p in out["equity"]["mutualFunds"]["products"]] == [
        "Multi Cap Fund C", "Focused Equity Fund D"]
    assert out["equity"]["mutualFunds"]["amount"] == pytest.approx(5_000_000)
    assert sleeps == []
