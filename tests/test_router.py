import pytest

from proposal_engine.router import route


def test_route_dispatches_on_action():
    out = route({"action": "asset-allocation", "riskCategory": "Aggressive", "portfolioSize": 30_000_000})
    assert out["rule"] == "fixed_band"
    assert out["categorySubstituted"] is False


def test_route_defaults_to_proposal():
    payload = {
        "personalInfo": {"name": "Default Route", "age": 50},
        "investmentObjectives": {"initialInvestmentAmount": 5_000_000},
        "riskTolerance": {"marketDropReaction": "do_nothing", "maxAcceptableLoss": 10},
    }
    out = route(payload)
    assert out["status"] == "ok"
    assert out["assetAllocation"]["rule"] == "small_portfolio"


def test_route_rejects_unknown_action():
    with pytest.raises(ValueError, match="Unknown action"):
        route({"action": "rebalance"})
