from datetime import datetime

import pytest

from proposal_engine.allocation import compute_allocation
from proposal_engine.model_interface.types import RiskCategory
from proposal_engine.narrative import (
    TZ,
    RenderError,
    asset_allocation_section,
    build_proposal,
    client_profile_section,
    format_inr,
    implementation_section,
    recommendation_summary,
    render_markdown,
    risk_assessment_details,
)

CLIENT = {
    "personalInfo": {"name": "Asha Rao", "age": 41, "occupation": "Surgeon"},
    "financialSituation": {"annualIncome": 9_000_000},
    "investmentObjectives": {"primaryGoals": ["Retirement"], "investmentHorizon": "long_term",
                             "initialInvestmentAmount": 100_000_000},
}


def test_score_explanation_names_category():
    text = risk_assessment_details(15, RiskCategory.MODERATE)["riskScoreExplanation"]
    assert text.startswith("Your risk score of 15 places you in the moderate risk category.")


def test_format_inr():
    assert format_inr(12_500_000) == "12,500,000"
    assert format_inr(2.5) == "3"
    assert format_inr(None) == "0"


def test_detailed_table_matches_total():
    alloc = compute_allocation("Moderate", 10).to_dict()
    text = asset_allocation_section(alloc, 100_000_000)
    assert "| | Equity PMS | ₹25,000,000 |" in text
    assert "| **Total Investment** | | ₹100,000,000 |" in text
    assert "| Equity | 60% |" in text
    assert alloc["allocationExplanation"] in text


def test_legacy_table_when_detail_missing():
    text = asset_allocation_section({"assetClassAllocation": {"equity": 50, "debt": 50}}, 1_000_000)
    assert "| | ETFs | ₹150,000 |" in text
    assert "| **Total Investment** | | ₹1,000,000 |" in text


def test_profile_lists_points_to_discuss():
    risk = {"riskCategory": "Aggressive", "riskScore": 20,
            "inconsistencies": [{"kind": "horizon_risk_mismatch", "message": "Short horizon"}]}
    text = client_profile_section(CLIENT, risk)
    assert "### Points to Discuss\n- Short horizon" in text
    assert "- **Annual Income**: ₹9,000,000" in text


def test_implementation_plan_switches_on_sip():
    assert "Investment Strategy: Lump Sum\n" in implementation_section(CLIENT)
    with_sip = {"investmentObjectives": {"initialInvestmentAmount": 100, "regularContributionAmount": 50_000}}
    assert "Investment Strategy: Lump Sum + SIP" in implementation_section(with_sip)


def test_summary_only_mentions_funded_classes():
    text = recommendation_summary({"equity": {"pms": {}}, "debt": {}, "goldSilver": {}}, RiskCategory.AGGRESSIVE)
    assert "concentrated growth approach" in text
    assert "For debt allocation" not in text


def test_build_and_render_proposal():
    alloc = compute_allocation("Moderate", 10).to_dict()
    risk = {"riskCategory": "Moderate", "riskScore": 15, "inconsistencies": []}
    recs = {"equity": {}, "debt": {}, "goldSilver": {}, "summary": "Summary text"}
    proposal = build_proposal(CLIENT, risk, alloc, recs, now=datetime(2025, 3, 5, tzinfo=TZ))
    assert proposal["title"] == "Investment Proposal for Asha Rao"
    assert proposal["date"] == "5 March 2025"
    assert [s["key"] for s in proposal["sections"]] == [
        "clientProfileRecap", "assetAllocationSummary", "productDetails", "implementationPlan", "disclaimers"]

    doc = render_markdown(proposal)
    assert doc.startswith("# Investment Proposal for Asha Rao\n\n**Date:** 5 March 2025")
    assert "# Disclaimer" in doc


def test_render_errors_are_distinct():
    with pytest.raises(RenderError):
        render_markdown({"title": "No date"})
    with pytest.raises(RenderError):
        render_markdown({"title": "t", "date": "d", "sections": None})


def test_fixed_band_table_notes_unscaled_rows():
    alloc = compute_allocation("Aggressive", 3).to_dict()
    text = asset_allocation_section(alloc, 30_000_000)
    assert "| **Total Investment** | | ₹30,000,000 |" in text
    assert "| *Note* | Vehicle amounts above total ₹50,000,000;" in text


def test_scaled_table_has_no_note():
    alloc = compute_allocation("Aggressive", 5).to_dict()
    assert "*Note*" not in asset_allocation_section(alloc, 50_000_000)
    alloc = compute_allocation("Moderate", 10).to_dict()
    assert "*Note*" not in asset_allocation_section(alloc, 100_000_000)
