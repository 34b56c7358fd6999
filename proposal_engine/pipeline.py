# PURPOSE: End-to-end request flows: risk assessment, allocation, recommendations
#          and the full proposal document.
# CONTEXT: Called by the router (Lambda) and the CLI. Each flow validates its input,
#          runs the deterministic stages and returns a JSON-ready dict.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

import json
import time
import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

import structlog

from proposal_engine.allocation import allocate_or_default
from proposal_engine.model_interface.loader import load_product_source
from proposal_engine.model_interface.product_source import ProductSource
from proposal_engine.model_interface.types import RiskCategory
from proposal_engine.narrative import build_proposal, render_markdown
from proposal_engine.products import FetchPolicy, recommend_products
from proposal_engine.proposal_io import (
    MissingFieldError,
    validate_allocation_request,
    validate_proposal_output,
    validate_questionnaire,
)
from proposal_engine.risk import score_from_allocation_input, score_risk

log = structlog.get_logger(__name__)

TZ = ZoneInfo("Asia/Kolkata")


def _run_id() -> str:
    """
    Readable run ID: short random prefix plus an IST timestamp.
    Example: 'a1b2c3d4-20251021143000'
    """
    return uuid.uuid4().hex[:8] + "-" + datetime.now(TZ).strftime("%Y%m%d%H%M%S")


def _initial_investment(client: Dict[str, Any]) -> float:
    return float((client.get("investmentObjectives") or {}).get("initialInvestmentAmount") or 0)


def run_risk_assessment(payload: Dict[str, Any], as_of: Optional[date] = None) -> Dict[str, Any]:
    validate_questionnaire(payload)
    return score_risk(payload, as_of).to_dict()


def run_asset_allocation(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Allocate from {riskCategory, portfolioSize (INR)}.

    An unrecognised category is replaced by Moderate and flagged in the response.
    """
    validate_allocation_request(payload)
    requested = payload["riskCategory"]
    allocation = allocate_or_default(requested, payload["portfolioSize"])
    out = allocation.to_dict()
    out["categorySubstituted"] = RiskCategory.parse(requested) is None
    return out


def run_product_recommendations(payload: Dict[str, Any], source: Optional[ProductSource] = None,
                                policy: Optional[FetchPolicy] = None) -> Dict[str, Any]:
    """
    Recommend products for an existing allocation.

    expects:
    - riskCategory: str
    - assetAllocation: {assetClassAllocation, productTypeAllocation?, portfolioSize?}
    - clientProfile (optional): used for the size when assetAllocation has none.
    """
    alloc = payload.get("assetAllocation")
    if not isinstance(alloc, dict):
        raise MissingFieldError("assetAllocation")
    if not isinstance(alloc.get("assetClassAllocation"), dict):
        raise MissingFieldError("assetAllocation.assetClassAllocation")
    size = alloc.get("portfolioSize") or _initial_investment(payload.get("clientProfile") or {})
    return recommend_products(
        payload.get("riskCategory") or alloc.get("riskCategory"),
        alloc["assetClassAllocation"],
        alloc.get("productTypeAllocation"),
        size,
        source=source or load_product_source(),
        policy=policy,
    )


def run_manual_allocation(payload: Dict[str, Any], source: Optional[ProductSource] = None,
                          policy: Optional[FetchPolicy] = None) -> Dict[str, Any]:
    """
    Advisor-supplied split: derive the category from equity %, then allocate and recommend.

    expects:
    - assetAllocation: current {assetClassAllocation: {...}, productTypeAllocation?} or legacy {equity, debt}
    - clientProfile: optional, for the portfolio size
    """
    raw = payload.get("assetAllocation")
    if not isinstance(raw, dict):
        raise MissingFieldError("assetAllocation")
    client = payload.get("clientProfile") or {}

    risk = score_from_allocation_input(raw)
    manual = risk.manual_allocation
    size = raw.get("portfolioSize") or _initial_investment(client)
    allocation = allocate_or_default(risk.risk_category, size)

    # Recommendations follow the advisor's own split rather than the model split.
    recs = recommend_products(
        risk.risk_category,
        manual.to_dict(),
        raw.get("productTypeAllocation"),
        size,
        source=source or load_product_source(),
        policy=policy,
    )
    return {
        "riskProfile": risk.to_dict(),
        "assetAllocation": allocation.to_dict(),
        "productRecommendations": recs,
    }


def run_pipeline(payload: Dict[str, Any], source: Optional[ProductSource] = None,
                 policy: Optional[FetchPolicy] = None, as_of: Optional[date] = None) -> Dict[str, Any]:
    """
    Full proposal flow.

    steps:
    1) Validate the questionnaire (schema + required sections).
    2) Score risk.
    3) Allocate for the initial investment amount (Moderate if the category is rejected).
    4) Recommend products.
    5) Build and render the proposal document.
    6) Validate the output.

    raises:
    - ValidationError / MissingFieldError – bad input.
    - RenderError – the computation succeeded but the document could not be rendered.
    - OutputSchemaError – the assembled response broke its own schema.
    """
    t0 = time.time()

    validate_questionnaire(payload)
    risk = score_risk(payload, as_of)

    size = _initial_investment(payload)
    allocation = allocate_or_default(risk.risk_category, size)

    recs = recommend_products(
        risk.risk_category,
        allocation.asset_class_allocation,
        allocation.product_type_allocation,
        size,
        source=source or load_product_source(),
        policy=policy,
    )

    risk_d = risk.to_dict()
    alloc_d = allocation.to_dict()
    proposal = build_proposal(payload, risk_d, alloc_d, recs)
    document = render_markdown(proposal)

    out = {
        "status": "ok",
        "run_id": _run_id(),
        "riskProfile": risk_d,
        "assetAllocation": alloc_d,
        "productRecommendations": recs,
        "proposal": proposal,
        "document": document,
        "latency_ms": int((time.time() - t0) * 1000),
    }
    validate_proposal_output(out)
    log.info("pipeline.completed", run_id=out["run_id"], category=risk_d["riskCategory"],
             rule=alloc_d["rule"], latency_ms=out["latency_ms"])
    return out


if __name__ == "__main__":
    demo = {
        "personalInfo": {"name": "Demo Client", "age": 35},
        "investmentObjectives": {"investmentHorizon": "long_term", "initialInvestmentAmount": 30_000_000},
        "riskTolerance": {"marketDropReaction": "buy_some", "maxAcceptableLoss": 20,
                          "returnsVsStabilityPreference": "mostly_returns",
                          "preferredPortfolioStyle": "moderately_aggressive"},
    }
    print(json.dumps(run_pipeline(demo), indent=2, ensure_ascii=False))
