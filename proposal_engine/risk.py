# PURPOSE: Turn questionnaire answers into a risk score, category and advisories.
# CONTEXT: First stage of the proposal pipeline; also exposes the manual-allocation
#          entry point used when an advisor supplies the equity/debt split directly.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import structlog

from proposal_engine.constants import risk_bands as rb
from proposal_engine.model_interface.types import (
    Inconsistency,
    ManualAllocation,
    RiskCategory,
    RiskProfile,
)
from proposal_engine.narrative import manual_allocation_details, risk_assessment_details
from proposal_engine.proposal_io import MissingFieldError

log = structlog.get_logger(__name__)

TZ = ZoneInfo("Asia/Kolkata")

REQUIRED_SECTIONS = ("personalInfo", "investmentObjectives", "riskTolerance")

_CONSERVATIVE_STYLES = ("conservative", "moderately_conservative")
_AGGRESSIVE_STYLES = ("aggressive", "moderately_aggressive")


@dataclass(frozen=True)
class Questionnaire:
    """Scoring inputs, resolved once from the camelCase request body."""
    market_drop_reaction: Optional[str]
    max_acceptable_loss: Optional[float]
    returns_vs_stability: Optional[str]
    portfolio_style: Optional[str]
    horizon: Optional[str]
    knowledge: Optional[str]
    age: Any
    date_of_birth: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Questionnaire":
        """
        Build from a questionnaire payload.

        raises:
        - MissingFieldError – when personalInfo, investmentObjectives or riskTolerance is absent.
        """
        for section in REQUIRED_SECTIONS:
            if not isinstance(payload.get(section), dict):
                raise MissingFieldError(section)

        tol = payload["riskTolerance"]
        obj = payload["investmentObjectives"]
        person = payload["personalInfo"]
        knowledge = (payload.get("knowledgeAndExperience") or {}).get("investmentKnowledge")

        return cls(
            market_drop_reaction=tol.get("marketDropReaction"),
            max_acceptable_loss=_as_number(tol.get("maxAcceptableLoss")),
            returns_vs_stability=tol.get("returnsVsStabilityPreference"),
            portfolio_style=tol.get("preferredPortfolioStyle"),
            horizon=obj.get("investmentHorizon"),
            knowledge=knowledge,
            age=person.get("age"),
            date_of_birth=person.get("dateOfBirth"),
        )


def _as_number(v) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, (int, float)):
        return float(v)
    try:
        return float(str(v).strip().rstrip("%"))
    except ValueError:
        return None


def age_from_birth_date(dob, as_of: Optional[date] = None) -> int:
    """
    Whole years between a birth date and as_of (today in IST by default).

    The year is not counted until the birthday has passed. Missing or
    unparseable input gives the default age of 40.
    """
    if not dob:
        return rb.DEFAULT_AGE
    try:
        if isinstance(dob, datetime):
            born = dob.date()
        elif isinstance(dob, date):
            born = dob
        else:
            born = date.fromisoformat(str(dob).strip()[:10])
    except ValueError:
        log.warning("risk.dob_unparseable", value=str(dob))
        return rb.DEFAULT_AGE

    today = as_of or datetime.now(TZ).date()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def resolve_age(q: Questionnaire, as_of: Optional[date] = None) -> int:
    if isinstance(q.age, (int, float)) and not isinstance(q.age, bool):
        return int(q.age)
    if isinstance(q.age, str) and q.age.strip().isdigit():
        return int(q.age.strip())
    return age_from_birth_date(q.age or q.date_of_birth, as_of)


def _loss_points(loss: Optional[float]) -> int:
    # A missing value falls through to the top band.
    if loss is not None:
        for bound, pts in rb.MAX_LOSS_BANDS:
            if loss <= bound:
                return pts
    return 5


def _age_points(age: int) -> int:
    for floor, pts in rb.AGE_BANDS:
        if age >= floor:
            return pts
    return 3


def score_points(q: Questionnaire, as_of: Optional[date] = None) -> Dict[str, int]:
    """Per-question points; their sum is the risk score."""
    return {
        "marketDropReaction": rb.MARKET_DROP_POINTS.get(q.market_drop_reaction, 3),
        "maxAcceptableLoss": _loss_points(q.max_acceptable_loss),
        "returnsVsStabilityPreference": rb.RETURNS_VS_STABILITY_POINTS.get(q.returns_vs_stability, 3),
        "preferredPortfolioStyle": rb.PORTFOLIO_STYLE_POINTS.get(q.portfolio_style, 3),
        "investmentHorizon": rb.HORIZON_POINTS.get(q.horizon, 2),
        "investmentKnowledge": rb.KNOWLEDGE_POINTS.get(q.knowledge, 1),
        "age": _age_points(resolve_age(q, as_of)),
    }


def category_for_score(score: int) -> RiskCategory:
    for upper, category in rb.SCORE_BANDS:
        if score <= upper:
            return category
    return rb.TOP_CATEGORY


def check_inconsistencies(q: Questionnaire, category: RiskCategory) -> List[Inconsistency]:
    """Advisory flags only; never blocks an allocation."""
    found = []
    if category is RiskCategory.AGGRESSIVE and q.portfolio_style in _CONSERVATIVE_STYLES:
        found.append(Inconsistency(
            "risk_style_mismatch",
            "Risk score indicates Aggressive profile, but preferred portfolio style is Conservative",
        ))
    if category is RiskCategory.CONSERVATIVE and q.portfolio_style in _AGGRESSIVE_STYLES:
        found.append(Inconsistency(
            "risk_style_mismatch",
            "Risk score indicates Conservative profile, but preferred portfolio style is Aggressive",
        ))
    if category is RiskCategory.AGGRESSIVE and q.horizon == "short_term":
        found.append(Inconsistency(
            "horizon_risk_mismatch",
            "Aggressive risk profile with short-term investment horizon may not be suitable",
        ))
    loss = q.max_acceptable_loss
    if loss is not None:
        if category is RiskCategory.AGGRESSIVE and loss <= 10:
            found.append(Inconsistency(
                "loss_tolerance_mismatch",
                "Risk score indicates Aggressive profile, but maximum acceptable loss is low",
            ))
        if category is RiskCategory.CONSERVATIVE and loss >= 20:
            found.append(Inconsistency(
                "loss_tolerance_mismatch",
                "Risk score indicates Conservative profile, but maximum acceptable loss is high",
            ))
    return found


def score_risk(payload: Dict[str, Any], as_of: Optional[date] = None) -> RiskProfile:
    """
    Score a questionnaire.

    parameters:
    - payload: dict – questionnaire with personalInfo, investmentObjectives, riskTolerance
      and optionally knowledgeAndExperience.
    - as_of: date (optional) – reference date for birth-date ages.

    returns:
    - RiskProfile – score in [8, 28], category and every inconsistency found.
    """
    q = payload if isinstance(payload, Questionnaire) else Questionnaire.from_dict(payload)
    points = score_points(q, as_of)
    # The raw sum spans 7..29; the reported score is held to the published 8..28 scale.
    score = min(max(sum(points.values()), rb.SCORE_FLOOR), rb.SCORE_CEILING)
    category = category_for_score(score)
    flags = check_inconsistencies(q, category)

    log.info("risk.scored", score=score, category=category.value, inconsistencies=len(flags))
    return RiskProfile(
        risk_score=score,
        risk_category=category,
        inconsistencies=tuple(flags),
        details=risk_assessment_details(score, category),
    )


def normalize_allocation_input(payload: Dict[str, Any]) -> ManualAllocation:
    """
    Resolve either manual-allocation shape into a ManualAllocation.

    accepts:
    - {"assetClassAllocation": {"equity": .., "debt": .., "goldSilver": ..}}  (current)
    - {"equity": .., "debt": .., "goldSilver": ..}                            (legacy)
    """
    if isinstance(payload.get("assetClassAllocation"), dict):
        src, schema = payload["assetClassAllocation"], "current"
    else:
        src, schema = payload, "legacy"
    return ManualAllocation(
        equity=_as_number(src.get("equity")) or 0.0,
        debt=_as_number(src.get("debt")) or 0.0,
        gold_silver=_as_number(src.get("goldSilver")) or 0.0,
        schema=schema,
    )


def score_from_manual_allocation(equity_pct: float, debt_pct: float, gold_silver_pct: float = 0.0,
                                 schema: str = "current") -> RiskProfile:
    """Category from stated equity % alone: ≥80 / ≥65 / ≥45 / below."""
    category, score = rb.MANUAL_FLOOR
    for floor, cat, pts in rb.MANUAL_EQUITY_BREAKPOINTS:
        if equity_pct >= floor:
            category, score = cat, pts
            break

    manual = ManualAllocation(float(equity_pct), float(debt_pct), float(gold_silver_pct), schema)
    log.info("risk.from_allocation", equity=equity_pct, category=category.value, schema=schema)
    return RiskProfile(
        risk_score=score,
        risk_category=category,
        details=manual_allocation_details(manual, category),
        manual_allocation=manual,
    )


def score_from_allocation_input(payload: Dict[str, Any]) -> RiskProfile:
    """Manual-allocation payload (current or legacy form) → RiskProfile carrying the split."""
    m = normalize_allocation_input(payload)
    return score_from_manual_allocation(m.equity, m.debt, m.gold_silver, m.schema)
