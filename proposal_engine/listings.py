# PURPOSE: Normalise raw product-listing records into ProductCandidate dicts.
# CONTEXT: Listing formats differ per product code (PMS schemes, AIF schemes, debt
#          papers, unlisted scripts); the recommender only ever sees the common shape.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List

import structlog

from proposal_engine.model_interface.types import ProductCandidate

log = structlog.get_logger(__name__)


def _base(data_source: str) -> ProductCandidate:
    return {
        "name": "Unknown Product",
        "description": "No description available",
        "expectedReturn": "Variable",
        "risk": "Moderate",
        "lockInPeriod": "Variable",
        "minimumInvestment": "Not specified",
        "dataSource": data_source,
    }


def _inr(v) -> str:
    if v in (None, ""):
        return "Not specified"
    try:
        return f"₹{int(float(v)):,}"
    except (TypeError, ValueError):
        return str(v)


def _text(v, default: str) -> str:
    return str(v) if v not in (None, "") else default


def _pms(raw: Dict[str, Any], p: ProductCandidate) -> None:
    p["name"] = _text(raw.get("scheme_name"), "Unknown PMS")
    p["description"] = _text(raw.get("scheme_objective"), p["description"])
    p["expectedReturn"] = _text(raw.get("active_returns_1_month"), "Variable")
    p["risk"] = _text(raw.get("scheme_risk_grade"), "Moderate")
    p["lockInPeriod"] = _text(raw.get("scheme_exit_load"), "Variable")
    p["minimumInvestment"] = _inr(raw.get("scheme_min_investment"))
    if raw.get("scheme_benchmark_name"):
        p["benchmark"] = raw["scheme_benchmark_name"]
    if raw.get("scheme_classification"):
        p["strategy"] = raw["scheme_classification"]
    managers = raw.get("fund_managers") or []
    if managers:
        p["fundManager"] = _text(managers[0].get("fund_manager_name"), "Not specified")
    elif (raw.get("manufacturer_id") or {}).get("manufacturer_name"):
        p["fundManager"] = raw["manufacturer_id"]["manufacturer_name"]


def _aif(raw: Dict[str, Any], p: ProductCandidate) -> None:
    p["name"] = _text(raw.get("name") or raw.get("scheme_name") or raw.get("product_name"), "Unknown Fund")
    p["description"] = _text(raw.get("description") or raw.get("scheme_objective"), p["description"])
    p["expectedReturn"] = _text(raw.get("returns") or raw.get("active_returns_1_month"), "Variable")
    p["risk"] = _text(raw.get("risk_level") or raw.get("scheme_risk_grade"), "Moderate")
    p["lockInPeriod"] = _text(raw.get("lock_in_period") or raw.get("scheme_exit_load"), "Variable")
    minimum = raw.get("minimum_investment") or raw.get("scheme_min_investment")
    p["minimumInvestment"] = _inr(minimum) if isinstance(minimum, (int, float)) else _text(minimum, "Not specified")
    p["fundManager"] = _text(raw.get("fund_manager"), "Not specified")
    p["strategy"] = _text(raw.get("strategy") or raw.get("scheme_classification"), "Not specified")


def _debt_paper(raw: Dict[str, Any], p: ProductCandidate) -> None:
    maturity = raw.get("maturity_date")
    p["name"] = _text(raw.get("instrument_name"), "Unknown Debt Instrument")
    p["description"] = _text(raw.get("issuer_description"), p["description"])
    p["expectedReturn"] = _text(raw.get("yield"), "Variable")
    p["risk"] = _text(raw.get("risk_grade"), "Moderate")
    p["lockInPeriod"] = f"Until {maturity}" if maturity else "Variable"
    p["minimumInvestment"] = _inr(raw.get("min_investment"))
    p["instrumentType"] = _text(raw.get("instrument_type"), "Debt Instrument")
    p["maturityDate"] = _text(maturity, "Not specified")
    p["rating"] = _text(raw.get("rating"), "Not rated")
    p["faceValue"] = _inr(raw.get("face_value"))
    p["interestPayment"] = _text(raw.get("interest_payment"), "Not specified")
    p["issuer"] = _text((raw.get("manufacturer_id") or {}).get("manufacturer_name"), "Unknown Issuer")
    p["issueSize"] = _text(raw.get("issue_size"), "Not specified")
    p["listed"] = "Yes" if raw.get("listed") else "No"


def _unlisted(raw: Dict[str, Any], p: ProductCandidate) -> None:
    p["name"] = _text(raw.get("script_name"), "Unknown Stock")
    p["description"] = f"Unlisted stock with ISIN: {raw.get('isin_number') or 'Not available'}"
    p["risk"] = "High"
    p["companyName"] = _text(raw.get("script_name"), "Unknown Stock")
    p["sector"] = _text(raw.get("sector_name"), "Not specified")
    p["faceValue"] = _text(raw.get("face_value"), "Not specified")
    for doc in raw.get("documents") or []:
        if doc.get("document_name") == "Script Logo" and doc.get("is_uploaded") and doc.get("path"):
            p["logoUrl"] = doc["path"]
            break


_FORMATTERS: Dict[str, Callable[[Dict[str, Any], ProductCandidate], None]] = {
    "pms": _pms,
    "aif": _aif,
    "debtPapers": _debt_paper,
    "unlistedStocks": _unlisted,
}


def format_listing(records: Iterable[Any], vehicle_type: str, data_source: str = "live") -> List[ProductCandidate]:
    """
    Normalise raw records for one vehicle type.

    parameters:
    - records: iterable – raw listing records.
    - vehicle_type: str – pms | aif | debtPapers | unlistedStocks.
    - data_source: str – tag stored on each candidate ("live" or "static-listing").

    returns:
    - list[ProductCandidate] – non-dict records are skipped.

    raises:
    - ValueError – for a vehicle type with no listing format.
    """
    fmt = _FORMATTERS.get(vehicle_type)
    if fmt is None:
        raise ValueError(f"no listing format for {vehicle_type!r}")
    out = []
    for raw in records or []:
        if not isinstance(raw, dict):
            log.warning("listings.record_skipped", vehicle_type=vehicle_type, record_type=type(raw).__name__)
            continue
        p = _base(data_source)
        fmt(raw, p)
        out.append(p)
    return out
