# PURPOSE: Allocation table engine: (risk category, portfolio size) → itemised allocation.
# CONTEXT: Core of the proposal pipeline. Produces the asset-class split, the detailed
#          vehicle breakdown in crore, and the product-type view reconciled to the split.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple

import structlog

from proposal_engine.constants import allocation_tables as T
from proposal_engine.model_interface.types import (
    Allocation,
    AllocationError,
    AllocationResult,
    RiskCategory,
)
from proposal_engine.narrative import allocation_explanation
from proposal_engine.utils.rounding import round_half_up, round_to_total

log = structlog.get_logger(__name__)

# Relative tolerance for the detailed-sum check (0.01% of size).
SUM_TOLERANCE = 1e-4

_SKIP_KEYS = ("Total", "error")


def _is_small(category: RiskCategory, size: float) -> bool:
    if size <= T.SMALL_PORTFOLIO_MAX:
        return True
    return category is RiskCategory.CONSERVATIVE and size <= T.CONSERVATIVE_SMALL_MAX


def checkpoint_for(size: float) -> int:
    """Smallest checkpoint ≥ size; sizes beyond the last use the last."""
    for cp in T.CHECKPOINTS:
        if size <= cp:
            return cp
    return T.CHECKPOINTS[-1]


def asset_class_allocation(category: RiskCategory, size: float) -> Dict[str, int]:
    """
    Step 1: top-level percentage split.

    returns:
    - dict – {"equity": int, "debt": int[, "goldSilver": 0]} summing to 100.
    """
    if size <= T.SMALL_PORTFOLIO_MAX:
        return dict(T.ASSET_CLASS_SMALL[category])
    if category is RiskCategory.CONSERVATIVE and size <= T.CONSERVATIVE_SMALL_MAX:
        return dict(T.ASSET_CLASS_CONSERVATIVE_SMALL)
    return dict(T.ASSET_CLASS_LARGE[category])


def formula_allocation(category: RiskCategory, size: float) -> Dict[str, float]:
    """Closed-form split used when no checkpoint row applies."""
    out = {label: size * frac for label, frac in T.FORMULA_SPLITS[category].items()}
    out["Total"] = size
    return out


def detailed_allocation(
    category: RiskCategory,
    size: float,
    checkpoint_tables: Mapping = T.CHECKPOINT_TABLES,
) -> Tuple[Dict[str, float], str]:
    """
    Step 2: vehicle amounts in crore plus "Total".

    parameters:
    - category: RiskCategory – validated category.
    - size: float – portfolio size in crore.
    - checkpoint_tables: mapping – category → checkpoint → vehicle amounts.

    returns:
    - (detailed, rule) where rule is one of small_portfolio / fixed_band / checkpoint / formula.

    notes:
    - Small portfolios (≤1 cr, ≤2 cr for Conservative) use fixed fractions.
    - Aggressive in (2, 5] cr returns the fixed amounts without scaling.
    - Otherwise the checkpoint row is scaled by size / checkpoint.
    """
    if _is_small(category, size):
        out = {label: size * frac for label, frac in T.SMALL_SPLITS[category].items()}
        out["Total"] = size
        return out, "small_portfolio"

    lo, hi = T.AGGRESSIVE_FIXED_BAND
    if category is RiskCategory.AGGRESSIVE and lo < size <= hi:
        out = dict(T.AGGRESSIVE_FIXED_VALUES)
        out["Total"] = size
        return out, "fixed_band"

    cp = checkpoint_for(size)
    row = (checkpoint_tables.get(category) or {}).get(cp)
    if row is None:
        log.info("allocation.table_miss", category=category.value, checkpoint=cp)
        return formula_allocation(category, size), "formula"

    factor = size / cp
    out = {label: amount * factor for label, amount in row.items()}
    out["Total"] = size
    return out, "checkpoint"


def allocation_gap(detailed: Mapping[str, float]) -> float:
    """Sum of vehicle amounts minus Total (0 when the breakdown is exact)."""
    vehicles = sum(v for k, v in detailed.items() if k not in _SKIP_KEYS)
    return vehicles - detailed.get("Total", 0)


def product_type_allocation(
    detailed: Mapping[str, float],
    asset_classes: Mapping[str, int],
    sub_buckets: Mapping = T.VEHICLE_SUB_BUCKETS,
) -> Dict[str, Dict[str, int]]:
    """
    Step 3: sub-bucket percentages per asset class, reconciled to Step 1.

    behaviour:
    - Each vehicle becomes a whole percent of Total (half-up).
    - The percent is split into sub-buckets via the policy table.
    - Sub-buckets of a class are rescaled so they sum exactly to the class percent;
      the rounding residual lands on the largest bucket.
    """
    out: Dict[str, Dict[str, int]] = {"equity": {}, "debt": {}}
    total = detailed.get("Total") or 0
    if total <= 0:
        return out

    for label, amount in detailed.items():
        if label in _SKIP_KEYS or not amount:
            continue
        vehicle = T.VEHICLES.get(label)
        if vehicle is None:
            log.warning("allocation.unknown_vehicle", vehicle=label)
            continue
        asset_class = vehicle[0]
        pct = round_half_up(amount / total * 100)
        bucket = out.setdefault(asset_class, {})
        for name, ratio in sub_buckets[label].items():
            bucket[name] = bucket.get(name, 0) + round_half_up(pct * ratio)

    for asset_class, buckets in out.items():
        target = asset_classes.get(asset_class, 0)
        out[asset_class] = round_to_total(buckets, target)
    return out


def compute_allocation(risk_category, size_crore: float) -> AllocationResult:
    """
    Allocate a portfolio given its size in crore.

    parameters:
    - risk_category: RiskCategory | str – any accepted spelling of the four categories.
    - size_crore: float – non-negative portfolio size in crore.

    returns:
    - Allocation on success.
    - AllocationError("Invalid strategy") for an unknown category; nothing is raised.
    """
    category = RiskCategory.parse(risk_category)
    if category is None:
        log.warning("allocation.invalid_strategy", risk_category=str(risk_category))
        return AllocationError("Invalid strategy", risk_category=risk_category, size_crore=size_crore)

    try:
        size = float(size_crore)
    except (TypeError, ValueError):
        size = math.nan
    if math.isnan(size) or math.isinf(size) or size < 0:
        log.warning("allocation.invalid_size", size=str(size_crore))
        return AllocationError("Invalid portfolio size", risk_category=category, size_crore=size_crore)

    asset_classes = asset_class_allocation(category, size)
    detailed, rule = detailed_allocation(category, size)
    product_types = product_type_allocation(detailed, asset_classes)

    gap = allocation_gap(detailed)
    if abs(gap) > SUM_TOLERANCE * max(size, 1e-9):
        # Only the Aggressive fixed band is expected to land here.
        log.warning("allocation.total_mismatch", category=category.value, size=size, rule=rule, gap=round(gap, 6))

    log.info("allocation.rule_selected", category=category.value, size=size, rule=rule)
    return Allocation(
        risk_category=category,
        size_crore=size,
        rule=rule,
        asset_class_allocation=asset_classes,
        detailed_allocation=detailed,
        product_type_allocation=product_types,
        explanation=allocation_explanation(category, size),
    )


def allocate_portfolio(risk_category, amount_inr: float) -> AllocationResult:
    """Same as compute_allocation but takes the size in rupees."""
    try:
        size = float(amount_inr) / T.CRORE
    except (TypeError, ValueError):
        size = math.nan
    return compute_allocation(risk_category, size)


def allocate_or_default(risk_category, amount_inr: float, default: RiskCategory = RiskCategory.MODERATE) -> Allocation:
    """Allocate, substituting the default category when the given one is rejected."""
    result = allocate_portfolio(risk_category, amount_inr)
    if isinstance(result, AllocationError) and result.error == "Invalid strategy":
        log.warning("allocation.category_substituted", requested=str(risk_category), used=default.value)
        result = allocate_portfolio(default, amount_inr)
    if isinstance(result, AllocationError):
        raise ValueError(result.error)
    return result
