# PURPOSE: Product recommendation assembler.
# CONTEXT: Maps each asset class's vehicle split onto concrete candidates. Applies
#          minimum-ticket gates, fetches live listings concurrently under a retry
#          policy, and falls back to snapshots and the static catalog so the
#          response is never empty.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog

from proposal_engine.constants.allocation_tables import SUB_BUCKET_VEHICLE
from proposal_engine.constants.product_catalog import (
    DEFAULT_FIXED_DEPOSIT,
    DEFAULT_VEHICLE_WEIGHTS,
    catalog_products,
)
from proposal_engine.listings import format_listing
from proposal_engine.model_impl.static_source import StaticProductSource
from proposal_engine.model_interface.product_source import ProductSource, ProductSourceError
from proposal_engine.model_interface.types import FetchResult, Recommendations, RiskCategory
from proposal_engine.narrative import recommendation_summary
from proposal_engine.observability import xray_segment

log = structlog.get_logger(__name__)

ASSET_CLASSES = ("equity", "debt", "goldSilver")
VEHICLE_TYPES = frozenset(("mutualFunds", "pms", "aif", "etf", "direct", "physical",
                           "unlistedStocks", "debtPapers"))

# Minimum portfolio size (INR) before a vehicle is offered.
MIN_TICKET = {
    ("equity", "pms"): 5_000_000,
    ("equity", "aif"): 10_000_000,
    ("debt", "aif"): 50_000_000,
}

# (asset class, vehicle) → listing fetched from the product source.
LIVE_LISTINGS = {
    ("equity", "pms"): "pms",
    ("equity", "aif"): "aif",
    ("equity", "unlistedStocks"): "unlistedStocks",
    ("debt", "debtPapers"): "debtPapers",
}

# Vehicle forced in when a funded class ends up empty.
FORCED_DEFAULT = {"equity": "mutualFunds", "debt": "mutualFunds", "goldSilver": "etf"}


@dataclass
class FetchPolicy:
    """
    How live listings are fetched.

    attributes:
    - retries: int – extra attempts after the first failure (PRODUCT_FETCH_RETRIES, default 2).
    - delay: float – fixed seconds between attempts (PRODUCT_FETCH_RETRY_DELAY, default 1.0).
    - lookback: str – returns period passed to the source (PRODUCT_LOOKBACK, default "1 Month").
    - fallback: ProductSource | None – tried once when the primary source yields nothing.
    - max_workers: int – concurrent fetches.
    - sleep: callable – injectable for tests.
    """
    retries: int = field(default_factory=lambda: int(os.getenv("PRODUCT_FETCH_RETRIES", "2")))
    delay: float = field(default_factory=lambda: float(os.getenv("PRODUCT_FETCH_RETRY_DELAY", "1.0")))
    lookback: str = field(default_factory=lambda: os.getenv("PRODUCT_LOOKBACK", "1 Month"))
    fallback: Optional[ProductSource] = field(default_factory=StaticProductSource)
    max_workers: int = 4
    sleep: Callable[[float], None] = time.sleep


def fetch_with_policy(source: ProductSource, vehicle_type: str, policy: FetchPolicy) -> FetchResult:
    """
    Fetch one listing with fixed-delay retries.

    behaviour:
    - ProductSourceError is retried up to policy.retries times, policy.delay apart.
    - An empty listing is not retried.
    - Never raises for source errors; the error is carried on the FetchResult.
    """
    attempts = policy.retries + 1
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            with xray_segment(f"products.fetch.{vehicle_type}") as seg:
                seg.annotate("vehicle_type", vehicle_type)
                records = source.fetch_candidates(vehicle_type, policy.lookback)
        except ProductSourceError as e:
            last_error = str(e)
            log.warning("products.fetch_failed", vehicle_type=vehicle_type, attempt=attempt, error=last_error)
            if attempt < attempts:
                log.info("products.fetch_retry", vehicle_type=vehicle_type, delay=policy.delay)
                policy.sleep(policy.delay)
            continue
        if records:
            return FetchResult(vehicle_type, list(records), attempts=attempt)
        return FetchResult(vehicle_type, [], error="empty listing", attempts=attempt)
    return FetchResult(vehicle_type, [], error=last_error, attempts=attempts)


def fetch_candidates(source: ProductSource, vehicle_type: str, policy: FetchPolicy) -> List[dict]:
    """Live candidates, else the policy's fallback source, normalised; [] when both are empty."""
    result = fetch_with_policy(source, vehicle_type, policy)
    if result.ok:
        return format_listing(result.candidates, vehicle_type, getattr(source, "name", "live"))

    log.info("products.using_fallback", vehicle_type=vehicle_type, reason=result.error)
    fb = policy.fallback
    if fb is None or fb is source:
        return []
    try:
        records = fb.fetch_candidates(vehicle_type, policy.lookback)
    except ProductSourceError as e:
        log.warning("products.fallback_failed", vehicle_type=vehicle_type, error=str(e))
        return []
    return format_listing(records, vehicle_type, getattr(fb, "name", "static-listing"))


def passes_gate(asset_class: str, vehicle: str, portfolio_size: float) -> bool:
    return portfolio_size >= MIN_TICKET.get((asset_class, vehicle), 0)


def vehicle_weights(asset_class: str, class_pct: float, split: Optional[Mapping[str, Any]]) -> Tuple[Dict[str, float], bool]:
    """
    Resolve a class's product-type split into within-class vehicle percentages.

    accepts:
    - sub-bucket form from the allocation engine, as % of the whole portfolio
      (e.g. {"Large Cap": 24, "PMS": 20, "AIF": 36});
    - vehicle form, already within the class (e.g. {"mutualFunds": 80, "pms": 20});
    - nothing, in which case the class default applies.

    returns:
    - (weights, defaulted)

    raises:
    - ValueError – when one split mixes both forms.
    """
    if not split:
        return dict(DEFAULT_VEHICLE_WEIGHTS[asset_class]), True

    buckets = SUB_BUCKET_VEHICLE.get(asset_class, {})
    bucket_keys = [k for k in split if k in buckets]
    vehicle_keys = [k for k in split if k in VEHICLE_TYPES]
    unknown = [k for k in split if k not in buckets and k not in VEHICLE_TYPES]
    if unknown:
        log.warning("products.unknown_product_types", asset_class=asset_class, keys=unknown)
    if bucket_keys and vehicle_keys:
        raise ValueError(f"{asset_class}: product types mix sub-buckets and vehicles")

    if vehicle_keys:
        return {k: float(split[k] or 0) for k in vehicle_keys}, False
    if not bucket_keys:
        return dict(DEFAULT_VEHICLE_WEIGHTS[asset_class]), True

    grouped: Dict[str, float] = {}
    for k in bucket_keys:
        v = buckets[k]
        grouped[v] = grouped.get(v, 0.0) + float(split[k] or 0)
    if class_pct <= 0:
        return {}, False
    return {v: round(p / class_pct * 100, 2) for v, p in grouped.items()}, False


def _catalog_for(asset_class: str, vehicle: str, level: str, defaulted: bool) -> List[dict]:
    if asset_class == "debt" and vehicle == "direct" and defaulted:
        d = dict(DEFAULT_FIXED_DEPOSIT)
        d["dataSource"] = "catalog"
        return [d]
    return catalog_products(asset_class, vehicle, level)


def _forced(asset_class: str, amount: float, level: str) -> Dict[str, Any]:
    vehicle = FORCED_DEFAULT[asset_class]
    return {vehicle: {"allocation": 100, "amount": amount,
                      "products": catalog_products(asset_class, vehicle, level)}}


def recommend_products(
    risk_category,
    asset_class_allocation: Mapping[str, Any],
    product_type_allocation: Optional[Mapping[str, Any]],
    portfolio_size: float,
    source: Optional[ProductSource] = None,
    policy: Optional[FetchPolicy] = None,
) -> Recommendations:
    """
    Recommend products per asset class and vehicle.

    parameters:
    - risk_category: RiskCategory | str – unknown values fall back to Moderate.
    - asset_class_allocation: dict – {"equity": %, "debt": %, "goldSilver": %}.
    - product_type_allocation: dict | None – engine sub-buckets or manual vehicle split per class.
    - portfolio_size: float – in rupees.
    - source: ProductSource (optional) – live listing source; static snapshots when omitted.
    - policy: FetchPolicy (optional).

    returns:
    - dict – {"equity": {...}, "debt": {...}, "goldSilver": {...}, "summary": str}; each vehicle entry is
      {"allocation": % of class, "amount": INR, "products": [ProductCandidate, ...]}.

    notes:
    - PMS needs ≥ ₹50 lakh, equity AIF ≥ ₹1 crore, debt AIF ≥ ₹5 crore; below that the vehicle is dropped.
    - A funded class with no surviving vehicle gets its default vehicle at 100%.
    - Failures are contained per vehicle and per class.
    """
    category = RiskCategory.parse(risk_category)
    if category is None:
        log.warning("products.unknown_category", risk_category=str(risk_category))
        category = RiskCategory.MODERATE
    level = category.catalog_level
    policy = policy or FetchPolicy()
    source = source or policy.fallback or StaticProductSource()
    size = float(portfolio_size or 0)
    splits = product_type_allocation or {}

    plans: Dict[str, Dict[str, Tuple[float, float]]] = {}
    defaulted: Dict[str, bool] = {}
    out: Dict[str, Any] = {}
    for cls in ASSET_CLASSES:
        pct = float(asset_class_allocation.get(cls) or 0)
        out[cls] = {}
        if pct <= 0:
            continue
        class_amount = size * pct / 100
        try:
            weights, defaulted[cls] = vehicle_weights(cls, pct, splits.get(cls))
        except Exception as e:
            log.error("products.class_failed", asset_class=cls, error=str(e))
            weights, defaulted[cls] = dict(DEFAULT_VEHICLE_WEIGHTS[cls]), True
        plan = {}
        for vehicle, w in weights.items():
            if w <= 0:
                continue
            if not passes_gate(cls, vehicle, size):
                log.info("products.gated", asset_class=cls, vehicle=vehicle, portfolio_size=size)
                continue
            plan[vehicle] = (w, class_amount * w / 100)
        plans[cls] = plan

    live = [(cls, v) for cls, plan in plans.items() for v in plan if (cls, v) in LIVE_LISTINGS]
    fetched: Dict[Tuple[str, str], Any] = {}
    if live:
        with ThreadPoolExecutor(max_workers=min(policy.max_workers, len(live))) as pool:
            futures = {key: pool.submit(fetch_candidates, source, LIVE_LISTINGS[key], policy) for key in live}
            for key, fut in futures.items():
                try:
                    fetched[key] = fut.result()
                except Exception as e:
                    log.error("products.fetch_crashed", asset_class=key[0], vehicle=key[1], error=str(e))
                    fetched[key] = []

    for cls, plan in plans.items():
        class_amount = size * float(asset_class_allocation.get(cls) or 0) / 100
        try:
            recs = {}
            for vehicle, (w, amount) in plan.items():
                try:
                    products = fetched.get((cls, vehicle)) or _catalog_for(cls, vehicle, level, defaulted.get(cls, False))
                except Exception as e:
                    log.error("products.vehicle_failed", asset_class=cls, vehicle=vehicle, error=str(e))
                    products = catalog_products(cls, FORCED_DEFAULT[cls], "moderate")
                if not products:
                    log.warning("products.no_candidates", asset_class=cls, vehicle=vehicle)
                    continue
                recs[vehicle] = {"allocation": w, "amount": amount, "products": products}
            out[cls] = recs or _forced(cls, class_amount, level)
            if not recs:
                log.info("products.forced_default", asset_class=cls, vehicle=FORCED_DEFAULT[cls])
        except Exception as e:
            log.error("products.class_failed", asset_class=cls, error=str(e))
            out[cls] = _forced(cls, class_amount, "moderate")

    out["summary"] = recommendation_summary(out, category)
    return out
