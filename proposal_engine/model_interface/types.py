from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, TypedDict, Union


class RiskCategory(str, Enum):
    CONSERVATIVE = "Conservative"
    MODERATE = "Moderate"
    AGGRESSIVE = "Aggressive"
    ULTRA_AGGRESSIVE = "Ultra Aggressive"

    @classmethod
    def parse(cls, value) -> Optional["RiskCategory"]:
        """
        Normalise the spellings seen across clients into one category.

        "UltraAggressive", "Ultra-Aggressive", "ultra_aggressive" and
        "ULTRA AGGRESSIVE" all map to ULTRA_AGGRESSIVE. Unknown values → None.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = re.sub(r"[\s_\-]+", "", value).lower()
        return _CATEGORY_KEYS.get(key)

    @property
    def catalog_level(self) -> str:
        """Risk level used by the static product catalog (no ultra tier there)."""
        if self is RiskCategory.ULTRA_AGGRESSIVE:
            return "aggressive"
        return self.value.lower()


_CATEGORY_KEYS = {c.value.replace(" ", "").lower(): c for c in RiskCategory}


Rule = Literal["small_portfolio", "checkpoint", "fixed_band", "formula"]


@dataclass(frozen=True)
class Inconsistency:
    kind: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class ManualAllocation:
    """Manual asset-class split resolved from either input shape."""
    equity: float
    debt: float
    gold_silver: float = 0.0
    schema: Literal["current", "legacy"] = "current"

    def to_dict(self) -> Dict[str, float]:
        return {"equity": self.equity, "debt": self.debt, "goldSilver": self.gold_silver}


@dataclass(frozen=True)
class RiskProfile:
    risk_score: int
    risk_category: RiskCategory
    inconsistencies: tuple = ()
    details: Dict[str, str] = field(default_factory=dict)
    manual_allocation: Optional[ManualAllocation] = None

    def to_dict(self) -> dict:
        out = {
            "riskScore": self.risk_score,
            "riskCategory": self.risk_category.value,
            "inconsistencies": [i.to_dict() for i in self.inconsistencies],
            "riskAssessmentDetails": dict(self.details),
        }
        if self.manual_allocation is not None:
            out["assetAllocation"] = self.manual_allocation.to_dict()
        return out


@dataclass(frozen=True)
class Allocation:
    risk_category: RiskCategory
    size_crore: float
    rule: Rule
    asset_class_allocation: Dict[str, int]
    detailed_allocation: Dict[str, float]
    product_type_allocation: Dict[str, Dict[str, int]]
    explanation: str = ""

    @property
    def portfolio_size(self) -> float:
        """Portfolio size in rupees."""
        return self.size_crore * 10_000_000

    def to_dict(self) -> dict:
        return {
            "riskCategory": self.risk_category.value,
            "portfolioSize": self.portfolio_size,
            "portfolioSizeInCrores": self.size_crore,
            "rule": self.rule,
            "assetClassAllocation": dict(self.asset_class_allocation),
            "detailedAllocation": dict(self.detailed_allocation),
            "productTypeAllocation": {k: dict(v) for k, v in self.product_type_allocation.items()},
            "allocationExplanation": self.explanation,
        }


@dataclass(frozen=True)
class AllocationError:
    error: str
    risk_category: object = None
    size_crore: Optional[float] = None

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error}


AllocationResult = Union[Allocation, AllocationError]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one product-source call: candidates or an error message."""
    vehicle_type: str
    candidates: List[dict] = field(default_factory=list)
    error: Optional[str] = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.candidates)


class ProductCandidate(TypedDict, total=False):
    name: str
    description: str
    expectedReturn: str
    risk: str
    lockInPeriod: str
    minimumInvestment: str
    dataSource: str
    benchmark: str
    strategy: str
    fundManager: str
    instrumentType: str
    maturityDate: str
    rating: str
    faceValue: str
    interestPayment: str
    issuer: str
    issueSize: str
    listed: str
    companyName: str
    sector: str
    logoUrl: str


class VehicleRecommendation(TypedDict, total=False):
    allocation: float
    amount: float
    products: List[ProductCandidate]


class Recommendations(TypedDict):
    equity: Dict[str, VehicleRecommendation]
    debt: Dict[str, VehicleRecommendation]
    goldSilver: Dict[str, VehicleRecommendation]
    summary: str
