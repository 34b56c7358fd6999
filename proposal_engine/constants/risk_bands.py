from types import MappingProxyType

from proposal_engine.model_interface.types import RiskCategory

# Inclusive upper score bound per category, lowest first.
SCORE_BANDS = (
    (12, RiskCategory.CONSERVATIVE),
    (17, RiskCategory.MODERATE),
    (22, RiskCategory.AGGRESSIVE),
)
TOP_CATEGORY = RiskCategory.ULTRA_AGGRESSIVE

SCORE_FLOOR = 8
SCORE_CEILING = 28

MARKET_DROP_POINTS = MappingProxyType({
    "sell_all": 1, "sell_some": 2, "do_nothing": 3, "buy_some": 4, "buy_more": 5,
})
RETURNS_VS_STABILITY_POINTS = MappingProxyType({
    "stability": 1, "mostly_stability": 2, "balanced": 3, "mostly_returns": 4, "returns": 5,
})
PORTFOLIO_STYLE_POINTS = MappingProxyType({
    "conservative": 1, "moderately_conservative": 2, "balanced": 3,
    "moderately_aggressive": 4, "aggressive": 5,
})
HORIZON_POINTS = MappingProxyType({"short_term": 1, "medium_term": 2, "long_term": 3})
KNOWLEDGE_POINTS = MappingProxyType({"beginner": 1, "intermediate": 2, "advanced": 3})

# (inclusive upper bound on max acceptable loss %, points); above the last → 5.
MAX_LOSS_BANDS = ((5, 1), (10, 2), (15, 3), (25, 4))

# (minimum age, points); younger than the last → 3.
AGE_BANDS = ((60, 1), (40, 2))
DEFAULT_AGE = 40

# Manual allocation: (minimum equity %, category, score), first match wins.
MANUAL_EQUITY_BREAKPOINTS = (
    (80, RiskCategory.ULTRA_AGGRESSIVE, 24),
    (65, RiskCategory.AGGRESSIVE, 20),
    (45, RiskCategory.MODERATE, 15),
)
MANUAL_FLOOR = (RiskCategory.CONSERVATIVE, 10)
