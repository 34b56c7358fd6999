# PURPOSE: Read-only allocation tables keyed by risk category and size band.
# CONTEXT: Loaded once at import; allocation.py only reads from them.
#          All amounts are in crore (1 crore = 10,000,000 INR).
# CREDITS: Original work — no external code reuse.

from types import MappingProxyType as _ro

from proposal_engine.model_interface.types import RiskCategory as RC

CRORE = 10_000_000

SMALL_PORTFOLIO_MAX = 1.0
CONSERVATIVE_SMALL_MAX = 2.0

# Step 1: equity/debt split. Keys: small (≤1 cr) and large (above threshold).
ASSET_CLASS_SMALL = _ro({
    RC.ULTRA_AGGRESSIVE: _ro({"equity": 100, "debt": 0}),
    RC.AGGRESSIVE: _ro({"equity": 75, "debt": 25}),
    RC.MODERATE: _ro({"equity": 60, "debt": 40}),
    RC.CONSERVATIVE: _ro({"equity": 40, "debt": 60}),
})
ASSET_CLASS_CONSERVATIVE_SMALL = _ro({"equity": 40, "debt": 60})
ASSET_CLASS_LARGE = _ro({
    RC.ULTRA_AGGRESSIVE: _ro({"equity": 90, "debt": 10}),
    RC.AGGRESSIVE: _ro({"equity": 80, "debt": 20}),
    RC.MODERATE: _ro({"equity": 60, "debt": 40}),
    RC.CONSERVATIVE: _ro({"equity": 40, "debt": 60, "goldSilver": 0}),
})

# Step 2a: fraction of the portfolio per vehicle for small portfolios.
SMALL_SPLITS = _ro({
    RC.ULTRA_AGGRESSIVE: _ro({"Equity Mutual Funds": 1.0}),
    RC.AGGRESSIVE: _ro({"Equity Mutual Funds": 0.75, "Debt Mutual Funds": 0.15, "Direct Debt": 0.10}),
    RC.MODERATE: _ro({"Equity Mutual Funds": 0.60, "Debt Mutual Funds": 0.20, "Direct Debt": 0.20}),
    RC.CONSERVATIVE: _ro({"Equity Mutual Funds": 0.40, "Debt Mutual Funds": 0.30, "Direct Debt": 0.30}),
})


def _rows(labels, table):
    return _ro({size: _ro(dict(zip(labels, amounts))) for size, amounts in table.items()})


_UA = ("AIF", "PMS", "Mutual Funds")
_SIX = ("Equity AIF", "Equity PMS", "Equity Mutual Funds", "Debt AIF", "Debt Mutual Funds", "Direct Debt")

# Step 2b: absolute crore amounts at each checkpoint size. Zero rows are kept.
CHECKPOINT_TABLES = _ro({
    RC.ULTRA_AGGRESSIVE: _rows(_UA, {
        2: (1.2, 0.5, 0.3),
        5: (3, 1.25, 0.75),
        10: (6, 2.5, 1.5),
        15: (9, 3.75, 2.25),
        20: (12, 5, 3),
        25: (15, 6.25, 3.75),
    }),
    RC.AGGRESSIVE: _rows(_SIX, {
        2: (0, 0.5, 1, 0, 0.25, 0.25),
        5: (2, 1, 0.75, 0, 0.5, 0.75),
        10: (4, 2, 1.5, 1, 0.5, 1),
        15: (6, 3, 2.25, 1.5, 0.75, 1.5),
        20: (8, 4, 3, 2, 1, 2),
        25: (10, 5, 3.75, 2.5, 1.25, 2.5),
    }),
    RC.MODERATE: _rows(_SIX, {
        2: (0, 0.5, 0.7, 0, 0.4, 0.4),
        5: (0, 1.25, 1.75, 0, 1, 1),
        10: (0, 2.5, 3.5, 0, 2, 2),
        15: (0, 3.75, 5.25, 0, 3, 3),
        20: (0, 5, 7, 0, 4, 4),
        25: (0, 6.25, 8.75, 0, 5, 5),
    }),
    RC.CONSERVATIVE: _rows(_SIX, {
        2: (0, 0, 0.8, 0, 0.6, 0.6),
        5: (0, 0.5, 1.5, 0, 1.5, 1.5),
        10: (0, 1, 3, 0, 3, 3),
        15: (0, 1.5, 4.5, 0, 4.5, 4.5),
        20: (0, 2, 6, 0, 6, 6),
        25: (0, 2.5, 7.5, 0, 7.5, 7.5),
    }),
})

CHECKPOINTS = (2, 5, 10, 15, 20, 25)

# Aggressive portfolios in (2, 5] crore get these amounts unscaled.
AGGRESSIVE_FIXED_BAND = (2.0, 5.0)
AGGRESSIVE_FIXED_VALUES = _ro({
    "Equity AIF": 2,
    "Equity PMS": 1,
    "Equity Mutual Funds": 0.75,
    "Debt Mutual Funds": 0.5,
    "Direct Debt": 0.75,
})

# Step 2c: closed-form fractions used when no table row applies. Each sums to 1.
FORMULA_SPLITS = _ro({
    RC.ULTRA_AGGRESSIVE: _ro({"AIF": 0.60, "PMS": 0.25, "Mutual Funds": 0.15}),
    RC.AGGRESSIVE: _ro({
        "Equity AIF": 0.40, "Equity PMS": 0.20, "Equity Mutual Funds": 0.15,
        "Debt AIF": 0.10, "Debt Mutual Funds": 0.05, "Direct Debt": 0.10,
    }),
    RC.MODERATE: _ro({
        "Equity PMS": 0.25, "Equity Mutual Funds": 0.35, "Debt Mutual Funds": 0.20, "Direct Debt": 0.20,
    }),
    RC.CONSERVATIVE: _ro({
        "Equity PMS": 0.10, "Equity Mutual Funds": 0.30, "Debt Mutual Funds": 0.30, "Direct Debt": 0.30,
    }),
})

# Vehicle label → (asset class, recommender vehicle type).
VEHICLES = _ro({
    "Equity Mutual Funds": ("equity", "mutualFunds"),
    "Mutual Funds": ("equity", "mutualFunds"),
    "Equity PMS": ("equity", "pms"),
    "PMS": ("equity", "pms"),
    "Equity AIF": ("equity", "aif"),
    "AIF": ("equity", "aif"),
    "Debt Mutual Funds": ("debt", "mutualFunds"),
    "Direct Debt": ("debt", "direct"),
    "Debt AIF": ("debt", "aif"),
})

# Step 3 policy: how a vehicle's share splits into displayed sub-buckets.
VEHICLE_SUB_BUCKETS = _ro({
    "Equity Mutual Funds": _ro({"Large Cap": 0.4, "Mid Cap": 0.3, "Small Cap": 0.3}),
    "Mutual Funds": _ro({"Large Cap": 0.4, "Mid Cap": 0.3, "Small Cap": 0.3}),
    "Equity PMS": _ro({"PMS": 1.0}),
    "PMS": _ro({"PMS": 1.0}),
    "Equity AIF": _ro({"AIF": 1.0}),
    "AIF": _ro({"AIF": 1.0}),
    "Debt Mutual Funds": _ro({"Government Bonds": 0.5, "Corporate Bonds": 0.5}),
    "Direct Debt": _ro({"Fixed Deposits": 1.0}),
    "Debt AIF": _ro({"Structured Products": 1.0}),
})

# Reverse view used by the recommender: sub-bucket → vehicle type per class.
SUB_BUCKET_VEHICLE = _ro({
    "equity": _ro({"Large Cap": "mutualFunds", "Mid Cap": "mutualFunds", "Small Cap": "mutualFunds",
                   "PMS": "pms", "AIF": "aif"}),
    "debt": _ro({"Government Bonds": "mutualFunds", "Corporate Bonds": "mutualFunds",
                 "Fixed Deposits": "direct", "Structured Products": "aif"}),
    "goldSilver": _ro({}),
})
