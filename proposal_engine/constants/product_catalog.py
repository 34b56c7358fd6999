# PURPOSE: Static product catalog and offline listing snapshots.
# CONTEXT: The catalog backs every vehicle when no live candidates are available.
#          Snapshots are served by the static product source (no network).
# CREDITS: Original work — no external code reuse.

from types import MappingProxyType as _ro


def _p(name, description, expected, risk, lock_in, minimum=None):
    d = {"name": name, "description": description, "expectedReturn": expected,
         "risk": risk, "lockInPeriod": lock_in}
    if minimum is not None:
        d["minimumInvestment"] = minimum
    return _ro(d)


# (asset class, vehicle type, risk level) → candidates.
CATALOG = _ro({
    "equity": _ro({
        "mutualFunds": _ro({
            "conservative": (
                _p("Large Cap Fund A", "Focus on stable large-cap companies", "10-12%", "Moderate", "None"),
                _p("Dividend Yield Fund B", "Companies with consistent dividend history", "9-11%", "Moderate-Low", "None"),
            ),
            "moderate": (
                _p("Multi Cap Fund C", "Diversified across market caps", "12-14%", "Moderate", "None"),
                _p("Focused Equity Fund D", "Concentrated portfolio of 25-30 stocks", "13-15%", "Moderate-High", "None"),
            ),
            "aggressive": (
                _p("Mid Cap Fund E", "Focus on high-growth mid-cap companies", "14-16%", "High", "None"),
                _p("Small Cap Fund F", "Emerging small-cap companies with high growth potential", "15-18%", "Very High", "None"),
                _p("Sectoral Fund G", "Focus on high-growth sectors", "15-20%", "Very High", "None"),
            ),
        }),
        "pms": _ro({
            "conservative": (_p("Blue Chip PMS H", "Focus on established blue-chip companies", "12-14%", "Moderate", "1 year", "50 Lakhs"),),
            "moderate": (_p("Multi-Strategy PMS I", "Blend of value and growth strategies", "14-16%", "Moderate-High", "1 year", "50 Lakhs"),),
            "aggressive": (_p("Concentrated Growth PMS J", "High-conviction portfolio of growth stocks", "16-20%", "High", "1 year", "50 Lakhs"),),
        }),
        "aif": _ro({
            "conservative": (_p("Long-Only Value AIF K", "Value investing approach with long-term horizon", "13-15%", "Moderate-High", "3 years", "1 Crore"),),
            "moderate": (_p("Special Situations AIF L", "Focus on special situations and turnarounds", "15-18%", "High", "3 years", "1 Crore"),),
            "aggressive": (_p("Long-Short AIF M", "Long-short strategy to capture market opportunities", "18-22%", "Very High", "3 years", "1 Crore"),),
        }),
        "etf": _ro({
            "moderate": (_p("Nippon India ETF Nifty BeES", "An ETF tracking the Nifty 50 index", "10-12% p.a.", "Moderate", "None"),),
        }),
    }),
    "debt": _ro({
        "mutualFunds": _ro({
            "conservative": (
                _p("Liquid Fund N", "Very low risk, high liquidity", "5-6%", "Very Low", "None"),
                _p("Ultra Short Duration Fund O", "Low risk, high liquidity", "6-7%", "Low", "None"),
            ),
            "moderate": (
                _p("Short Duration Fund P", "Moderate risk, good returns", "7-8%", "Low-Moderate", "None"),
                _p("Corporate Bond Fund Q", "Focus on high-quality corporate bonds", "7.5-8.5%", "Moderate", "None"),
            ),
            "aggressive": (
                _p("Credit Risk Fund R", "Higher yield through lower-rated bonds", "8-10%", "High", "None"),
                _p("Dynamic Bond Fund S", "Actively managed duration strategy", "8-9%", "Moderate-High", "None"),
            ),
        }),
        "direct": _ro({
            "conservative": (_p("Government Securities T", "Sovereign backed securities", "6.5-7.5%", "Very Low", "Varies", "10 Lakhs"),),
            "moderate": (_p("AAA Corporate Bonds U", "Highest rated corporate bonds", "7.5-8.5%", "Low", "Varies", "10 Lakhs"),),
            "aggressive": (_p("AA Corporate Bonds V", "High-yield corporate bonds", "8.5-9.5%", "Moderate", "Varies", "10 Lakhs"),),
        }),
        "aif": _ro({
            "conservative": (_p("Structured Credit AIF W", "Secured lending to established businesses", "9-11%", "Moderate", "3 years", "1 Crore"),),
            "moderate": (_p("Real Estate Debt AIF X", "Debt financing for real estate projects", "11-13%", "Moderate-High", "3 years", "1 Crore"),),
            "aggressive": (_p("High Yield Debt AIF Y", "Higher yield debt instruments", "13-15%", "High", "3 years", "1 Crore"),),
        }),
    }),
    "goldSilver": _ro({
        "etf": _ro({
            "moderate": (
                _p("Gold ETF", "Exchange-traded fund tracking gold prices", "8-10%", "Moderate", "None"),
                _p("Sovereign Gold Bond", "Government bonds denominated in grams of gold", "8-11%", "Moderate-Low", "5-8 years"),
                _p("Silver ETF", "Exchange-traded fund tracking silver prices", "8-12%", "Moderate-High", "None"),
            ),
        }),
        "physical": _ro({
            "moderate": (
                _p("Physical Gold", "Investment in physical gold bars or coins", "Variable", "Moderate", "None"),
                _p("Digital Gold", "Electronically held gold with physical delivery option", "Variable", "Moderate-Low", "None"),
                _p("Silver Coins/Bars", "Investment in physical silver", "Variable", "Moderate-High", "None"),
            ),
        }),
    }),
})

# Used when a class arrives without a vehicle split.
DEFAULT_VEHICLE_WEIGHTS = _ro({
    "equity": _ro({"mutualFunds": 80, "etf": 20}),
    "debt": _ro({"mutualFunds": 70, "direct": 30}),
    "goldSilver": _ro({"etf": 70, "physical": 30}),
})

# Stand-in for the debt "direct" vehicle under the default split.
DEFAULT_FIXED_DEPOSIT = _p(
    "Fixed Deposit - HDFC Bank", "Bank fixed deposit with stable returns", "5-6% p.a.", "Very Low", "1-5 years",
)


def catalog_products(asset_class, vehicle_type, risk_level):
    """
    Return fresh copies of the catalog entries for a key.

    Falls back to the "moderate" row, then to an empty list.
    """
    rows = CATALOG.get(asset_class, {}).get(vehicle_type, {})
    picked = rows.get(risk_level) or rows.get("moderate") or ()
    out = []
    for p in picked:
        d = dict(p)
        d["dataSource"] = "catalog"
        out.append(d)
    return out


# Listing codes used by the product-listing API.
PRODUCT_CODES = _ro({
    "unlistedStocks": "IVP001",
    "debtPapers": "IVP002",
    "pms": "IVP004",
    "aif": "IVP005",
})

# Offline snapshots in the raw listing format, one list per code.
LISTING_SNAPSHOTS = _ro({
    "IVP002": (
        {
            "instrument_name": "Northern Arc Capital NCD Series I",
            "instrument_type": "Non-Convertible Debenture",
            "manufacturer_id": {"manufacturer_name": "Northern Arc Capital"},
            "maturity_date": "15 Apr 2026",
            "rating": "AA",
            "yield": "9.25%",
            "face_value": 10000,
            "min_investment": 200000,
            "interest_payment": "Annual",
            "listed": True,
            "risk_grade": "Moderate",
            "issuer_description": "Northern Arc Capital is a leading financial services platform in India focused on underserved individuals and businesses",
            "issue_size": "500 Crore",
        },
        {
            "instrument_name": "Shriram Transport Finance NCD Series II",
            "instrument_type": "Non-Convertible Debenture",
            "manufacturer_id": {"manufacturer_name": "Shriram Transport Finance"},
            "maturity_date": "22 Jul 2027",
            "rating": "AA+",
            "yield": "8.75%",
            "face_value": 1000,
            "min_investment": 100000,
            "interest_payment": "Quarterly",
            "listed": True,
            "risk_grade": "Low-Moderate",
            "issuer_description": "Shriram Transport Finance is a leading NBFC in commercial vehicle financing sector",
            "issue_size": "750 Crore",
        },
        {
            "instrument_name": "Piramal Capital Secured NCD 2025",
            "instrument_type": "Secured Non-Convertible Debenture",
            "manufacturer_id": {"manufacturer_name": "Piramal Capital & Housing Finance"},
            "maturity_date": "10 Mar 2025",
            "rating": "AA-",
            "yield": "9.50%",
            "face_value": 1000,
            "min_investment": 150000,
            "interest_payment": "Semi-Annual",
            "listed": True,
            "risk_grade": "Moderate",
            "issuer_description": "Piramal Capital & Housing Finance is a diversified financial services conglomerate with presence across real estate and non-real estate lending",
            "issue_size": "400 Crore",
        },
    ),
    "IVP004": (
        {
            "scheme_name": "Seven Island",
            "scheme_benchmark_name": "S&P BSE 500 Total Return Index",
            "scheme_classification": "Mid Cap",
            "scheme_risk_grade": "Moderate-High",
            "scheme_objective": "To invest in a portfolio of mid-cap companies with strong growth potential",
            "scheme_exit_load": "1 Year: 2%",
            "scheme_min_investment": 5000000,
            "active_returns_1_month": "2000",
            "manufacturer_id": {"manufacturer_name": "Mansi Share & Stock Advisors Pvt Ltd"},
            "fund_managers": [{"fund_manager_name": "Niranjan"}],
        },
        {
            "scheme_name": "Northern Arc Income Builder Fund Series II",
            "scheme_benchmark_name": "CRISIL Composite Bond Index",
            "scheme_classification": "Large Cap",
            "scheme_risk_grade": "Aggressive",
            "scheme_objective": "To invest in a mix of microfinance, small business loan finance, affordable housing finance and corporate finance debt to earn higher risk-adjusted returns",
            "scheme_exit_load": "None",
            "scheme_min_investment": 5000000,
            "active_returns_1_month": "1000",
            "manufacturer_id": {"manufacturer_name": "Motilal Oswal Asset Management"},
            "fund_managers": [{"fund_manager_name": "Vijay Chouhan"}],
        },
    ),
    "IVP005": (
        {
            "scheme_name": "Special Situations AIF",
            "scheme_objective": "Focuses on special situations and turnaround opportunities in the market",
            "active_returns_1_month": "1670",
            "scheme_risk_grade": "High",
            "scheme_exit_load": "3 years",
            "scheme_min_investment": 10000000,
            "fund_manager": "ICICI Prudential AMC",
            "scheme_classification": "Special Situations",
        },
        {
            "scheme_name": "Long-Short Equity AIF",
            "scheme_objective": "Long-short strategy to capture market opportunities while hedging downside risk",
            "active_returns_1_month": "1420",
            "scheme_risk_grade": "Moderate-High",
            "scheme_exit_load": "3 years",
            "scheme_min_investment": 10000000,
            "fund_manager": "Edelweiss Asset Management",
            "scheme_classification": "Long-Short Equity",
        },
    ),
    "IVP001": (
        {
            "script_name": "Cochin International Airport Limited",
            "isin_number": "INE02KH01019",
            "face_value": "100",
            "sector_name": "Aviation",
            "documents": [{"document_name": "Script Logo", "is_uploaded": True,
                           "path": "https://ivdevstroage.blob.core.windows.net/sample-files/cial-logo(1).jpg"}],
        },
        {
            "script_name": "SBI MUTUAL FUND",
            "isin_number": "INE640G01020",
            "face_value": "10",
            "sector_name": "Finance",
            "documents": [],
        },
        {
            "script_name": "Indian Potash",
            "isin_number": "INE863S01015",
            "face_value": "10",
            "sector_name": "Agriculture",
            "documents": [],
        },
    ),
})
