"""
Narrative formatter for proposals.

PURPOSE:
- Turn computed structures (risk profile, allocation, recommendations) into prose
  and Markdown tables.
- Assemble the proposal object and render it to a single Markdown document.

CONTEXT:
- Pure functions; nothing here changes the numbers it is given.
- The asset-allocation section reads detailedAllocation["Total"] and falls back to a
  percentage-only table for older allocation results that lack it.

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

from proposal_engine.model_interface.types import ManualAllocation, RiskCategory
from proposal_engine.utils.rounding import round_half_up

TZ = ZoneInfo("Asia/Kolkata")
CRORE = 10_000_000


class RenderError(RuntimeError):
    """Raised when the document cannot be rendered from an otherwise valid proposal."""


# -------------------- Risk text -------------------- #

CATEGORY_DESCRIPTIONS = {
    RiskCategory.CONSERVATIVE: (
        "A conservative risk profile (8-12 points) prioritizes capital preservation and income over growth. "
        "This portfolio has a higher allocation to fixed-income investments and alternative assets, with a "
        "smaller allocation to equities to provide some growth potential."
    ),
    RiskCategory.MODERATE: (
        "A moderate risk profile (13-17 points) balances growth potential with stability. This portfolio has a "
        "meaningful allocation to equities for growth, combined with fixed-income investments to provide income "
        "and reduce overall volatility."
    ),
    RiskCategory.AGGRESSIVE: (
        "An aggressive risk profile (18-22 points) indicates a willingness to accept higher volatility in exchange "
        "for potentially higher returns. This portfolio has a significant allocation to equity investments, which "
        "can experience substantial short-term fluctuations but historically offer better long-term growth potential."
    ),
    RiskCategory.ULTRA_AGGRESSIVE: (
        "An ultra-aggressive risk profile (23+ points) maximizes growth potential with very high tolerance for "
        "volatility. This portfolio has a dominant allocation to equity investments, potentially including "
        "higher-risk sectors, emerging markets, and alternative investments. Suitable for investors with very long "
        "time horizons and high risk tolerance."
    ),
}

SCORE_EXPLANATIONS = {
    RiskCategory.CONSERVATIVE: (
        "This indicates you prefer stability and capital preservation over high returns. Your portfolio will focus "
        "on minimizing volatility while providing modest growth potential."
    ),
    RiskCategory.MODERATE: (
        "This means you have a balanced approach to risk and return, seeking growth while maintaining some "
        "stability in your portfolio."
    ),
    RiskCategory.AGGRESSIVE: (
        "This suggests you are comfortable with higher volatility in pursuit of greater long-term returns. Your "
        "portfolio will focus on growth-oriented investments."
    ),
    RiskCategory.ULTRA_AGGRESSIVE: (
        "This indicates you are willing to accept very high volatility in pursuit of maximum long-term returns. "
        "Your portfolio will focus on high-growth investments."
    ),
}

CATEGORY_CHARACTERISTICS = {
    RiskCategory.ULTRA_AGGRESSIVE: (
        "Maximized for long-term capital appreciation",
        "Very high tolerance for market volatility",
        "Very long investment time horizon (10+ years)",
        "Suitable for investors with substantial risk capacity and willingness to accept significant fluctuations",
    ),
    RiskCategory.AGGRESSIVE: (
        "Focused on long-term capital appreciation",
        "Comfortable with market volatility",
        "Longer investment time horizon (7+ years)",
        "May be suitable for younger investors with time to recover from market downturns",
    ),
    RiskCategory.MODERATE: (
        "Balanced approach to growth and capital preservation",
        "Moderate tolerance for market fluctuations",
        "Medium to long investment time horizon (5+ years)",
        "Suitable for investors who want growth but with reduced volatility",
    ),
    RiskCategory.CONSERVATIVE: (
        "Focus on capital preservation and income",
        "Low tolerance for market volatility",
        "Shorter investment time horizon (3-5 years)",
        "May be suitable for investors nearing or in retirement",
    ),
}


def risk_assessment_details(score: int, category: RiskCategory) -> Dict[str, str]:
    return {
        "riskCategoryDescription": CATEGORY_DESCRIPTIONS[category],
        "riskScoreExplanation": (
            f"Your risk score of {score} places you in the {category.value.lower()} risk category. "
            f"{SCORE_EXPLANATIONS[category]}"
        ),
    }


def manual_allocation_details(manual: ManualAllocation, category: RiskCategory) -> Dict[str, str]:
    bullets = "\n".join(f"- {c}" for c in CATEGORY_CHARACTERISTICS[category])
    equity = _pct(manual.equity)
    text = (
        f"## {category.value} Risk Profile\n\n"
        f"{CATEGORY_DESCRIPTIONS[category]}\n\n"
        f"### Key Characteristics\n{bullets}\n\n"
        f"### Your Asset Allocation\n"
        f"- **Equity**: {equity}%\n"
        f"- **Fixed Income**: {_pct(manual.debt)}%\n\n"
        f"This risk profile is determined based on your manual asset allocation, particularly your "
        f"{equity}% allocation to equity investments."
    )
    return {"riskCategoryDescription": text}


def _pct(v) -> str:
    v = float(v or 0)
    return str(int(v)) if v.is_integer() else f"{v:g}"


# -------------------- Allocation text -------------------- #

_CATEGORY_ALLOCATION_TEXT = {
    RiskCategory.ULTRA_AGGRESSIVE: (
        " As an Ultra Aggressive investor, your allocation maximizes growth potential with very high equity "
        "exposure. While this strategy may experience significant volatility in the short term, it aims to provide "
        "superior returns over the long term."
    ),
    RiskCategory.AGGRESSIVE: (
        " As an Aggressive investor, your allocation favors growth with high equity exposure while maintaining a "
        "small position in debt and alternative investments for some stability. This strategy is designed for "
        "investors who can tolerate substantial market fluctuations."
    ),
    RiskCategory.MODERATE: (
        " As a Moderate investor, your allocation balances growth potential with stability, providing a balanced "
        "mix of equity and debt investments."
    ),
    RiskCategory.CONSERVATIVE: (
        " As a Conservative investor, your allocation prioritizes capital preservation and income generation with "
        "a greater emphasis on debt investments. This approach aims to minimize volatility while still providing "
        "some growth potential through a smaller equity allocation."
    ),
}


def allocation_explanation(category: RiskCategory, size_crore: float) -> str:
    places = 2 if size_crore < 1 else 1
    shown = f"₹{round_half_up(size_crore, places):g} crores"
    text = (
        f"Based on your {category.value} risk profile and portfolio size ({shown}), we have created an asset "
        f"allocation strategy that balances your risk tolerance with your investment objectives."
    )
    text += _CATEGORY_ALLOCATION_TEXT[category]
    if size_crore <= 1:
        text += " With a smaller portfolio size, we focus on well-diversified mutual funds to achieve proper diversification."
    elif size_crore <= 2:
        text += " With your portfolio size, we can include PMS (Portfolio Management Services) for a more tailored equity approach."
    elif size_crore <= 5:
        text += (" With your portfolio size, we can include a mix of mutual funds, PMS, and some alternative "
                 "investment funds to optimize returns while managing risk.")
    else:
        text += (" With your substantial portfolio size, we can include a comprehensive mix of mutual funds, direct "
                 "investments, PMS, and alternative investment funds to optimize returns while managing risk.")
    return text


# -------------------- Recommendation text -------------------- #

_EQUITY_LINES = {
    "mutualFunds": ("Equity mutual funds focused on {} stocks.",
                    ("large-cap and dividend-yielding", "multi-cap and focused", "mid-cap, small-cap, and sectoral")),
    "pms": ("Portfolio Management Services (PMS) with a {} approach.",
            ("blue-chip", "multi-strategy", "concentrated growth")),
    "aif": ("Alternative Investment Funds (AIF) with {} strategies.",
            ("long-only value", "special situations", "long-short")),
    "etf": ("Index ETFs for low-cost core market exposure.", None),
    "unlistedStocks": ("Select unlisted equities for pre-IPO growth exposure.", None),
}
_DEBT_LINES = {
    "mutualFunds": ("Debt mutual funds with {} strategies.",
                    ("liquid and ultra-short duration", "short duration and corporate bond", "credit risk and dynamic bond")),
    "direct": ("Direct debt investments in {}.",
               ("government securities", "AAA-rated corporate bonds", "AA-rated corporate bonds")),
    "aif": ("Debt AIFs focused on {}.", ("structured credit", "real estate debt", "distressed assets")),
    "debtPapers": ("Listed non-convertible debentures for fixed coupon income.", None),
}
_GOLD_LINES = {
    "etf": ("Gold and Silver ETFs for efficient exposure to precious metals.", None),
    "physical": ("Physical gold and silver for long-term wealth preservation.", None),
}
_LEVEL_INDEX = {"conservative": 0, "moderate": 1, "aggressive": 2}


def recommendation_summary(recommendations: Mapping[str, Any], category: RiskCategory) -> str:
    idx = _LEVEL_INDEX[category.catalog_level]
    summary = f"Based on your {category.value} risk profile, we have recommended a diversified portfolio of investment products."
    for key, heading, lines in (("equity", "equity", _EQUITY_LINES),
                                ("debt", "debt", _DEBT_LINES),
                                ("goldSilver", "gold/silver", _GOLD_LINES)):
        vehicles = recommendations.get(key) or {}
        if not vehicles:
            continue
        summary += f"\n\nFor {heading} allocation:"
        for vehicle, (template, choices) in lines.items():
            if vehicle in vehicles:
                summary += "\n- " + (template.format(choices[idx]) if choices else template)
    return summary


# -------------------- Currency -------------------- #

def format_inr(amount) -> str:
    """Whole rupees with 3-digit grouping, e.g. 12500000 → "12,500,000"."""
    return f"{round_half_up(amount or 0):,}"


# -------------------- Proposal sections -------------------- #

def client_profile_section(client: Mapping[str, Any], risk: Mapping[str, Any]) -> str:
    person = client.get("personalInfo") or {}
    obj = client.get("investmentObjectives") or {}
    fin = client.get("financialSituation") or {}
    goals = obj.get("primaryGoals") or []

    lines = [
        "## Personal Information",
        f"- **Name**: {person.get('name') or 'N/A'}",
        f"- **Age**: {person.get('age') or 'N/A'}",
        f"- **Occupation**: {person.get('occupation') or 'N/A'}",
        f"- **Annual Income**: ₹{format_inr(fin.get('annualIncome'))}",
        f"- **Existing Investments**: ₹{format_inr(fin.get('existingInvestments'))}",
        "",
        "## Investment Objectives",
        f"- **Primary Goals**: {', '.join(goals) if goals else 'N/A'}",
        f"- **Investment Horizon**: {obj.get('investmentHorizon') or 'N/A'}",
        f"- **Initial Investment Amount**: ₹{format_inr(obj.get('initialInvestmentAmount'))}",
    ]
    if obj.get("regularContributionAmount"):
        lines.append(f"- **Regular Monthly Contribution**: ₹{format_inr(obj['regularContributionAmount'])}")
    lines += [
        "",
        "## Risk Profile",
        f"- **Risk Category**: {risk.get('riskCategory') or 'N/A'}",
        f"- **Risk Score**: {risk.get('riskScore') or 'N/A'}",
    ]
    flags = risk.get("inconsistencies") or []
    if flags:
        lines += ["", "### Points to Discuss"] + [f"- {f['message']}" for f in flags]
    desc = (risk.get("riskAssessmentDetails") or {}).get("riskCategoryDescription")
    if desc:
        lines += ["", desc]
    return "\n".join(lines)


def _group_for(label: str) -> str:
    if "Equity" in label:
        return "Equity"
    if "Debt" in label:
        return "Debt"
    if "AIF" in label or "PMS" in label:
        return "Alternative Investments"
    return "Other"


def _detailed_table(detailed: Mapping[str, float]) -> str:
    groups: Dict[str, List[str]] = {"Equity": [], "Debt": [], "Alternative Investments": [], "Other": []}
    for label, crore in detailed.items():
        if label in ("Total", "error"):
            continue
        groups[_group_for(label)].append(f"| | {label} | ₹{format_inr(crore * CRORE)} |")

    rows = []
    for name, items in groups.items():
        if items:
            rows.append(f"| **{name}** | | |")
            rows.extend(items)
    vehicles = sum(v for k, v in detailed.items() if k not in ("Total", "error"))
    rows.append(f"| **Total Investment** | | ₹{format_inr(detailed['Total'] * CRORE)} |")
    if abs(vehicles - detailed["Total"]) > 1e-4 * detailed["Total"]:
        # Fixed-band rows are not scaled to the portfolio size.
        rows.append(f"| *Note* | Vehicle amounts above total ₹{format_inr(vehicles * CRORE)}; "
                    "this band uses fixed amounts that are not scaled to the investment | |")
    return "\n".join(rows)


def _legacy_table(classes: Mapping[str, Any], amount: float) -> str:
    eq = (classes.get("equity") or 0) / 100 * amount
    dt = (classes.get("debt") or 0) / 100 * amount
    gs = (classes.get("goldSilver") or 0) / 100 * amount
    rows = [
        f"| **Equity - {classes.get('equity') or 0}%** | | |",
        f"| | Mutual Funds | ₹{format_inr(eq * 0.7)} |",
        f"| | - Large Cap Fund | ₹{format_inr(eq * 0.25)} |",
        f"| | - Global Fund | ₹{format_inr(eq * 0.15)} |",
        f"| | - Hybrid/Multi-Asset Fund | ₹{format_inr(eq * 0.15)} |",
        f"| | - Thematic Fund | ₹{format_inr(eq * 0.15)} |",
        f"| | ETFs | ₹{format_inr(eq * 0.3)} |",
        f"| **Debt - {classes.get('debt') or 0}%** | | |",
        f"| | Mutual Funds | ₹{format_inr(dt * 0.5)} |",
        f"| | Bonds | ₹{format_inr(dt * 0.5)} |",
        f"| **Gold/Silver - {classes.get('goldSilver') or 0}%** | | |",
        f"| | ETFs | ₹{format_inr(gs * 0.6)} |",
        f"| | Physical | ₹{format_inr(gs * 0.4)} |",
        f"| **Total Investment** | | ₹{format_inr(amount)} |",
    ]
    return "\n".join(rows)


def asset_allocation_section(allocation: Mapping[str, Any], initial_investment: float) -> str:
    """
    Percentage table plus the detailed vehicle table in rupees.

    notes:
    - Uses detailedAllocation when it carries a Total; its rows sum to that Total
      except for the Aggressive fixed band, where the fixed amounts are shown as-is.
    - Otherwise falls back to the legacy percentage split of initial_investment.
    """
    classes = allocation.get("assetClassAllocation") or {}
    detailed = allocation.get("detailedAllocation") or {}

    if detailed.get("Total"):
        body = _detailed_table(detailed)
    else:
        body = _legacy_table(classes, initial_investment)

    return "\n".join([
        "## Asset Allocation Strategy",
        "",
        f"Based on your risk profile ({allocation.get('riskCategory') or 'Moderate'}), "
        "we recommend the following asset allocation:",
        "",
        "| Asset Class | Allocation (%) |",
        "|-------------|----------------|",
        f"| Equity | {classes.get('equity') or 0}% |",
        f"| Debt | {classes.get('debt') or 0}% |",
        f"| Gold/Silver | {classes.get('goldSilver') or 0}% |",
        "",
        "## Detailed Asset Allocation",
        "",
        "| Asset Class | Investment Vehicle | Amount (₹) |",
        "|-------------|-------------------|------------|",
        body,
        "",
        allocation.get("allocationExplanation") or "",
    ]).rstrip() + "\n"


_VEHICLE_TITLES = {
    "mutualFunds": "Mutual Funds",
    "pms": "Portfolio Management Services",
    "aif": "Alternative Investment Funds",
    "etf": "ETFs",
    "direct": "Direct Debt",
    "physical": "Physical",
    "unlistedStocks": "Unlisted Stocks",
    "debtPapers": "Debt Papers",
}
_CLASS_TITLES = (("equity", "Equity"), ("debt", "Debt"), ("goldSilver", "Gold/Silver"))


def products_section(recommendations: Mapping[str, Any]) -> str:
    parts = [recommendations.get("summary") or ""]
    n = 0
    for key, title in _CLASS_TITLES:
        for vehicle, rec in (recommendations.get(key) or {}).items():
            n += 1
            name = _VEHICLE_TITLES.get(vehicle, vehicle)
            parts.append(f"\n### {n}) {title} {name}: (Target: ₹{format_inr(rec.get('amount'))}, "
                         f"{_pct(rec.get('allocation'))}% of {title.lower()})\n")
            parts.append("| Product | Expected Return | Risk | Lock-in |")
            parts.append("|---------|-----------------|------|---------|")
            for p in rec.get("products") or []:
                parts.append(f"| {p.get('name', '')} | {p.get('expectedReturn', '')} | "
                             f"{p.get('risk', '')} | {p.get('lockInPeriod', '')} |")
    return "\n".join(parts).strip() + "\n"


def implementation_section(client: Mapping[str, Any]) -> str:
    obj = client.get("investmentObjectives") or {}
    initial = obj.get("initialInvestmentAmount") or 0
    sip = obj.get("regularContributionAmount") or 0
    if sip > 0:
        strategy = "Lump Sum + SIP"
        heading = "## Lump Sum + Systematic Investment Plan (SIP)"
        plan = (f"We recommend investing the initial amount of ₹{format_inr(initial)} as per the asset allocation "
                f"strategy outlined above. Additionally, we recommend setting up a monthly SIP of "
                f"₹{format_inr(sip)} to continue building your portfolio over time.")
    else:
        strategy = "Lump Sum"
        heading = "## Lump Sum Investment"
        plan = (f"We recommend investing the entire amount of ₹{format_inr(initial)} as per the asset allocation "
                f"strategy outlined above. This approach is suitable given your investment horizon and current "
                f"market conditions.")
    return "\n".join([
        f"## Investment Strategy: {strategy}",
        "",
        heading,
        "",
        plan,
        "",
        "## Timeline",
        "",
        "1. **Initial Meeting**: Review and finalize this investment proposal",
        "2. **Documentation**: Complete necessary KYC and account opening formalities",
        "3. **Initial Investment**: Execute the first phase of investments as per the strategy",
        "4. **Follow-up**: Schedule a review meeting after 3 months to assess portfolio performance",
        "5. **Regular Reviews**: Conduct quarterly portfolio reviews to ensure alignment with goals",
    ]) + "\n"


DISCLAIMER = (
    "Investments in securities market are subject to market risks, read all the related documents carefully "
    "before investing. Past performance may not necessarily be an indicator of future performance. The "
    "information in this proposal is for the intended recipient only and does not constitute an offer to buy "
    "or sell any security."
)


def build_proposal(client: Mapping[str, Any], risk: Mapping[str, Any], allocation: Mapping[str, Any],
                   recommendations: Mapping[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Assemble the proposal object from JSON-ready parts.

    returns:
    - dict – {"title", "date", "sections": [{"key", "title", "content"}, ...]}
    """
    now = now or datetime.now(TZ)
    name = (client.get("personalInfo") or {}).get("name") or "Client"
    initial = (client.get("investmentObjectives") or {}).get("initialInvestmentAmount") or 0
    return {
        "title": f"Investment Proposal for {name}",
        "date": f"{now.day} {now.strftime('%B %Y')}",
        "sections": [
            {"key": "clientProfileRecap", "title": "Client Profile",
             "content": client_profile_section(client, risk)},
            {"key": "assetAllocationSummary", "title": "Asset Allocation",
             "content": asset_allocation_section(allocation, initial)},
            {"key": "productDetails", "title": "Investment Products",
             "content": products_section(recommendations)},
            {"key": "implementationPlan", "title": "Implementation Plan",
             "content": implementation_section(client)},
            {"key": "disclaimers", "title": "Disclaimer", "content": DISCLAIMER},
        ],
    }


def render_markdown(proposal: Mapping[str, Any]) -> str:
    """
    Render a proposal object into one Markdown document.

    raises:
    - RenderError – when the proposal is missing its title or sections.
    """
    try:
        out = [f"# {proposal['title']}", "", f"**Date:** {proposal['date']}", ""]
        for section in proposal["sections"]:
            if not section.get("content"):
                continue
            out += [f"# {section['title']}", "", section["content"].strip(), ""]
    except (KeyError, TypeError, AttributeError) as e:
        raise RenderError(f"cannot render proposal: {type(e).__name__}: {e}") from e
    return "\n".join(out)
