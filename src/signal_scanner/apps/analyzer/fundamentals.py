"""Fundamentals scoring table.

Map ROE, profit margin, revenue and earnings growth, and trailing P/E to
point buckets (capped at 100) and collect a reason for each strong
reading. The scorer is stateless and has no history dependency.
"""

from decimal import Decimal

from signal_scanner.core.models import HUNDRED, ZERO, Fundamentals, FundamentalScore

_MAX_SCORE = 100

_ROE_STRONG = Decimal("0.15")
_ROE_FAIR = Decimal("0.08")
_MARGIN_STRONG = Decimal("0.2")
_MARGIN_FAIR = Decimal("0.1")
_GROWTH_STRONG = Decimal("0.2")
_PE_CHEAP = Decimal(15)
_PE_FAIR = Decimal(25)


def _pct(value: Decimal) -> str:
    """Format a decimal fraction as a one-decimal percentage."""
    return f"{value * HUNDRED:.1f}%"


def score_fundamentals(fundamentals: Fundamentals | None) -> FundamentalScore:
    """Score ``fundamentals`` out of 100.

    Profitability contributes up to 40 points, growth up to 30 and
    valuation up to 15. Ratios the provider did not report score nothing.

    Args:
        fundamentals: Ratios to score, or ``None`` when unavailable.

    Returns:
        The ``FundamentalScore`` with its reasons.

    """
    if fundamentals is None:
        return FundamentalScore(score=0)

    score = 0
    reasons: list[str] = []

    roe = fundamentals.roe
    if roe is not None and roe > _ROE_STRONG:
        score += 20
        reasons.append(f"Excellent ROE ({_pct(roe)})")
    elif roe is not None and roe > _ROE_FAIR:
        score += 10

    margin = fundamentals.profit_margin
    if margin is not None and margin > _MARGIN_STRONG:
        score += 20
        reasons.append(f"High profit margin ({_pct(margin)})")
    elif margin is not None and margin > _MARGIN_FAIR:
        score += 10

    revenue = fundamentals.revenue_growth
    if revenue is not None and revenue > _GROWTH_STRONG:
        score += 15
        reasons.append(f"Revenue surging ({_pct(revenue)})")
    elif revenue is not None and revenue > ZERO:
        score += 5

    earnings = fundamentals.earnings_growth
    if earnings is not None and earnings > _GROWTH_STRONG:
        score += 15
        reasons.append(f"Earnings growing strongly ({_pct(earnings)})")
    elif earnings is not None and earnings > ZERO:
        score += 5

    pe = fundamentals.pe_trailing
    if pe is not None and ZERO < pe < _PE_CHEAP:
        score += 15
        reasons.append(f"Attractive P/E ({pe:.1f})")
    elif pe is not None and ZERO < pe < _PE_FAIR:
        score += 5

    return FundamentalScore(score=min(_MAX_SCORE, score), reasons=tuple(reasons))
