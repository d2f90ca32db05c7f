"""Search volume trend math and keyword classification."""

import math
import re
from typing import Optional, Sequence

from seowise.models import (
    CompetitionLevel,
    KeywordIntent,
    MonthlySearch,
    SearchVolumeTrend,
    TrendAnalysis,
    TrendDirection,
)

TRANSACTIONAL_PATTERN = re.compile(
    r"\b(buy|purchase|order|price|pricing|cheap|deal|discount|coupon|shop|store|sale|subscribe|hire)\b",
    re.IGNORECASE,
)
COMMERCIAL_PATTERN = re.compile(
    r"\b(best|top|review|compare|comparison|vs|versus|alternative|recommend)\b",
    re.IGNORECASE,
)
NAVIGATIONAL_PATTERN = re.compile(
    r"\b(login|sign in|signin|sign up|signup|official|website|homepage|account|dashboard|app)\b",
    re.IGNORECASE,
)

GROWTH_THRESHOLD = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent_change(previous: float, current: float) -> int:
    """Whole-number percentage change from ``previous`` to ``current``.

    A zero baseline yields 100 when the current value is positive, else 0.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return _round_half_up((current - previous) / previous * 100)


def calculate_trend(monthly_searches: Optional[Sequence[MonthlySearch]]) -> SearchVolumeTrend:
    """Compare the most recent month against 1, 3 and 12 months back.

    Missing comparison points fall back to the current value.
    """
    if not monthly_searches:
        return SearchVolumeTrend()

    ordered = sorted(monthly_searches, key=lambda m: (m.year, m.month), reverse=True)
    volumes = [m.search_volume for m in ordered]

    current = volumes[0]

    def lookback(index: int) -> int:
        return volumes[index] if index < len(volumes) else current

    return SearchVolumeTrend(
        monthly=percent_change(lookback(1), current),
        quarterly=percent_change(lookback(3), current),
        yearly=percent_change(lookback(11), current),
    )


def analyze_trend(monthly_searches: Optional[Sequence[MonthlySearch]]) -> TrendAnalysis:
    """Derive direction, seasonality and growth from a monthly series."""
    if not monthly_searches or len(monthly_searches) < 2:
        return TrendAnalysis()

    ordered = sorted(monthly_searches, key=lambda m: (m.year, m.month))
    volumes = [m.search_volume for m in ordered]

    current = volumes[-1]
    previous = volumes[-12] if len(volumes) >= 12 else volumes[0]
    growth_rate = percent_change(previous, current)

    mean = sum(volumes) / len(volumes)
    if mean == 0:
        seasonality_score = 0.0
    else:
        variance = sum((v - mean) ** 2 for v in volumes) / len(volumes)
        seasonality_score = _round_half_up(math.sqrt(variance) / mean * 100) / 100

    if growth_rate > GROWTH_THRESHOLD:
        direction = TrendDirection.UP
    elif growth_rate < -GROWTH_THRESHOLD:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.STABLE

    return TrendAnalysis(
        direction=direction,
        seasonality_score=seasonality_score,
        growth_rate=growth_rate,
    )


def classify_competition_level(score: float) -> CompetitionLevel:
    """Bucket a 0..1 competition score."""
    if score < 0.2:
        return CompetitionLevel.LOW
    if score < 0.7:
        return CompetitionLevel.MEDIUM
    if score < 0.85:
        return CompetitionLevel.HIGH
    return CompetitionLevel.VERY_HIGH


def classify_keyword_intent(keyword: str) -> KeywordIntent:
    """Guess search intent from the wording of a keyword."""
    if TRANSACTIONAL_PATTERN.search(keyword):
        return KeywordIntent.TRANSACTIONAL
    if COMMERCIAL_PATTERN.search(keyword):
        return KeywordIntent.COMMERCIAL
    if NAVIGATIONAL_PATTERN.search(keyword):
        return KeywordIntent.NAVIGATIONAL
    return KeywordIntent.INFORMATIONAL
