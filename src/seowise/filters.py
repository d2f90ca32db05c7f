"""Keyword filter expressions for the Labs keyword suggestion endpoint."""

from typing import Optional, Any, List

from pydantic import BaseModel, ConfigDict, Field

from seowise.models import KeywordIntent

Condition = List[Any]


class KeywordFilters(BaseModel):
    """User-facing keyword filters.

    PPC bounds are percentages (0-100); upstream competition is 0-1.
    """

    model_config = ConfigDict(extra="forbid")

    min_search_volume: Optional[int] = Field(default=None, ge=0)
    max_search_volume: Optional[int] = Field(default=None, ge=0)
    min_cpc: Optional[float] = Field(default=None, ge=0)
    max_cpc: Optional[float] = Field(default=None, ge=0)
    min_ppc: Optional[float] = Field(default=None, ge=0, le=100)
    max_ppc: Optional[float] = Field(default=None, ge=0, le=100)
    min_kd: Optional[int] = Field(default=None, ge=0, le=100)
    max_kd: Optional[int] = Field(default=None, ge=0, le=100)
    include_keyword: Optional[str] = None
    exclude_keyword: Optional[str] = None
    search_intents: List[KeywordIntent] = Field(default_factory=list)


def _conditions(filters: KeywordFilters) -> List[Condition]:
    conditions: List[Condition] = []

    if filters.min_search_volume is not None:
        conditions.append(["keyword_info.search_volume", ">=", filters.min_search_volume])
    if filters.max_search_volume is not None:
        conditions.append(["keyword_info.search_volume", "<=", filters.max_search_volume])
    if filters.min_cpc is not None:
        conditions.append(["keyword_info.cpc", ">=", filters.min_cpc])
    if filters.max_cpc is not None:
        conditions.append(["keyword_info.cpc", "<=", filters.max_cpc])
    if filters.min_ppc is not None:
        conditions.append(["keyword_info.competition", ">=", filters.min_ppc / 100])
    if filters.max_ppc is not None:
        conditions.append(["keyword_info.competition", "<=", filters.max_ppc / 100])
    if filters.min_kd is not None:
        conditions.append(["keyword_properties.keyword_difficulty", ">=", filters.min_kd])
    if filters.max_kd is not None:
        conditions.append(["keyword_properties.keyword_difficulty", "<=", filters.max_kd])
    if filters.include_keyword:
        conditions.append(["keyword", "like", f"%{filters.include_keyword}%"])
    if filters.exclude_keyword:
        conditions.append(["keyword", "not_like", f"%{filters.exclude_keyword}%"])
    if filters.search_intents:
        conditions.append([
            "search_intent_info.main_intent",
            "in",
            [intent.value for intent in filters.search_intents],
        ])

    return conditions


def build_keyword_filters(filters: Optional[KeywordFilters]) -> List[Any]:
    """Build the upstream filter expression.

    Args:
        filters: Filters to apply, or None.

    Returns:
        A list of conditions joined by ``"and"``, empty when nothing is set.
    """
    if filters is None:
        return []

    expression: List[Any] = []
    for condition in _conditions(filters):
        if expression:
            expression.append("and")
        expression.append(condition)
    return expression
