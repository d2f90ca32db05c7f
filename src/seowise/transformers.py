"""Transform parsed DataForSEO responses into display records.

The Labs endpoints (keyword suggestions and keyword overview) nest their
records under ``result[0].items``. The Google Ads ``keywords_for_site``
endpoint instead returns records directly in ``result[]``, so domain
keywords are read from the raw result list.
"""

from typing import Optional, List, Type, TypeVar

from pydantic import ValidationError

from seowise.exceptions import SeoWiseError
from seowise.models import (
    BacklinksData,
    DomainKeyword,
    GenderDistribution,
    KeywordOverview,
    KeywordSuggestion,
    MonthlySearch,
    ParsedResponse,
    TransformResult,
)
from seowise.schemas import (
    RawBacklinksInfo,
    RawDomainKeywordItem,
    RawKeywordItem,
    RawModel,
    RawMonthlySearch,
)
from seowise.trends import (
    analyze_trend,
    calculate_trend,
    classify_competition_level,
    classify_keyword_intent,
)

RawT = TypeVar("RawT", bound=RawModel)


def _decode_items(schema: Type[RawT], items: List[dict]) -> List[RawT]:
    try:
        return [schema.model_validate(item) for item in items]
    except ValidationError as e:
        raise SeoWiseError(
            f"Invalid API response: malformed {schema.__name__} ({e.error_count()} error(s))"
        ) from e


def _monthly_searches(raw: List[RawMonthlySearch]) -> List[MonthlySearch]:
    return [
        MonthlySearch(year=m.year, month=m.month, search_volume=m.search_volume)
        for m in raw
    ]


def _backlinks(raw: Optional[RawBacklinksInfo]) -> Optional[BacklinksData]:
    if raw is None or raw.backlinks is None:
        return None
    return BacklinksData(
        backlinks=raw.backlinks,
        dofollow_backlinks=raw.dofollow,
        referring_pages=raw.referring_pages,
        referring_domains=raw.referring_domains,
        page_rank=raw.rank,
        domain_rank=raw.main_domain_rank,
    )


def _search_intent(item: RawKeywordItem) -> str:
    for info in (item.search_intent_info, item.keyword_properties.search_intent_info):
        if info is not None and info.main_intent:
            return info.main_intent
    return classify_keyword_intent(item.keyword).value


def _keyword_fields(item: RawKeywordItem) -> dict:
    info = item.keyword_info
    monthly = _monthly_searches(info.monthly_searches)
    return {
        "keyword": item.keyword,
        "location_code": item.location_code,
        "language_code": item.language_code,
        "search_volume": info.search_volume,
        "ppc": info.competition,
        "ppc_level": info.competition_level,
        "cpc": info.cpc,
        "low_top_page_bid": info.low_top_of_page_bid,
        "high_top_page_bid": info.high_top_of_page_bid,
        "monthly_searches": monthly,
        "search_volume_trend": calculate_trend(monthly),
        "trend_analysis": analyze_trend(monthly),
        "search_intent": _search_intent(item),
        "keyword_difficulty": item.keyword_properties.keyword_difficulty,
        "avg_backlinks_data": _backlinks(item.avg_backlinks_info),
    }


def transform_keyword_suggestions(
    response: ParsedResponse,
) -> TransformResult[KeywordSuggestion]:
    """Transform a keyword_suggestions/live response.

    Each suggestion gets a sequential ``id`` in response order.
    """
    task = response.first_task
    if task is None:
        return TransformResult[KeywordSuggestion](cost=response.cost)

    items = _decode_items(RawKeywordItem, task.items)
    data = [
        KeywordSuggestion(id=index, **_keyword_fields(item))
        for index, item in enumerate(items)
    ]

    return TransformResult[KeywordSuggestion](
        data=data,
        total_results=task.total_count,
        cost=response.cost,
        status_code=task.status_code,
    )


def transform_keyword_overview(
    response: ParsedResponse,
) -> TransformResult[KeywordOverview]:
    """Transform a keyword_overview/live response, including clickstream demographics."""
    task = response.first_task
    if task is None:
        return TransformResult[KeywordOverview](cost=response.cost)

    data = []
    for item in _decode_items(RawKeywordItem, task.items):
        clickstream = item.clickstream_keyword_info
        gender = None
        age = None
        if clickstream is not None:
            if clickstream.gender_distribution is not None:
                gender = GenderDistribution(
                    male=clickstream.gender_distribution.get("male", 0.0),
                    female=clickstream.gender_distribution.get("female", 0.0),
                )
            age = clickstream.age_distribution

        data.append(
            KeywordOverview(
                gender_distribution=gender,
                age_distribution=age,
                **_keyword_fields(item),
            )
        )

    return TransformResult[KeywordOverview](
        data=data,
        total_results=task.total_count,
        cost=response.cost,
        status_code=task.status_code,
    )


def transform_domain_keywords(
    response: ParsedResponse,
) -> TransformResult[DomainKeyword]:
    """Transform a keywords_for_site/live response."""
    task = response.first_task
    if task is None:
        return TransformResult[DomainKeyword](cost=response.cost)

    data = []
    for item in _decode_items(RawDomainKeywordItem, task.result):
        monthly = _monthly_searches(item.monthly_searches)
        level = item.competition_level or ""
        if not level and item.competition is not None:
            level = classify_competition_level(item.competition).value
        data.append(
            DomainKeyword(
                keyword=item.keyword,
                search_volume=item.search_volume,
                cpc=item.cpc,
                competition=item.competition,
                competition_level=level,
                monthly_searches=monthly,
                search_volume_trend=calculate_trend(monthly),
                trend_analysis=analyze_trend(monthly),
            )
        )

    total = task.result_count if task.result_count is not None else len(data)

    return TransformResult[DomainKeyword](
        data=data,
        total_results=total,
        cost=response.cost,
        status_code=task.status_code,
    )
