"""Schemas for raw DataForSEO payloads.

The upstream API is loose about absent values: fields come back as ``null``
as often as they are omitted, and empty lists are frequently ``null``.
Every schema here treats ``null`` as "missing" so the declared defaults
apply, and ignores fields it does not know about.
"""

from typing import Optional, Dict, Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RawModel(BaseModel):
    """Base for upstream payload schemas."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RawTask(RawModel):
    status_code: int = 0
    status_message: str = ""
    cost: float = 0.0
    result: List[Dict[str, Any]] = Field(default_factory=list)
    result_count: Optional[int] = None


class RawResult(RawModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_count: Optional[int] = None


class RawEnvelope(RawModel):
    version: str = ""
    cost: float = 0.0
    tasks: List[RawTask]


class RawMonthlySearch(RawModel):
    year: int = 0
    month: int = 0
    search_volume: int = 0


class RawKeywordInfo(RawModel):
    search_volume: int = 0
    competition: float = 0.0
    competition_level: str = ""
    cpc: float = 0.0
    low_top_of_page_bid: Optional[float] = None
    high_top_of_page_bid: Optional[float] = None
    monthly_searches: List[RawMonthlySearch] = Field(default_factory=list)


class RawSearchIntentInfo(RawModel):
    main_intent: Optional[str] = None


class RawKeywordProperties(RawModel):
    keyword_difficulty: Optional[int] = None
    search_intent_info: Optional[RawSearchIntentInfo] = None


class RawBacklinksInfo(RawModel):
    backlinks: Optional[float] = None
    dofollow: float = 0.0
    referring_pages: float = 0.0
    referring_domains: float = 0.0
    rank: float = 0.0
    main_domain_rank: float = 0.0


class RawClickstreamInfo(RawModel):
    gender_distribution: Optional[Dict[str, float]] = None
    age_distribution: Optional[Dict[str, float]] = None


class RawKeywordItem(RawModel):
    """Item shape shared by the Labs suggestion and overview endpoints."""

    keyword: str = ""
    location_code: int = 0
    language_code: str = ""
    keyword_info: RawKeywordInfo = Field(default_factory=RawKeywordInfo)
    keyword_properties: RawKeywordProperties = Field(default_factory=RawKeywordProperties)
    search_intent_info: Optional[RawSearchIntentInfo] = None
    avg_backlinks_info: Optional[RawBacklinksInfo] = None
    clickstream_keyword_info: Optional[RawClickstreamInfo] = None


class RawDomainKeywordItem(RawModel):
    """Flat item returned by the Google Ads keywords_for_site endpoint.

    ``competition`` is sometimes sent as a tier name ("LOW", "HIGH", ...)
    with the numeric score in ``competition_index`` (0-100).
    """

    keyword: str = ""
    search_volume: int = 0
    cpc: float = 0.0
    competition: Optional[float] = None
    competition_index: Optional[float] = None
    competition_level: Optional[str] = None
    monthly_searches: List[RawMonthlySearch] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def split_competition_tier(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("competition"), str):
            return data

        data = dict(data)
        tier = data.pop("competition")
        if not data.get("competition_level"):
            data["competition_level"] = tier.upper()
        index = data.get("competition_index")
        if isinstance(index, (int, float)):
            data["competition"] = index / 100
        return data


class RawMoney(RawModel):
    balance: Optional[float] = None


class RawUserData(RawModel):
    money: RawMoney = Field(default_factory=RawMoney)
