"""Pydantic models for SeoWise results and metrics."""

from typing import Optional, Dict, Any, List, Generic, TypeVar
from enum import Enum
from pydantic import BaseModel, Field

RecordT = TypeVar("RecordT")


class KeywordIntent(str, Enum):
    """Search intent of a keyword."""
    INFORMATIONAL = "informational"
    NAVIGATIONAL = "navigational"
    COMMERCIAL = "commercial"
    TRANSACTIONAL = "transactional"


class CompetitionLevel(str, Enum):
    """Paid competition tiers."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class TrendDirection(str, Enum):
    """Direction of a search volume trend."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MonthlySearch(BaseModel):
    """Search volume for one calendar month."""

    year: int = 0
    month: int = 0
    search_volume: int = 0


class SearchVolumeTrend(BaseModel):
    """Percentage change of the latest month against 1, 3 and 12 months back."""

    monthly: int = 0
    quarterly: int = 0
    yearly: int = 0


class TrendAnalysis(BaseModel):
    """Direction, seasonality and growth of a monthly series."""

    direction: TrendDirection = TrendDirection.STABLE
    seasonality_score: float = 0.0
    growth_rate: int = 0


class BacklinksData(BaseModel):
    """Average backlink profile of the pages ranking for a keyword."""

    backlinks: float = 0.0
    dofollow_backlinks: float = 0.0
    referring_pages: float = 0.0
    referring_domains: float = 0.0
    page_rank: float = 0.0
    domain_rank: float = 0.0


class GenderDistribution(BaseModel):
    """Share of searchers per gender."""

    male: float = 0.0
    female: float = 0.0


class KeywordSuggestion(BaseModel):
    """A keyword suggestion flattened for display."""

    id: int
    keyword: str
    location_code: int = 0
    language_code: str = ""
    search_volume: int = 0
    ppc: float = 0.0
    ppc_level: str = ""
    cpc: float = 0.0
    low_top_page_bid: Optional[float] = None
    high_top_page_bid: Optional[float] = None
    monthly_searches: List[MonthlySearch] = Field(default_factory=list)
    search_volume_trend: SearchVolumeTrend = Field(default_factory=SearchVolumeTrend)
    trend_analysis: TrendAnalysis = Field(default_factory=TrendAnalysis)
    search_intent: Optional[str] = None
    keyword_difficulty: Optional[int] = None
    avg_backlinks_data: Optional[BacklinksData] = None


class KeywordOverview(BaseModel):
    """Keyword overview with optional clickstream demographics."""

    keyword: str
    location_code: int = 0
    language_code: str = ""
    search_volume: int = 0
    ppc: float = 0.0
    ppc_level: str = ""
    cpc: float = 0.0
    low_top_page_bid: Optional[float] = None
    high_top_page_bid: Optional[float] = None
    monthly_searches: List[MonthlySearch] = Field(default_factory=list)
    search_volume_trend: SearchVolumeTrend = Field(default_factory=SearchVolumeTrend)
    trend_analysis: TrendAnalysis = Field(default_factory=TrendAnalysis)
    search_intent: Optional[str] = None
    keyword_difficulty: Optional[int] = None
    avg_backlinks_data: Optional[BacklinksData] = None
    gender_distribution: Optional[GenderDistribution] = None
    age_distribution: Optional[Dict[str, float]] = None


class DomainKeyword(BaseModel):
    """A keyword a domain is relevant for."""

    keyword: str
    search_volume: int = 0
    cpc: float = 0.0
    competition: Optional[float] = None
    competition_level: str = ""
    monthly_searches: List[MonthlySearch] = Field(default_factory=list)
    search_volume_trend: SearchVolumeTrend = Field(default_factory=SearchVolumeTrend)
    trend_analysis: TrendAnalysis = Field(default_factory=TrendAnalysis)


class TransformResult(BaseModel, Generic[RecordT]):
    """Transformed records plus envelope metadata."""

    data: List[RecordT] = Field(default_factory=list)
    total_results: int = 0
    cost: float = 0.0
    status_code: int = 0


class ParsedTask(BaseModel):
    """One task of a parsed response envelope."""

    status_code: int = 0
    status_message: str = ""
    cost: float = 0.0
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0
    result: List[Dict[str, Any]] = Field(default_factory=list)
    result_count: Optional[int] = None


class ParsedResponse(BaseModel):
    """A response envelope with every task normalized."""

    tasks: List[ParsedTask] = Field(default_factory=list)
    cost: float = 0.0
    version: str = ""

    @property
    def first_task(self) -> Optional[ParsedTask]:
        """First task, the only one for live endpoints."""
        return self.tasks[0] if self.tasks else None


class ApiMetrics(BaseModel):
    """Snapshot of per-session API usage."""

    requests_made: int = 0
    credits_used: float = 0.0
    successful_requests: int = 0
    failed_requests: int = 0
    rate_limit_hits: int = 0
    avg_response_time_ms: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.requests_made == 0:
            return 0.0
        return self.successful_requests / self.requests_made
