"""
SeoWise - Resilient async client for the DataForSEO keyword APIs.

A keyword research gateway featuring:
- Validated configuration and credential loading
- Sliding-window rate limiting with escalating backoff
- Exponential backoff retries with jitter
- Cache-aside storage of transformed results
- Trend analysis and keyword classification
- Secure logging with credential redaction
"""

from seowise.client import KeywordDataClient
from seowise.config import ClientConfig, Credentials, create_config, load_credentials
from seowise.rate_limiter import RateLimiter, RateLimitResult
from seowise.retry import RetryConfig, ExponentialBackoff, with_retry
from seowise.metrics import MetricsTracker
from seowise.cache import (
    CacheAside,
    CacheStore,
    InMemoryCacheStore,
    RedisCacheStore,
    generate_cache_key,
    decode_cache_key,
)
from seowise.filters import KeywordFilters, build_keyword_filters
from seowise.parser import parse_response
from seowise.transformers import (
    transform_keyword_suggestions,
    transform_keyword_overview,
    transform_domain_keywords,
)
from seowise.trends import (
    calculate_trend,
    analyze_trend,
    classify_competition_level,
    classify_keyword_intent,
)
from seowise.models import (
    ApiMetrics,
    DomainKeyword,
    KeywordOverview,
    KeywordSuggestion,
    ParsedResponse,
    TransformResult,
)
from seowise.exceptions import (
    SeoWiseError,
    AuthenticationError,
    RateLimitError,
    ConnectionError,
    QuotaExceededError,
    ConfigError,
    classify_error,
)
from seowise.logging import LogConfig, RequestLogger, setup_logging

__version__ = "1.0.0"
__author__ = "SeoWise Contributors"

__all__ = [
    # Client
    "KeywordDataClient",
    # Config
    "ClientConfig",
    "Credentials",
    "create_config",
    "load_credentials",
    # Rate limiting and retry
    "RateLimiter",
    "RateLimitResult",
    "RetryConfig",
    "ExponentialBackoff",
    "with_retry",
    # Metrics
    "MetricsTracker",
    "ApiMetrics",
    # Cache
    "CacheAside",
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "generate_cache_key",
    "decode_cache_key",
    # Parsing and transformation
    "KeywordFilters",
    "build_keyword_filters",
    "parse_response",
    "transform_keyword_suggestions",
    "transform_keyword_overview",
    "transform_domain_keywords",
    "calculate_trend",
    "analyze_trend",
    "classify_competition_level",
    "classify_keyword_intent",
    "DomainKeyword",
    "KeywordOverview",
    "KeywordSuggestion",
    "ParsedResponse",
    "TransformResult",
    # Exceptions
    "SeoWiseError",
    "AuthenticationError",
    "RateLimitError",
    "ConnectionError",
    "QuotaExceededError",
    "ConfigError",
    "classify_error",
    # Logging
    "LogConfig",
    "RequestLogger",
    "setup_logging",
]
