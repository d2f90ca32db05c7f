"""Asynchronous DataForSEO keyword data client."""

import asyncio
import logging
import time
import uuid
from typing import Optional, Dict, Any, List, Union, Callable, Awaitable, Type

import httpx

from seowise.cache import CacheAside, CacheStore, generate_cache_key
from seowise.config import ClientConfig, Credentials, create_config
from seowise.exceptions import RateLimitError, SeoWiseError, classify_error
from seowise.filters import KeywordFilters, build_keyword_filters
from seowise.logging import LogConfig, RequestLogger
from seowise.metrics import MetricsTracker
from seowise.models import (
    ApiMetrics,
    DomainKeyword,
    KeywordOverview,
    KeywordSuggestion,
    ParsedResponse,
    TransformResult,
)
from seowise.parser import parse_response
from seowise.rate_limiter import RateLimiter
from seowise.retry import RetryConfig, with_retry
from seowise.schemas import RawUserData
from seowise.transformers import (
    transform_domain_keywords,
    transform_keyword_overview,
    transform_keyword_suggestions,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODE = 20000

USER_DATA_ENDPOINT = "appendix/user_data"
KEYWORD_SUGGESTIONS_ENDPOINT = "dataforseo_labs/google/keyword_suggestions/live"
KEYWORD_OVERVIEW_ENDPOINT = "dataforseo_labs/google/keyword_overview/live"
KEYWORDS_FOR_SITE_ENDPOINT = "keywords_data/google_ads/keywords_for_site/live"


def normalize_target(target: str) -> str:
    """Turn a bare hostname into the URL form the Ads endpoint expects."""
    if target.startswith("http"):
        return target
    return f"https://{target}/"


def is_cacheable(result: TransformResult) -> bool:
    """Only fully successful tasks are worth caching."""
    return result.status_code == SUCCESS_STATUS_CODE


class KeywordDataClient:
    """Async client for DataForSEO keyword research endpoints.

    Features:
    - Sliding-window and burst admission control
    - Retry with exponential backoff and jitter
    - Optional cache-aside storage of transformed results
    - Per-session usage metrics
    - Secure logging with credential redaction
    """

    def __init__(
        self,
        config: ClientConfig,
        cache_store: Optional[CacheStore] = None,
        rate_limiter: Optional[RateLimiter] = None,
        metrics: Optional[MetricsTracker] = None,
        retry_config: Optional[RetryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        log_config: Optional[LogConfig] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Validated client configuration.
            cache_store: Store for transformed results; caching also
                requires ``config.enable_caching``.
            rate_limiter: Admission controller. Built from the config if omitted.
            metrics: Usage tracker. A fresh one is created if omitted.
            retry_config: Retry policy. Defaults to ``config.max_retries``.
            http_client: Transport to use. The client only closes
                transports it created itself.
            log_config: Request logging configuration.
            sleep: Coroutine used for retry backoff.
        """
        self.config = config
        self.rate_limiter = rate_limiter or RateLimiter(
            max_per_minute=config.rate_limit_per_minute,
            burst_max=config.burst_limit,
        )
        self.metrics = metrics or MetricsTracker()
        self.retry_config = retry_config or RetryConfig(max_retries=config.max_retries)
        self.cache = CacheAside(
            cache_store,
            enabled=config.enable_caching,
            sandbox=config.is_sandbox,
            ttl_seconds=config.cache_ttl_seconds,
        )
        self.request_logger = RequestLogger(log_config)
        self._sleep = sleep
        self._auth = httpx.BasicAuth(config.username, config.password)

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout / 1000.0),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        **kwargs: Any,
    ) -> "KeywordDataClient":
        """Build a client from loaded credentials.

        Keyword arguments that are ClientConfig fields are validated into
        the config; the rest are passed to the constructor.
        """
        config_fields = set(ClientConfig.model_fields)
        settings = {k: v for k, v in kwargs.items() if k in config_fields}
        options = {k: v for k, v in kwargs.items() if k not in config_fields}

        config = create_config(
            settings,
            username=credentials.username,
            password=credentials.password,
        )
        logger.info(f"Using DataForSEO credentials from {credentials.source}")
        return cls(config, **options)

    def _build_url(self, endpoint: str) -> str:
        return f"{self.config.base_url}/{endpoint}"

    def _admit(self) -> None:
        result = self.rate_limiter.can_proceed()
        if result.allowed:
            return

        self.metrics.record_rate_limit_hit()
        backoff_ms = self.rate_limiter.record_violation()
        retry_after_ms = max(result.retry_after_ms or 0, backoff_ms)
        self.request_logger.log_rate_limited(retry_after_ms)
        raise RateLimitError(
            "Rate limit exceeded: too many requests, slow down",
            retry_after_ms=retry_after_ms,
        )

    def _response_cost(self, body: Any) -> float:
        if self.config.is_sandbox or not isinstance(body, dict):
            return 0.0
        return float(body.get("cost") or 0.0)

    async def _send(
        self,
        method: str,
        endpoint: str,
        payload: Optional[List[Dict[str, Any]]],
        request_id: str,
    ) -> Dict[str, Any]:
        """Perform one HTTP attempt and record it."""
        request = self._client.build_request(method, self._build_url(endpoint), json=payload)
        request = next(self._auth.sync_auth_flow(request))

        self.request_logger.log_request(
            method,
            str(request.url),
            headers=dict(request.headers),
            body=payload,
            request_id=request_id,
        )
        start = time.perf_counter()

        try:
            response = await self._client.send(request)
            response.raise_for_status()
            body = response.json()
            cost = self._response_cost(body)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000.0
            self.metrics.record_request(duration_ms, 0.0, success=False)

            error = classify_error(e)
            if isinstance(error, RateLimitError):
                self.metrics.record_rate_limit_hit()
                self.rate_limiter.record_violation()
            self.request_logger.log_error(error, request_id=request_id)
            raise error from e

        duration_ms = (time.perf_counter() - start) * 1000.0
        self.metrics.record_request(duration_ms, cost, success=True)
        self.rate_limiter.record_success()
        self.request_logger.log_response(
            response.status_code,
            duration_ms=duration_ms,
            body=body,
            request_id=request_id,
        )
        return body

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Admit, then send with retries."""
        self._admit()

        request_id = str(uuid.uuid4())[:8]

        def before_retry(attempt: int, delay_ms: float, error: SeoWiseError) -> None:
            self.request_logger.log_retry(
                attempt,
                self.retry_config.max_retries,
                delay_ms,
                str(error),
                request_id=request_id,
            )

        return await with_retry(
            lambda: self._send(method, endpoint, payload, request_id),
            config=self.retry_config,
            sleep=self._sleep,
            before_retry=before_retry,
        )

    async def _cached_call(
        self,
        operation: str,
        params: Dict[str, Any],
        compute: Callable[[], Awaitable[TransformResult]],
        result_type: Type[TransformResult],
    ) -> TransformResult:
        key = generate_cache_key(operation, params)
        return await self.cache.with_cache(key, compute, is_cacheable, result_type)

    async def get_user_data(self) -> Dict[str, Any]:
        """Fetch the raw ``appendix/user_data`` envelope."""
        return await self._request("GET", USER_DATA_ENDPOINT)

    async def get_account_balance(self) -> Optional[float]:
        """Get the account's remaining balance.

        Returns:
            The balance in USD, or None if the response carries none.

        Raises:
            SeoWiseError: On transport, authentication or task failure.
        """
        parsed: ParsedResponse = parse_response(await self.get_user_data())
        task = parsed.first_task
        if task is None or not task.result:
            return None
        return RawUserData.model_validate(task.result[0]).money.balance

    async def get_keyword_suggestions(
        self,
        keyword: str,
        location_code: int,
        language_code: str = "any",
        filters: Union[KeywordFilters, List[Any], None] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> TransformResult[KeywordSuggestion]:
        """Get keyword suggestions containing a seed keyword.

        Args:
            keyword: Seed keyword.
            location_code: DataForSEO location code.
            language_code: Language code, or ``"any"`` for all languages.
            filters: A KeywordFilters or a prebuilt filter expression.
            limit: Maximum number of suggestions.
            offset: Offset into the full result set.

        Returns:
            Suggestions ordered by search volume, highest first.

        Raises:
            RateLimitError: If the local limiter refuses the call.
            SeoWiseError: On any other failure once retries are exhausted.
        """
        if isinstance(filters, KeywordFilters):
            filter_expression = build_keyword_filters(filters)
        else:
            filter_expression = list(filters or [])

        task: Dict[str, Any] = {"keyword": keyword, "location_code": location_code}
        if language_code != "any":
            task["language_code"] = language_code
        if filter_expression:
            task["filters"] = filter_expression
        task["limit"] = limit
        task["offset"] = offset
        task["order_by"] = ["keyword_info.search_volume,desc"]

        async def compute() -> TransformResult[KeywordSuggestion]:
            body = await self._request("POST", KEYWORD_SUGGESTIONS_ENDPOINT, [task])
            return transform_keyword_suggestions(parse_response(body))

        params = {
            "keyword": keyword,
            "location_code": location_code,
            "language_code": language_code,
            "filters": filter_expression,
            "limit": limit,
            "offset": offset,
        }
        return await self._cached_call(
            "keyword_suggestions", params, compute, TransformResult[KeywordSuggestion]
        )

    async def get_keywords_overview(
        self,
        keywords: List[str],
        location_code: int,
        language_code: str = "en",
        include_clickstream: bool = False,
    ) -> TransformResult[KeywordOverview]:
        """Get search metrics for a list of keywords.

        Args:
            keywords: Keywords to look up.
            location_code: DataForSEO location code.
            language_code: Language code.
            include_clickstream: Also fetch clickstream demographics (costs more).
        """
        task = {
            "keywords": list(keywords),
            "location_code": location_code,
            "language_code": language_code,
            "include_clickstream_data": include_clickstream,
        }

        async def compute() -> TransformResult[KeywordOverview]:
            body = await self._request("POST", KEYWORD_OVERVIEW_ENDPOINT, [task])
            return transform_keyword_overview(parse_response(body))

        return await self._cached_call(
            "keywords_overview", task, compute, TransformResult[KeywordOverview]
        )

    async def get_keywords_for_domain(
        self,
        target: str,
        location_code: int,
        language_code: str = "en",
        limit: int = 20,
        offset: int = 0,
    ) -> TransformResult[DomainKeyword]:
        """Get keywords relevant to a domain.

        Bare hostnames are sent as ``https://{host}/``. The upstream endpoint
        does not page, so ``limit`` and ``offset`` only distinguish cache entries.
        """
        task = {
            "target": normalize_target(target),
            "location_code": location_code,
            "language_code": language_code,
            "sort_by": "search_volume",
            "search_partners": False,
            "include_adult_keywords": False,
        }

        async def compute() -> TransformResult[DomainKeyword]:
            body = await self._request("POST", KEYWORDS_FOR_SITE_ENDPOINT, [task])
            return transform_domain_keywords(parse_response(body))

        params = {
            "target": target,
            "location_code": location_code,
            "language_code": language_code,
            "limit": limit,
            "offset": offset,
        }
        return await self._cached_call(
            "keywords_for_domain", params, compute, TransformResult[DomainKeyword]
        )

    def get_metrics(self) -> ApiMetrics:
        """Get a snapshot of this session's usage."""
        return self.metrics.get_metrics()

    def reset_metrics(self) -> None:
        """Reset usage counters."""
        self.metrics.reset()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "KeywordDataClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
