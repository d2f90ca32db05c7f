"""Pytest configuration and fixtures for SeoWise tests."""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from seowise.config import create_config


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_envelope(
    items: Optional[List[Dict[str, Any]]] = None,
    status_code: int = 20000,
    status_message: str = "Ok.",
    cost: float = 0.01,
    total_count: Optional[int] = None,
) -> Dict[str, Any]:
    """Build a Labs-style response envelope."""
    result: Dict[str, Any] = {"items": items}
    if total_count is not None:
        result["total_count"] = total_count
    return {
        "version": "0.1.20240801",
        "status_code": 20000,
        "cost": cost,
        "tasks_count": 1,
        "tasks": [
            {
                "status_code": status_code,
                "status_message": status_message,
                "cost": cost,
                "result_count": 1,
                "result": [result],
            }
        ],
    }


def make_keyword_item(
    keyword: str = "running shoes",
    search_volume: int = 1000,
    monthly_searches: Optional[List[Dict[str, int]]] = None,
    main_intent: Optional[str] = "commercial",
) -> Dict[str, Any]:
    """Build a Labs keyword item."""
    item: Dict[str, Any] = {
        "se_type": "google",
        "keyword": keyword,
        "location_code": 2840,
        "language_code": "en",
        "keyword_info": {
            "search_volume": search_volume,
            "competition": 0.45,
            "competition_level": "MEDIUM",
            "cpc": 1.25,
            "low_top_of_page_bid": 0.5,
            "high_top_of_page_bid": 2.0,
            "monthly_searches": monthly_searches or [],
        },
        "keyword_properties": {"keyword_difficulty": 42},
        "avg_backlinks_info": {
            "backlinks": 120.5,
            "dofollow": 80.0,
            "referring_pages": 60.0,
            "referring_domains": 30.0,
            "rank": 200.0,
            "main_domain_rank": 450.0,
        },
    }
    if main_intent is not None:
        item["search_intent_info"] = {"se_type": "google", "main_intent": main_intent}
    return item


def json_response(
    body: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a MockTransport handler answering with a fixed JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body, headers=headers)

    return handler


@pytest.fixture
def clock():
    """A manually advanced clock."""
    return FakeClock()


@pytest.fixture
def config():
    """Production config with caching disabled."""
    return create_config(username="user@example.com", password="s3cret-pass")


@pytest.fixture
def caching_config():
    """Production config with caching enabled."""
    return create_config(
        username="user@example.com",
        password="s3cret-pass",
        enable_caching=True,
    )


@pytest.fixture
def sandbox_config():
    """Sandbox config with caching enabled."""
    return create_config(
        username="user@example.com",
        password="s3cret-pass",
        is_sandbox=True,
        enable_caching=True,
    )


@pytest.fixture
def monthly_series():
    """Twelve months of search volume, newest last."""
    volumes = [100, 110, 120, 130, 140, 150, 160, 170, 180, 190, 200, 250]
    return [
        {"year": 2024, "month": month, "search_volume": volume}
        for month, volume in enumerate(volumes, start=1)
    ]


@pytest.fixture
def suggestions_envelope():
    """Successful keyword suggestions envelope with two items."""
    return make_envelope(
        items=[
            make_keyword_item("running shoes", 1000),
            make_keyword_item("buy running shoes", 500, main_intent=None),
        ],
        total_count=2,
    )
