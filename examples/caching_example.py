"""Caching and domain research example for SeoWise."""

import asyncio
import os

from seowise import (
    InMemoryCacheStore,
    KeywordDataClient,
    RedisCacheStore,
    RetryConfig,
    create_config,
    load_credentials,
)


async def main():
    """Fetch domain keywords twice; the second call is served from cache."""
    credentials = load_credentials()

    config = create_config(
        username=credentials.username,
        password=credentials.password,
        enable_caching=True,
        caching_duration_days=7,
        rate_limit_per_minute=20,
    )

    # Use Redis when available, otherwise keep results in process
    redis_url = os.environ.get("REDIS_URL")
    store = RedisCacheStore(url=redis_url) if redis_url else InMemoryCacheStore(max_size=500)

    async with KeywordDataClient(
        config,
        cache_store=store,
        retry_config=RetryConfig(max_retries=5, base_delay_ms=500),
    ) as client:
        for _ in range(2):
            result = await client.get_keywords_for_domain("example.com", location_code=2840)
            print(f"{len(result.data)} keywords for example.com")

        for keyword in result.data[:10]:
            print(f"  {keyword.keyword:<40} {keyword.search_volume:>8} {keyword.competition_level}")

        stats = store.get_stats()
        print(f"\nCache hits: {stats.hits}, misses: {stats.misses}")
        print(f"API requests: {client.get_metrics().requests_made}")

    if isinstance(store, RedisCacheStore):
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
