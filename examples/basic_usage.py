"""Basic usage example for SeoWise."""

import asyncio

from seowise import KeywordDataClient, KeywordFilters, load_credentials, setup_logging
from seowise.exceptions import AuthenticationError, RateLimitError


async def main():
    """Look up keyword suggestions with credentials from the environment."""
    setup_logging("INFO")

    # Reads DATAFORSEO_LOGIN / DATAFORSEO_PASSWORD
    credentials = load_credentials()

    async with KeywordDataClient.from_credentials(credentials, is_sandbox=True) as client:
        balance = await client.get_account_balance()
        print(f"Balance: {balance}")

        try:
            result = await client.get_keyword_suggestions(
                "running shoes",
                location_code=2840,
                language_code="en",
                filters=KeywordFilters(min_search_volume=100, max_kd=40),
                limit=10,
            )
        except AuthenticationError:
            print("Credentials were rejected")
            return
        except RateLimitError as e:
            print(f"Rate limited, retry in {e.retry_after_ms}ms")
            return

        print(f"\n{result.total_results} suggestions (cost ${result.cost}):")
        for suggestion in result.data:
            trend = suggestion.trend_analysis
            print(
                f"  {suggestion.keyword:<40} {suggestion.search_volume:>8} "
                f"{suggestion.search_intent or '-':<14} {trend.direction.value} ({trend.growth_rate:+d}%)"
            )

        metrics = client.get_metrics()
        print(f"\nRequests: {metrics.requests_made}, avg {metrics.avg_response_time_ms}ms")


if __name__ == "__main__":
    asyncio.run(main())
