from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from pulsechart.application.ports.historic_feed import HistoricRequest
from pulsechart.domain.exceptions.domain_errors import (
    ConfigurationError,
    InvalidGranularityError,
)
from pulsechart.domain.services.discontinuity import MILLIS_PER_DAY, is_weekend
from pulsechart.infrastructure.feeds.random_financial_feed import (
    DATA_GENERATOR_PRODUCT,
    WEEKDAY_GENERATOR_PRODUCT,
    RandomFinancialFeed,
)

END = datetime(2025, 1, 31, 15, 30, tzinfo=timezone.utc).timestamp() * 1000
JAN_31 = datetime(2025, 1, 31, tzinfo=timezone.utc).timestamp() * 1000


def _request(candles: int = 30, granularity: int = 86_400, product: str = DATA_GENERATOR_PRODUCT):
    return HistoricRequest(
        product_id=product, granularity_seconds=granularity, candles=candles, end=END
    )


def test_generates_consecutive_daily_candles_ending_at_midnight() -> None:
    candles = asyncio.run(RandomFinancialFeed(seed=7).fetch(_request()))

    assert len(candles) == 30
    assert candles[-1].date == JAN_31
    assert all(b.date - a.date == MILLIS_PER_DAY for a, b in zip(candles, candles[1:]))
    for candle in candles:
        assert candle.low <= min(candle.open, candle.close)
        assert candle.high >= max(candle.open, candle.close)
        assert 100 <= candle.volume <= 10_000


def test_same_seed_is_reproducible() -> None:
    first = asyncio.run(RandomFinancialFeed(seed=42).fetch(_request(10)))
    second = asyncio.run(RandomFinancialFeed(seed=42).fetch(_request(10)))

    assert first == second


def test_skip_weekends_drops_saturday_and_sunday() -> None:
    candles = asyncio.run(RandomFinancialFeed(seed=1, skip_weekends=True).fetch(_request(14)))

    assert len(candles) == 10
    assert not any(is_weekend(c.date) for c in candles)


def test_only_daily_granularity_is_supported() -> None:
    feed = RandomFinancialFeed()

    with pytest.raises(InvalidGranularityError) as exc_info:
        feed.validate_granularity(3_600)

    assert exc_info.value.allowed == [86_400]
    assert exc_info.value.message.startswith("Granularity of 3600 is not supported.")

    with pytest.raises(InvalidGranularityError):
        asyncio.run(feed.fetch(_request(granularity=300)))


def test_rejects_foreign_products() -> None:
    with pytest.raises(ConfigurationError, match="does not support products"):
        RandomFinancialFeed().validate_product("BTC-USD")


def test_feed_serves_only_its_configured_product() -> None:
    feed = RandomFinancialFeed(seed=2, skip_weekends=True, product_id=WEEKDAY_GENERATOR_PRODUCT)

    candles = asyncio.run(feed.fetch(_request(7, product=WEEKDAY_GENERATOR_PRODUCT)))

    assert len(candles) == 5
    with pytest.raises(ConfigurationError):
        feed.validate_product(DATA_GENERATOR_PRODUCT)
