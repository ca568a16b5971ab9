from __future__ import annotations

import asyncio

import pytest

from pulsechart.application.use_cases.chart_session import ChartSession
from pulsechart.container import (
    create_test_container,
    get_container,
    init_container,
    reset_container,
)
from pulsechart.infrastructure.event_bus import EventBus
from pulsechart.domain.services.discontinuity import SkipWeekendsDiscontinuity, is_weekend
from pulsechart.infrastructure.feeds.random_financial_feed import (
    DATA_GENERATOR_PRODUCT,
    WEEKDAY_GENERATOR_PRODUCT,
    RandomFinancialFeed,
)
from pulsechart.main import run_demo
from pulsechart.shared.config.settings import Settings


def test_container_builds_data_generator_product() -> None:
    container = create_test_container(Settings(_env_file=None))

    product = container.data_generator_product

    assert product.id == DATA_GENERATOR_PRODUCT
    assert isinstance(product.source.historic_feed, RandomFinancialFeed)
    assert product.source.streaming_feed is container.streaming_feed
    assert container.data_generator_product is product
    assert isinstance(container.event_publisher, EventBus)
    assert isinstance(container.get_chart_session(), ChartSession)


def test_weekday_product_uses_skip_weekends_provider() -> None:
    async def _scenario() -> None:
        container = create_test_container(
            Settings(_env_file=None, candles_of_data=30),
            weekday_historic_feed=RandomFinancialFeed(
                seed=5, skip_weekends=True, product_id=WEEKDAY_GENERATOR_PRODUCT
            ),
        )
        product = container.weekday_generator_product
        session = container.get_chart_session()

        assert await session.select(product) is True

        assert [p.id for p in container.products] == [
            DATA_GENERATOR_PRODUCT,
            WEEKDAY_GENERATOR_PRODUCT,
        ]
        assert product.source.discontinuity_provider is container.skip_weekends_provider
        assert isinstance(session.provider, SkipWeekendsDiscontinuity)
        assert session.data.dates
        assert not any(is_weekend(d) for d in session.data.dates)
        assert session.domain.start < session.domain.end
        session.close()
        container.event_publisher.unsubscribe_all()

    asyncio.run(_scenario())


def test_override_replaces_dependency() -> None:
    feed = RandomFinancialFeed(seed=3)
    container = create_test_container(historic_feed=feed)

    assert container.historic_feed is feed
    with pytest.raises(ValueError, match="Unknown dependency"):
        container.override("database", object())


def test_global_container_lifecycle() -> None:
    reset_container()
    container = init_container(Settings(_env_file=None, candles_of_data=20))

    assert get_container() is container
    assert get_container().settings.candles_of_data == 20

    reset_container()
    assert get_container() is not container
    reset_container()


def test_demo_renders_history_trades_and_zoom() -> None:
    container = create_test_container(
        Settings(_env_file=None, candles_of_data=60),
        historic_feed=RandomFinancialFeed(seed=11),
    )

    renders = asyncio.run(run_demo(container, trades=3))

    # reset to latest + 3 trades + 1 zoom
    assert renders == 5


def test_demo_runs_on_weekday_product() -> None:
    container = create_test_container(
        Settings(_env_file=None, candles_of_data=60),
        weekday_historic_feed=RandomFinancialFeed(
            seed=11, skip_weekends=True, product_id=WEEKDAY_GENERATOR_PRODUCT
        ),
    )

    renders = asyncio.run(
        run_demo(container, trades=2, product=container.weekday_generator_product)
    )

    assert renders == 4
