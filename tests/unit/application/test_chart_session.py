from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from pulsechart.application.dto.catalogue import DAY_1, HOUR_1, DataSource, Product
from pulsechart.application.dto.notifications import format_historic_error
from pulsechart.application.ports.historic_feed import HistoricFeed, HistoricRequest
from pulsechart.application.use_cases.chart_session import ChartSession
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.events.chart_events import ViewportUpdate
from pulsechart.domain.exceptions.domain_errors import (
    ConfigurationError,
    FeedError,
    InvalidGranularityError,
)
from pulsechart.domain.services.discontinuity import (
    MILLIS_PER_DAY,
    SkipWeekendsDiscontinuity,
    is_weekend,
)
from pulsechart.domain.value_objects.time_domain import TimeDomain
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.infrastructure.event_bus import EventBus
from pulsechart.infrastructure.feeds.replay_streaming_feed import ReplayStreamingFeed
from pulsechart.shared.config.settings import Settings

DAY = MILLIS_PER_DAY


class _FakeHistoricFeed(HistoricFeed):
    """Historic feed fake returning canned candles, optionally gated."""

    name = "fake"

    def __init__(
        self,
        candles: List[Candle],
        error: Optional[FeedError] = None,
        gate: Optional[asyncio.Event] = None,
        granularities: Optional[frozenset] = None,
    ) -> None:
        self._candles = candles
        self._error = error
        self._gate = gate
        self.supported_granularities = granularities
        self.requests: List[HistoricRequest] = []

    async def fetch(self, request: HistoricRequest) -> List[Candle]:
        self.requests.append(request)
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error
        return list(self._candles)


class _RecordingSink:
    def __init__(self) -> None:
        self.updates: List[ViewportUpdate] = []

    def render(self, update: ViewportUpdate) -> None:
        self.updates.append(update)


def _candle(date: float, close: float = 1.0) -> Candle:
    return Candle(date=date, open=close, high=close, low=close, close=close, volume=1.0)


def _daily(days: int) -> List[Candle]:
    # Desordenadas a propósito: la sesión debe ordenarlas
    return [_candle(k * DAY) for k in reversed(range(days))]


def _ms(year: int, month: int, day: int, hour: int = 0) -> float:
    return datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp() * 1000


def _january_weekdays() -> List[Candle]:
    days = [_ms(2025, 1, day) for day in range(1, 32)]
    return [_candle(day) for day in days if not is_weekend(day)]


def _product(
    historic: HistoricFeed,
    stream: Optional[ReplayStreamingFeed] = None,
    product_id: str = "TEST-USD",
) -> Product:
    source = DataSource(
        historic_feed=historic,
        streaming_feed=stream,
        historic_formatter=format_historic_error,
    )
    return Product(id=product_id, source=source, display=product_id, periods=(DAY_1,))


def _session(**settings_overrides) -> tuple[ChartSession, _RecordingSink]:
    sink = _RecordingSink()
    session = ChartSession(
        settings=Settings(**settings_overrides),
        render_sink=sink,
        clock=lambda: 1_000.0 * DAY,
    )
    return session, sink


def test_select_loads_history_and_resets_to_latest() -> None:
    async def _scenario() -> None:
        feed = _FakeHistoricFeed(_daily(101))
        session, sink = _session(candles_of_data=150, default_visible_ratio=0.2)

        loaded = await session.select(_product(feed))

        assert loaded is True
        assert feed.requests[0].candles == 150
        assert feed.requests[0].end == 1_000.0 * DAY
        assert feed.requests[0].granularity_seconds == DAY_1.seconds
        assert session.data.dates == [k * DAY for k in range(101)]
        assert session.domain == TimeDomain(80 * DAY, 100 * DAY)
        assert sink.updates[-1].tracking_latest is True
        assert sink.updates[-1].visible_data[0].date == 79 * DAY

    asyncio.run(_scenario())


def test_unsupported_granularity_fails_before_fetching() -> None:
    async def _scenario() -> None:
        feed = _FakeHistoricFeed(_daily(5), granularities=frozenset({86_400}))
        product = Product(id="X", source=DataSource(historic_feed=feed))
        session, _ = _session()

        with pytest.raises(InvalidGranularityError) as exc_info:
            await session.select(product, HOUR_1)

        assert exc_info.value.granularity == 3_600
        assert feed.requests == []
        assert session.generation == 0

    asyncio.run(_scenario())


def test_period_not_offered_by_product_is_a_configuration_error() -> None:
    async def _scenario() -> None:
        session, _ = _session()

        with pytest.raises(ConfigurationError):
            await session.select(_product(_FakeHistoricFeed([])), HOUR_1)

    asyncio.run(_scenario())


def test_stale_historic_response_is_discarded() -> None:
    async def _scenario() -> None:
        gate = asyncio.Event()
        slow = _FakeHistoricFeed([_candle(500 * DAY)], gate=gate)
        fast = _FakeHistoricFeed(_daily(10))
        session, _ = _session()

        first = asyncio.create_task(session.select(_product(slow, product_id="SLOW")))
        await asyncio.sleep(0)
        assert await session.select(_product(fast, product_id="FAST")) is True

        gate.set()
        assert await first is False
        assert session.product.id == "FAST"
        assert session.data.latest.date == 9 * DAY

    asyncio.run(_scenario())


def test_historic_error_becomes_notification() -> None:
    async def _scenario() -> None:
        error = FeedError("Bad Request", source="fake", payload={"message": "unknown product"})
        session, sink = _session()

        loaded = await session.select(_product(_FakeHistoricFeed([], error=error)))

        assert loaded is False
        assert [n.message for n in session.notifications] == [
            "Error getting historic data: Bad Request. unknown product"
        ]
        assert sink.updates == []

    asyncio.run(_scenario())


def test_trade_advances_domain_while_tracking() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, sink = _session(default_visible_ratio=0.2)
        await session.select(_product(_FakeHistoricFeed(_daily(101)), stream))

        stream.push(Trade(time=101 * DAY + 5_000, price=2.0, size=1.0))

        assert session.data.latest.date == 101 * DAY
        assert session.domain == TimeDomain(81 * DAY, 101 * DAY)
        assert session.tracking_latest is True
        assert sink.updates[-1].domain == session.domain

    asyncio.run(_scenario())


def test_trade_does_not_move_domain_after_user_pans_away() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, _ = _session()
        await session.select(_product(_FakeHistoricFeed(_daily(101)), stream))

        update = session.on_view_change(TimeDomain(50 * DAY, 70 * DAY))
        stream.push(Trade(time=102 * DAY, price=2.0, size=1.0))

        assert update.tracking_latest is False
        assert session.domain == TimeDomain(50 * DAY, 70 * DAY)
        assert session.data.latest.date == 102 * DAY

    asyncio.run(_scenario())


def test_working_set_is_trimmed_to_max_candles() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, _ = _session(max_candles=5)
        await session.select(_product(_FakeHistoricFeed(_daily(10)), stream))

        assert session.data.dates == [k * DAY for k in range(5, 10)]

        stream.push(Trade(time=10 * DAY, price=1.0, size=1.0))

        assert session.data.dates == [k * DAY for k in range(6, 11)]

    asyncio.run(_scenario())


def test_streaming_errors_and_unclean_close_are_notified_newest_first() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, _ = _session()
        await session.select(_product(_FakeHistoricFeed(_daily(10)), stream))

        stream.fail("boom")
        stream.close(code=1011, was_clean=False)

        messages = [n.message for n in session.notifications]
        assert messages == [
            "Disconnected from live stream: 1011 Unkown reason.",
            "Live stream error: boom",
        ]
        ids = [n.id for n in session.notifications]
        assert ids == sorted(ids, reverse=True)
        assert session.dismiss(ids[0]) is True
        assert len(session.notifications) == 1

    asyncio.run(_scenario())


def test_reselect_closes_previous_stream_and_ignores_its_events() -> None:
    async def _scenario() -> None:
        first_stream = ReplayStreamingFeed()
        second_stream = ReplayStreamingFeed()
        session, _ = _session()

        await session.select(_product(_FakeHistoricFeed(_daily(10)), first_stream, "A"))
        await session.select(_product(_FakeHistoricFeed(_daily(3)), second_stream, "B"))

        assert first_stream.is_open is False
        assert second_stream.is_open is True
        assert second_stream.product_id == "B"

        first_stream.open("A")
        first_stream.push(Trade(time=50 * DAY, price=1.0, size=1.0))
        first_stream.fail("stale")

        assert session.data.latest.date == 2 * DAY
        assert session.notifications == ()

    asyncio.run(_scenario())


def test_center_and_reset_to_latest() -> None:
    async def _scenario() -> None:
        session, _ = _session(default_visible_ratio=0.2)
        await session.select(_product(_FakeHistoricFeed(_daily(101))))

        assert session.center_on(30 * DAY) == TimeDomain(20 * DAY, 40 * DAY)
        assert session.tracking_latest is False
        assert session.reset_to_latest() == TimeDomain(80 * DAY, 100 * DAY)

    asyncio.run(_scenario())


def test_zoom_controller_drives_session_domain() -> None:
    async def _scenario() -> None:
        session, sink = _session(default_visible_ratio=0.2)
        await session.select(_product(_FakeHistoricFeed(_daily(101))))
        zoom = session.zoom_controller(width=200)

        # 20 días en 200 px → 10 px por día
        zoom.pan_by(100)
        zoom.end_gesture()

        assert session.domain == TimeDomain(70 * DAY, 90 * DAY)
        assert sink.updates[-1].tracking_latest is False

    asyncio.run(_scenario())


def test_disabled_pan_in_settings_blocks_gestures() -> None:
    async def _scenario() -> None:
        session, _ = _session(allow_pan=False)
        await session.select(_product(_FakeHistoricFeed(_daily(101))))
        before = session.domain

        assert session.zoom_controller(width=200).pan_by(100) is None
        assert session.domain == before

    asyncio.run(_scenario())


def test_viewport_updates_and_notifications_reach_event_bus() -> None:
    async def _scenario() -> None:
        bus = EventBus(max_queue_size=10)
        viewport_queue = bus.subscribe("viewport", "test")
        notification_queue = bus.subscribe("notification", "test")
        session = ChartSession(settings=Settings(), publisher=bus, clock=lambda: 0.0)

        await session.select(_product(_FakeHistoricFeed(_daily(10))))
        session.notify("hello", level="info")

        assert isinstance(viewport_queue.get_nowait(), ViewportUpdate)
        notification = notification_queue.get_nowait()
        assert notification.message == "hello"
        assert notification.level == "info"

    asyncio.run(_scenario())


def test_empty_snapshot_then_trades_build_a_usable_domain() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, sink = _session(default_visible_ratio=0.2)

        assert await session.select(_product(_FakeHistoricFeed([]), stream)) is True
        assert session.domain is None

        for k in range(3):
            stream.push(Trade(time=k * DAY + 1_000, price=1.0 + k, size=1.0))

        domain = session.domain
        assert domain.start < domain.end
        assert domain.start == pytest.approx(1.8 * DAY)
        assert domain.end == 2 * DAY
        assert session.tracking_latest is True
        # La primera vela sola no llega a renderizarse
        assert len(sink.updates) == 2
        assert all(u.domain.start < u.domain.end for u in sink.updates)

    asyncio.run(_scenario())


def test_single_candle_snapshot_becomes_pannable_after_next_trade() -> None:
    async def _scenario() -> None:
        stream = ReplayStreamingFeed()
        session, sink = _session(default_visible_ratio=0.5)
        await session.select(_product(_FakeHistoricFeed([_candle(0.0)]), stream))
        zoom = session.zoom_controller(width=100)

        assert session.domain.is_degenerate
        assert sink.updates == []
        assert zoom.pan_by(10) is None

        stream.push(Trade(time=DAY + 1_000, price=2.0, size=1.0))

        assert session.domain == TimeDomain(0.5 * DAY, DAY)
        assert sink.updates[-1].tracking_latest is True

        domain = zoom.pan_by(10)
        zoom.end_gesture()

        assert domain.start == pytest.approx(0.45 * DAY)
        assert domain.end == pytest.approx(0.95 * DAY)
        assert session.domain == domain
        assert session.tracking_latest is False

    asyncio.run(_scenario())


def test_pan_across_weekend_keeps_trading_width() -> None:
    async def _scenario() -> None:
        source = DataSource(
            historic_feed=_FakeHistoricFeed(_january_weekdays()),
            discontinuity_provider=SkipWeekendsDiscontinuity(),
        )
        product = Product(id="WEEKDAY", source=source, periods=(DAY_1,))
        session, sink = _session()
        await session.select(product)
        provider = session.provider

        # lunes 20 → lunes 27 de enero de 2025: 5 días hábiles en 500 px
        session.on_view_change(TimeDomain(_ms(2025, 1, 20), _ms(2025, 1, 27)))
        zoom = session.zoom_controller(width=500)
        zoom.pan_by(150)
        zoom.end_gesture()

        domain = session.domain
        assert isinstance(provider, SkipWeekendsDiscontinuity)
        assert domain.start == pytest.approx(_ms(2025, 1, 16, 12))
        assert domain.end == pytest.approx(_ms(2025, 1, 23, 12))
        assert provider.distance(domain.start, domain.end) == pytest.approx(5 * DAY)
        assert sink.updates[-1].domain == domain
        assert not any(is_weekend(c.date) for c in sink.updates[-1].visible_data)

    asyncio.run(_scenario())


def test_detached_zoom_controller_no_longer_drives_session() -> None:
    async def _scenario() -> None:
        session, sink = _session(default_visible_ratio=0.2)
        await session.select(_product(_FakeHistoricFeed(_daily(101))))
        zoom = session.zoom_controller(width=200)
        before = session.domain
        renders = len(sink.updates)

        assert session.detach_zoom_controller(zoom) is True
        assert session.detach_zoom_controller(zoom) is False

        zoom.pan_by(100)
        zoom.end_gesture()
        assert session.domain == before
        assert len(sink.updates) == renders

        session.center_on(30 * DAY)
        assert zoom.view_domain != session.domain

    asyncio.run(_scenario())
