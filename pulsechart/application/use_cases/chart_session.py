"""
PulseChart – Use Case: Chart Session
======================================
Orquesta el pipeline completo de un gráfico en vivo:

  HistoricFeed ──snapshot──▸ CandleSequence ◂──trade── StreamingFeed
                                  │                          │
                                  ▼                          │ (agregación OHLC)
                            ViewportEngine ◂──gesto── ZoomController
                                  │
                                  ▼
                   ViewportUpdate ──▸ RenderSink / EventBus

FLUJO DE `select(product, period)`:
  1. Validar granularidad (error fatal de configuración, síncrono).
  2. Invalidar la generación anterior, cerrar el stream previo, vaciar datos.
  3. Pedir `candles_of_data` velas históricas que terminan "ahora".
  4. Si la respuesta llega con la generación vigente: ordenar, resetear a
     lo último (proporción `default_visible_ratio`) y abrir el stream.
     Si es obsoleta se descarta en silencio.
  5. Errores del feed → Notification (sin reintento automático).

CONCURRENCIA:
  Single-threaded. El único punto await es el fetch histórico; todo lo que
  toca estado después de él pasa primero por el GenerationToken.
"""

from __future__ import annotations

import itertools
import time
from typing import Any, Callable, List, Optional

from pulsechart.application.dto.catalogue import DataSource, Period, Product
from pulsechart.application.dto.notifications import format_streaming_error
from pulsechart.application.ports.event_publisher import IEventPublisher
from pulsechart.application.ports.historic_feed import HistoricRequest
from pulsechart.application.ports.render_sink import RenderSink
from pulsechart.application.ports.streaming_feed import (
    StreamCloseInfo,
    StreamErrorInfo,
    StreamingFeed,
)
from pulsechart.application.use_cases.generation import GenerationToken
from pulsechart.application.use_cases.zoom_controller import ZoomController
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.entities.candle_sequence import CandleSequence
from pulsechart.domain.events.chart_events import Notification, ViewportUpdate
from pulsechart.domain.exceptions.domain_errors import ConfigurationError, FeedError
from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
)
from pulsechart.domain.services.ohlc_aggregator import OhlcAggregator
from pulsechart.domain.services.viewport import ViewportEngine, data_extent
from pulsechart.domain.value_objects.time_domain import TimeDomain
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.shared.config.settings import Settings
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("chart_session")

TOPIC_VIEWPORT = "viewport"
TOPIC_NOTIFICATION = "notification"


def _now_ms() -> float:
    return time.time() * 1000


class ChartSession:
    """
    Estado de un gráfico: producto, datos, dominio visible y notificaciones.

    Uso:
        session = ChartSession(render_sink=sink, publisher=bus)
        await session.select(product, DAY_1)
        zoom = session.zoom_controller(width=800)
        zoom.pan_by(-120)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        render_sink: Optional[RenderSink] = None,
        publisher: Optional[IEventPublisher] = None,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self._settings = settings or Settings()
        self._render_sink = render_sink
        self._publisher = publisher
        self._clock = clock

        self._generation = GenerationToken()
        self._product: Optional[Product] = None
        self._period: Optional[Period] = None
        self._provider: DiscontinuityProvider = IdentityDiscontinuity()
        self._viewport = ViewportEngine(self._provider)
        self._aggregator = OhlcAggregator(self._settings.default_granularity_seconds)
        self._data = CandleSequence()
        self._domain: Optional[TimeDomain] = None
        self._stream: Optional[StreamingFeed] = None

        self._zoom_controllers: List[ZoomController] = []

        self._notification_ids = itertools.count(1)
        self._notifications: List[Notification] = []

    # ──────────────────────── Estado ────────────────────────────────────

    @property
    def product(self) -> Optional[Product]:
        return self._product

    @property
    def period(self) -> Optional[Period]:
        return self._period

    @property
    def provider(self) -> DiscontinuityProvider:
        return self._provider

    @property
    def data(self) -> CandleSequence:
        return self._data

    @property
    def domain(self) -> Optional[TimeDomain]:
        return self._domain

    @property
    def generation(self) -> int:
        return self._generation.current

    @property
    def tracking_latest(self) -> bool:
        if self._domain is None:
            return False
        return self._viewport.tracking_latest(self._domain, self._data.view())

    @property
    def notifications(self) -> tuple[Notification, ...]:
        """Notificaciones vigentes, la más reciente primero."""
        return tuple(self._notifications)

    # ──────────────────────── Selección ─────────────────────────────────

    async def select(self, product: Product, period: Optional[Period] = None) -> bool:
        """
        Cambiar de producto/granularidad y cargar el snapshot histórico.

        Returns:
            True si los datos se cargaron y aplicaron; False si el feed falló
            o la respuesta quedó obsoleta.

        Raises:
            ConfigurationError: granularidad o producto no soportados.
        """
        period = period or product.default_period
        source = product.source
        if not product.supports(period):
            raise ConfigurationError(
                f"Period '{period.display}' is not offered for product '{product.id}'"
            )
        source.historic_feed.validate_granularity(period.seconds)
        source.historic_feed.validate_product(product.id)

        self._invalidate()
        token = self._generation.issue()

        self._product = product
        self._period = period
        self._provider = source.discontinuity_provider
        self._viewport = ViewportEngine(self._provider)
        self._aggregator = OhlcAggregator(period.seconds)
        for controller in self._zoom_controllers:
            controller.use_provider(self._provider)

        request = HistoricRequest(
            product_id=product.id,
            granularity_seconds=period.seconds,
            candles=self._settings.candles_of_data,
            end=self._clock(),
        )
        logger.info(
            "Cargando histórico: product=%s granularity=%ds candles=%d (gen=%d)",
            product.id,
            period.seconds,
            request.candles,
            token,
        )

        try:
            candles = await source.historic_feed.fetch(request)
        except FeedError as exc:
            if not self._generation.is_current(token):
                logger.debug("Error de histórico obsoleto descartado (gen=%d)", token)
                return False
            logger.error("Error obteniendo histórico de '%s': %s", product.id, exc.message)
            self.notify(self._format_historic_error(source, exc))
            return False

        if not self._generation.is_current(token):
            logger.debug(
                "Histórico obsoleto descartado (gen=%d, vigente=%d)",
                token,
                self._generation.current,
            )
            return False

        self._data.replace_all(candles)
        self._data.trim_to(self._settings.max_candles)
        logger.info("Histórico cargado: %d velas para %s", len(self._data), product.id)

        self.reset_to_latest()
        self._open_stream(source, product.id, token)
        return True

    def close(self) -> None:
        """Cerrar el stream y descartar callbacks pendientes."""
        self._invalidate()

    def _invalidate(self) -> None:
        self._close_stream()
        self._data.clear()
        self._domain = None
        self._generation.invalidate()

    # ──────────────────────── Streaming ─────────────────────────────────

    def _open_stream(self, source: DataSource, product_id: str, token: int) -> None:
        stream = source.streaming_feed
        if stream is None:
            return
        stream.clear_listeners()
        stream.on_message(lambda trade: self._on_stream_trade(token, trade))
        stream.on_error(lambda info: self._on_stream_event(token, source, info))
        stream.on_close(lambda info: self._on_stream_event(token, source, info))
        self._stream = stream
        stream.open(product_id)
        logger.info("Streaming abierto para %s (%s)", product_id, stream.name)

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        stream.close()
        stream.clear_listeners()
        logger.info("Streaming cerrado (%s)", stream.name)

    def _on_stream_trade(self, token: int, trade: Trade) -> None:
        if not self._generation.is_current(token):
            logger.debug("Trade de generación obsoleta descartado")
            return
        self.on_trade(trade)

    def _on_stream_event(
        self,
        token: int,
        source: DataSource,
        info: StreamErrorInfo | StreamCloseInfo,
    ) -> None:
        if not self._generation.is_current(token):
            return
        formatter = source.streaming_formatter or format_streaming_error
        message = formatter(info)
        if message:
            logger.warning("Streaming: %s", message)
            self.notify(message)

    @staticmethod
    def _format_historic_error(source: DataSource, exc: FeedError) -> str:
        status = exc.message or "Unknown reason."
        detail = None
        if source.historic_formatter is not None and exc.payload is not None:
            detail = source.historic_formatter(exc.payload)
        if detail:
            return f"Error getting historic data: {status}. {detail}"
        return f"Error getting historic data: {status}"

    # ──────────────────────── Trades ────────────────────────────────────

    def on_trade(self, trade: Trade) -> Candle:
        """
        Agregar un trade. Si el dominio seguía a la última vela, avanza con
        ella; si no, el dominio queda donde el usuario lo dejó.
        """
        was_tracking = self.tracking_latest
        candle = self._aggregator.ingest(self._data, trade)
        dropped = self._data.trim_to(self._settings.max_candles)
        if dropped:
            logger.debug("Working set recortado: %d velas antiguas descartadas", dropped)

        extent = data_extent(self._data.view())
        if not self._domain_is_sized():
            self._domain = self._latest_window(extent)
        elif was_tracking:
            self._domain = self._viewport.move_to_latest(self._domain, extent)

        self._publish()
        return candle

    # ──────────────────────── Viewport ──────────────────────────────────

    def on_view_change(self, domain: TimeDomain) -> Optional[ViewportUpdate]:
        self._domain = domain
        return self._publish()

    def reset_to_latest(self) -> Optional[TimeDomain]:
        extent = data_extent(self._data.view())
        if extent is None:
            return None
        self._domain = self._latest_window(extent)
        self._publish()
        return self._domain

    def _latest_window(self, extent: TimeDomain) -> TimeDomain:
        return self._viewport.move_to_latest(
            extent, extent, self._settings.default_visible_ratio
        )

    def _domain_is_sized(self) -> bool:
        """False mientras no haya dominio o sea de ancho cero (1 sola vela)."""
        return self._domain is not None and not self._domain.is_degenerate

    def center_on(self, date: float) -> Optional[TimeDomain]:
        if self._domain is None:
            return None
        self._domain = self._viewport.center_on_date(self._domain, self._data.view(), date)
        self._publish()
        return self._domain

    def zoom_controller(self, width: float, source: str = "primary") -> ZoomController:
        """Crear un ZoomController conectado a esta sesión."""
        controller = ZoomController(
            width,
            self._provider,
            allow_pan=self._settings.allow_pan,
            allow_zoom=self._settings.allow_zoom,
            source=source,
        )
        controller.on_domain_change(lambda event: self.on_view_change(event.domain))
        self._zoom_controllers.append(controller)
        self._sync_controller(controller)
        return controller

    def detach_zoom_controller(self, controller: ZoomController) -> bool:
        """Desconectar un controlador: deja de recibir y de publicar dominios."""
        try:
            self._zoom_controllers.remove(controller)
        except ValueError:
            return False
        controller.clear_listeners()
        controller.end_gesture()
        return True

    def current_update(self) -> Optional[ViewportUpdate]:
        # Un dominio de ancho cero no se renderiza: se espera a tener datos
        if not self._domain_is_sized():
            return None
        return ViewportUpdate(
            domain=self._domain,
            visible_data=tuple(
                self._viewport.filter_in_range(self._domain, self._data.view())
            ),
            tracking_latest=self.tracking_latest,
        )

    def _publish(self) -> Optional[ViewportUpdate]:
        update = self.current_update()
        if update is None:
            return None
        for controller in self._zoom_controllers:
            self._sync_controller(controller, update.tracking_latest)
        if self._render_sink is not None:
            self._render_sink.render(update)
        self._emit(TOPIC_VIEWPORT, update)
        return update

    def _sync_controller(
        self, controller: ZoomController, tracking: Optional[bool] = None
    ) -> None:
        extent = data_extent(self._data.view())
        if not self._domain_is_sized() or extent is None:
            return
        if tracking is None:
            tracking = self.tracking_latest
        controller.configure(self._domain, extent, tracking_latest=tracking)

    # ──────────────────────── Notificaciones ────────────────────────────

    def notify(self, message: str, level: str = "error") -> Notification:
        notification = Notification(
            id=next(self._notification_ids), message=message, level=level
        )
        self._notifications.insert(0, notification)
        self._emit(TOPIC_NOTIFICATION, notification)
        return notification

    def dismiss(self, notification_id: int) -> bool:
        for index, notification in enumerate(self._notifications):
            if notification.id == notification_id:
                del self._notifications[index]
                return True
        return False

    def dismiss_all(self) -> None:
        self._notifications.clear()

    def _emit(self, topic: str, data: Any) -> None:
        if self._publisher is not None:
            self._publisher.publish(topic, data)
