"""
PulseChart – Demo Entry Point
===============================
Arranca una sesión de gráfico contra el generador aleatorio, reproduce
unos trades en vivo y registra cada viewport publicado.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el contenedor (Event Bus, feeds, productos "Data Generator" y "Weekday Data Generator")
  3. Seleccionar producto → snapshot histórico → reset to latest
  4. Reproducir trades por el ReplayStreamingFeed
  5. Cerrar la sesión y vaciar el Event Bus

  python -m pulsechart.main
"""

from __future__ import annotations

import asyncio
from typing import Optional

from pulsechart.application.dto.catalogue import Product
from pulsechart.container import Container, init_container
from pulsechart.domain.events.chart_events import ViewportUpdate
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.shared.config.settings import settings
from pulsechart.shared.logging.logger import get_logger, setup_logging

logger = get_logger("main")


class LoggingRenderSink:
    """Render sink que solo registra lo que se dibujaría."""

    def __init__(self) -> None:
        self.renders = 0

    def render(self, update: ViewportUpdate) -> None:
        self.renders += 1
        logger.info(
            "Render #%d: domain=[%.0f, %.0f] velas=%d tracking=%s",
            self.renders,
            update.domain.start,
            update.domain.end,
            len(update.visible_data),
            update.tracking_latest,
        )


async def run_demo(
    container: Optional[Container] = None,
    trades: int = 5,
    product: Optional[Product] = None,
) -> int:
    """Ejecuta la demo y retorna el número de renders."""
    container = container or init_container(settings)
    sink = LoggingRenderSink()
    session = container.get_chart_session(render_sink=sink)
    product = product or container.data_generator_product

    loaded = await session.select(product)
    if not loaded or session.domain is None:
        logger.error("No se pudo cargar el histórico")
        return sink.renders

    latest = session.data.latest
    stream = product.source.streaming_feed
    step_ms = 60_000
    replay = [
        Trade(time=latest.date + (i + 1) * step_ms, price=latest.close * (1 + 0.001 * i), size=1.0)
        for i in range(trades)
    ]
    await stream.play(replay)

    zoom = session.zoom_controller(width=800)
    zoom.zoom_by(1.5)
    zoom.end_gesture()

    session.close()
    container.event_publisher.unsubscribe_all()
    logger.info("Demo finalizada: %d velas, %d renders", len(session.data), sink.renders)
    return sink.renders


def main() -> None:
    setup_logging(settings.log_level)
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
