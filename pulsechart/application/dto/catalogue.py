"""
PulseChart – Catálogo: Period / Product / DataSource
======================================================
Descripción estática de qué se puede graficar y de dónde salen los datos.

Un DataSource agrupa el feed histórico, el feed de streaming (opcional),
sus formateadores de notificaciones y el DiscontinuityProvider que se
comparte por referencia con todo el pipeline del producto.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from pulsechart.application.ports.historic_feed import HistoricFeed
from pulsechart.application.ports.streaming_feed import StreamingFeed
from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
)

Formatter = Callable[[Any], Optional[str]]


@dataclass(frozen=True, slots=True)
class Period:
    """Granularidad seleccionable."""

    display: str = "1 day"
    seconds: int = 60 * 60 * 24


@dataclass(frozen=True)
class DataSource:
    historic_feed: HistoricFeed
    streaming_feed: Optional[StreamingFeed] = None
    discontinuity_provider: DiscontinuityProvider = field(
        default_factory=IdentityDiscontinuity
    )
    historic_formatter: Optional[Formatter] = None
    streaming_formatter: Optional[Formatter] = None


@dataclass(frozen=True)
class Product:
    id: str
    source: DataSource
    display: str = "Unspecified Product"
    periods: Tuple[Period, ...] = ()

    def supports(self, period: Period) -> bool:
        return not self.periods or any(p.seconds == period.seconds for p in self.periods)

    @property
    def default_period(self) -> Period:
        return self.periods[0] if self.periods else Period()


# Periodos estándar
WEEK_1 = Period("Weekly", 60 * 60 * 24 * 7)
DAY_1 = Period("Daily", 60 * 60 * 24)
HOUR_1 = Period("1 Hr", 60 * 60)
MINUTE_5 = Period("5 Min", 60 * 5)
MINUTE_1 = Period("1 Min", 60)

STANDARD_PERIODS: Tuple[Period, ...] = (WEEK_1, DAY_1, HOUR_1, MINUTE_5, MINUTE_1)
