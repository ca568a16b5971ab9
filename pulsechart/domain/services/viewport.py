"""
PulseChart – Domain Service: ViewportEngine
=============================================
Funciones puras sobre una secuencia de velas y un DiscontinuityProvider
que deciden QUÉ rango temporal y QUÉ subconjunto de datos es visible.

OPERACIONES:
- filter_in_range  → porción mínima contigua que cubre el dominio, con una
                     vela de margen a cada lado (extents / gridlines).
- center_on_date   → recentrar preservando el ancho "operable" del dominio.
- move_to_latest   → anclar el borde derecho a la última vela.
- tracking_latest  → ¿el borde derecho coincide EXACTAMENTE con la última
                     vela? Sin tolerancia: una vela nueva lo apaga al
                     instante salvo que el dominio avance en el mismo update.

Todas las anchuras se miden con distance/offset del provider, nunca con
resta directa: un dominio de "10 días" sobre SkipWeekends son 10 días
operables.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Optional, Sequence

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
)
from pulsechart.domain.value_objects.time_domain import TimeDomain


def data_extent(data: Sequence[Candle]) -> Optional[TimeDomain]:
    """Extent `[min(date), max(date)]` de los datos, o None si están vacíos."""
    if not data:
        return None
    dates = [c.date for c in data]
    return TimeDomain(min(dates), max(dates))


class ViewportEngine:
    """Políticas de ventana temporal para un provider dado."""

    def __init__(self, provider: DiscontinuityProvider | None = None) -> None:
        self._provider = provider or IdentityDiscontinuity()

    @property
    def provider(self) -> DiscontinuityProvider:
        return self._provider

    def width(self, domain: TimeDomain) -> float:
        """Ancho operable del dominio."""
        return self._provider.distance(domain.start, domain.end)

    # ──────────────────────── Filtrado ──────────────────────────────────

    @staticmethod
    def filter_in_range(domain: TimeDomain, data: Sequence[Candle]) -> list[Candle]:
        """
        Porción contigua de `data` que cubre `domain`, con una vela extra a
        cada lado (acotada a los límites de la lista).
        """
        # sorted() es estable: fechas casi iguales conservan su orden
        ordered = sorted(data, key=lambda c: c.date)
        left = max(0, bisect_left(ordered, domain.start, key=lambda c: c.date) - 1)
        right = min(len(ordered), bisect_right(ordered, domain.end, key=lambda c: c.date) + 1)
        return ordered[left:right]

    # ──────────────────────── Centrado ──────────────────────────────────

    def center_on_date(
        self,
        domain: TimeDomain,
        data: Sequence[Candle],
        center_date: float,
    ) -> TimeDomain:
        """
        Recentrar `domain` en `center_date` preservando su ancho operable.

        - Datos vacíos → el dominio no cambia.
        - Centro fuera del extent de los datos → extent completo (no se puede
          centrar fuera de los datos disponibles).
        - Un centro en fin de semana se lleva primero al cierre del viernes.
        - El resultado se desplaza (con distance/offset) para no salirse del
          extent por ninguno de los dos lados.
        """
        extent = data_extent(data)
        if extent is None:
            return domain

        if not extent.contains(center_date):
            return extent

        provider = self._provider
        half_width = self.width(domain) / 2
        if 2 * half_width >= self.width(extent):
            return extent

        center = provider.clamp_down(center_date)
        start = provider.offset(center, -half_width)
        end = provider.offset(center, half_width)

        shift = 0.0
        if end > extent.end:
            shift = -provider.distance(extent.end, end)
        elif start < extent.start:
            shift = provider.distance(start, extent.start)

        if shift:
            start = provider.offset(start, shift)
            end = provider.offset(end, shift)

        return TimeDomain.of(start, end)

    # ──────────────────────── Latest ────────────────────────────────────

    def move_to_latest(
        self,
        view_domain: TimeDomain,
        data_domain: TimeDomain,
        ratio: float = 1,
    ) -> TimeDomain:
        """
        Dominio cuyo borde derecho es el último instante con datos y cuyo
        ancho operable es `ratio × ancho(view_domain)`, sin superar nunca el
        ancho del extent de datos.
        """
        provider = self._provider
        data_width = self.width(data_domain)
        scaled_width = ratio * self.width(view_domain)

        if scaled_width < data_width:
            return TimeDomain.of(
                provider.offset(data_domain.end, -scaled_width), data_domain.end
            )
        return data_domain

    @staticmethod
    def tracking_latest(domain: TimeDomain, data: Sequence[Candle]) -> bool:
        """True si el borde derecho == fecha de la última vela (igualdad exacta)."""
        if not data:
            return False
        latest = max(c.date for c in data)
        return max(domain.start, domain.end) == latest
