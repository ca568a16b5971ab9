"""
PulseChart – Domain Service: DiscontinuousTimeScale
=====================================================
Escala lineal tiempo ↔ píxel cuyo eje temporal se mide con un
DiscontinuityProvider: un fin de semana excluido ocupa 0 píxeles.

    px = r0 + (r1 - r0) * distance(d0, t) / distance(d0, d1)
    t  = offset(d0, (px - r0) / (r1 - r0) * distance(d0, d1))
"""

from __future__ import annotations

from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
)
from pulsechart.domain.value_objects.time_domain import TimeDomain


class DiscontinuousTimeScale:
    """Mapeo píxel ↔ tiempo para un dominio y un rango de píxeles."""

    def __init__(
        self,
        domain: TimeDomain,
        range_px: tuple[float, float],
        provider: DiscontinuityProvider | None = None,
    ) -> None:
        self._domain = domain
        self._range = (float(range_px[0]), float(range_px[1]))
        self._provider = provider or IdentityDiscontinuity()

    @property
    def domain(self) -> TimeDomain:
        return self._domain

    @property
    def range(self) -> tuple[float, float]:
        return self._range

    @property
    def provider(self) -> DiscontinuityProvider:
        return self._provider

    def _span(self) -> float:
        return self._provider.distance(self._domain.start, self._domain.end)

    def __call__(self, instant: float) -> float:
        r0, r1 = self._range
        span = self._span()
        if span == 0:
            return r0
        return r0 + (r1 - r0) * self._provider.distance(self._domain.start, instant) / span

    def invert(self, px: float) -> float:
        r0, r1 = self._range
        if r1 == r0:
            return self._domain.start
        return self._provider.offset(
            self._domain.start, (px - r0) / (r1 - r0) * self._span()
        )

    def with_domain(self, domain: TimeDomain) -> DiscontinuousTimeScale:
        return DiscontinuousTimeScale(domain, self._range, self._provider)

    def copy(self) -> DiscontinuousTimeScale:
        return self.with_domain(self._domain)

    def __repr__(self) -> str:
        return (
            f"DiscontinuousTimeScale(domain={self._domain}, range={self._range}, "
            f"provider={self._provider!r})"
        )
