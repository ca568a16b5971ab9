"""
PulseChart – Domain Value Object: TimeDomain
==============================================
Rango visible del eje temporal `[start, end]` (epoch ms, start <= end).

Todas las sub-vistas (plot principal, indicadores, eje, navegador) usan
el mismo TimeDomain; ChartSession publica uno solo por cambio.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class TimeDomain:
    """Par `[start, end]` de instantes en epoch ms."""

    start: float
    end: float

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TimeDomain requires start <= end, got start={self.start} end={self.end}"
            )

    @classmethod
    def of(cls, a: float, b: float) -> TimeDomain:
        """Construir desde dos instantes en cualquier orden (extent)."""
        return cls(min(a, b), max(a, b))

    def __iter__(self) -> Iterator[float]:
        yield self.start
        yield self.end

    @property
    def is_degenerate(self) -> bool:
        """Dominio de ancho cero: no se puede renderizar."""
        return self.start == self.end

    def contains(self, instant: float) -> bool:
        return self.start <= instant <= self.end

    def clamp_to(self, bounds: TimeDomain) -> TimeDomain:
        """Recorte componente a componente contra `bounds`."""
        start = min(max(self.start, bounds.start), bounds.end)
        end = max(min(self.end, bounds.end), bounds.start)
        return TimeDomain.of(start, end)

    def to_list(self) -> list[float]:
        return [self.start, self.end]
