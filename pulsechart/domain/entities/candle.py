"""
PulseChart – Domain Entity: Candle
====================================
Vela OHLCV inmutable, identificada por el inicio de su bucket.

Decisiones de diseño:
- frozen=True → una vela nunca se muta in-place. Cuando un trade cae en un
  bucket existente, OhlcAggregator reemplaza la vela en la secuencia por
  `candle.absorb(...)`. Los renderers pueden quedarse con referencias viejas
  sin ver cambios a mitad de frame.
- `date` es epoch en milisegundos UTC, alineado a la granularidad activa.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLCV con fecha de apertura del bucket."""

    date: float        # epoch ms (inicio del bucket)
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def opened_by(cls, date: float, price: float, size: float) -> Candle:
        """Vela creada por el primer trade de un bucket."""
        return cls(
            date=date,
            open=price,
            high=price,
            low=price,
            close=price,
            volume=size,
        )

    def absorb(self, price: float, size: float) -> Candle:
        """Nueva vela con un trade más: high/low extendidos, close = price."""
        return replace(
            self,
            high=max(self.high, price),
            low=min(self.low, price),
            close=price,
            volume=self.volume + size,
        )

    def to_dict(self) -> dict:
        """Serialización para el render sink / JSON."""
        return {
            "date": self.date,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
