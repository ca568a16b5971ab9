"""
PulseChart – Domain Entity: CandleSequence
============================================
Secuencia de velas ordenada ascendentemente por `date`, sin fechas
duplicadas. Es el único estado de datos mutable del pipeline; la escribe
el orquestador (ChartSession) y la leen viewport / zoom.

PROTECCIÓN DE MEMORIA:
- `trim_to(max_len)` descarta las velas más antiguas, igual que un
  deque(maxlen=N), pero sin perder el acceso por bisección.

ORDEN:
- Todas las inserciones pasan por bisección (`bisect_left` sobre `date`).
- Los renderers reciben `view()` → tupla inmutable.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterable, Iterator, Optional

from pulsechart.domain.entities.candle import Candle


def _date(candle: Candle) -> float:
    return candle.date


class CandleSequence:
    """Lista de velas ordenada y única por fecha."""

    def __init__(self, candles: Iterable[Candle] = ()) -> None:
        self._candles: list[Candle] = []
        self.replace_all(candles)

    # ──────────────────────── Lectura ───────────────────────────────────

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def __getitem__(self, index):
        return self._candles[index]

    def __bool__(self) -> bool:
        return bool(self._candles)

    def view(self) -> tuple[Candle, ...]:
        """Vista de solo lectura para consumidores externos."""
        return tuple(self._candles)

    @property
    def dates(self) -> list[float]:
        return [c.date for c in self._candles]

    @property
    def first(self) -> Optional[Candle]:
        return self._candles[0] if self._candles else None

    @property
    def latest(self) -> Optional[Candle]:
        return self._candles[-1] if self._candles else None

    def index_of(self, date: float) -> int:
        """Índice de la vela con `date` exacto, o -1."""
        idx = bisect_left(self._candles, date, key=_date)
        if idx < len(self._candles) and self._candles[idx].date == date:
            return idx
        return -1

    def find(self, date: float) -> Optional[Candle]:
        idx = self.index_of(date)
        return self._candles[idx] if idx >= 0 else None

    # ──────────────────────── Escritura ─────────────────────────────────

    def insert(self, candle: Candle) -> int:
        """
        Insertar una vela en la posición que preserva el orden.
        Si ya existe una vela con esa fecha, se reemplaza.
        Retorna el índice final.
        """
        idx = bisect_left(self._candles, candle.date, key=_date)
        if idx < len(self._candles) and self._candles[idx].date == candle.date:
            self._candles[idx] = candle
        else:
            self._candles.insert(idx, candle)
        return idx

    def replace_at(self, index: int, candle: Candle) -> None:
        if self._candles[index].date != candle.date:
            raise ValueError("replace_at no puede cambiar la fecha de la vela")
        self._candles[index] = candle

    def replace_all(self, candles: Iterable[Candle]) -> None:
        """
        Reemplazar todo el contenido (snapshot histórico).
        Orden estable por fecha; ante fechas repetidas gana la última.
        """
        by_date: dict[float, Candle] = {}
        for candle in sorted(candles, key=_date):
            by_date[candle.date] = candle
        self._candles = list(by_date.values())

    def trim_to(self, max_len: int) -> int:
        """Descartar las velas más antiguas por encima de `max_len`. Retorna cuántas."""
        excess = len(self._candles) - max_len
        if excess <= 0:
            return 0
        del self._candles[:excess]
        return excess

    def clear(self) -> None:
        self._candles.clear()
