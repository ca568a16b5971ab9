"""
PulseChart – OHLC Aggregator
==============================
Pliega trades individuales en velas de granularidad fija, sobre una
CandleSequence ya ordenada (típicamente el snapshot histórico).

ALGORITMO:
  1. bucket_start = floor(time / (g*1000)) * g*1000
  2. Si existe una vela con date == bucket_start → high/low/close/volume.
  3. Si no existe → se inserta una vela nueva en la posición que mantiene
     el orden (bisección), AUNQUE el trade llegue tarde respecto a la vela
     más reciente. Nunca se hace append ciego.

POLÍTICA DE CLOSE (y OPEN):
  Gobierna el ORDEN DE LLEGADA, no el timestamp. El último trade ingerido
  en un bucket fija `close`; el primero fija `open`. Ejemplo: en un bucket
  de 60s, (10:00:05, 100) y luego (10:00:02, 90) → close = 90.
  high / low / volume son independientes del orden.

RESET:
  El agregador no guarda estado entre granularidades. Al cambiar producto
  o granularidad se descarta la secuencia y se vuelve a cargar un snapshot.

COMPLEJIDAD: O(log n) la búsqueda + O(n) en el peor caso de inserción.
"""

from __future__ import annotations

import math

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.entities.candle_sequence import CandleSequence
from pulsechart.domain.exceptions.domain_errors import ConfigurationError
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("ohlc_aggregator")


def bucket_start(time_ms: float, granularity_seconds: int) -> float:
    """Alinear un instante al inicio de su bucket."""
    granularity_ms = granularity_seconds * 1000
    return math.floor(time_ms / granularity_ms) * granularity_ms


class OhlcAggregator:
    """
    Agrega trades en velas OHLCV sobre una CandleSequence.

    Uso:
        aggregator = OhlcAggregator(granularity_seconds=60)
        candle = aggregator.ingest(sequence, trade)
    """

    def __init__(self, granularity_seconds: int) -> None:
        if granularity_seconds <= 0:
            raise ConfigurationError(
                f"granularity_seconds must be > 0, got {granularity_seconds}"
            )
        self._granularity = int(granularity_seconds)

    @property
    def granularity_seconds(self) -> int:
        return self._granularity

    def bucket_start(self, time_ms: float) -> float:
        return bucket_start(time_ms, self._granularity)

    def ingest(self, sequence: CandleSequence, trade: Trade) -> Candle:
        """
        Plegar un trade en la secuencia (mutación in-place de la secuencia).
        Retorna la vela resultante del bucket.
        """
        start = self.bucket_start(trade.time)
        idx = sequence.index_of(start)

        # ── CASO 1: bucket existente → actualizar ──
        if idx >= 0:
            updated = sequence[idx].absorb(trade.price, trade.size)
            sequence.replace_at(idx, updated)
            return updated

        # ── CASO 2: bucket nuevo → insertar en orden ──
        candle = Candle.opened_by(start, trade.price, trade.size)
        position = sequence.insert(candle)

        if position < len(sequence) - 1:
            logger.debug(
                "Trade tardío: bucket %d insertado en posición %d/%d",
                start, position, len(sequence),
            )
        return candle

    def ingest_many(self, sequence: CandleSequence, trades) -> CandleSequence:
        for trade in trades:
            self.ingest(sequence, trade)
        return sequence


def ingest(
    sequence: CandleSequence, trade: Trade, granularity_seconds: int
) -> Candle:
    """Forma funcional de `OhlcAggregator(granularity_seconds).ingest(...)`."""
    return OhlcAggregator(granularity_seconds).ingest(sequence, trade)
