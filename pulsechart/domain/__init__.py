"""
PulseChart – Domain Layer
===========================
Núcleo puro del motor del gráfico. CERO dependencias externas.

Este módulo contiene:
- entities/: Candle, CandleSequence
- value_objects/: Trade, TimeDomain
- services/: discontinuidades, escala temporal, agregador OHLC, viewport
- events/: eventos de dominio
- exceptions/: excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- application/
- infrastructure/
- Frameworks externos
"""

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.entities.candle_sequence import CandleSequence
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.domain.value_objects.time_domain import TimeDomain

__all__ = [
    "Candle",
    "CandleSequence",
    "Trade",
    "TimeDomain",
]
