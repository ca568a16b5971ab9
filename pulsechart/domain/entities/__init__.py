"""Domain entities."""
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.entities.candle_sequence import CandleSequence

__all__ = ["Candle", "CandleSequence"]
