"""Feeds concretos: histórico sintético y streaming de replay."""
from pulsechart.infrastructure.feeds.random_financial_feed import (
    DATA_GENERATOR_PRODUCT,
    WEEKDAY_GENERATOR_PRODUCT,
    RandomFinancialFeed,
)
from pulsechart.infrastructure.feeds.replay_streaming_feed import ReplayStreamingFeed

__all__ = [
    "DATA_GENERATOR_PRODUCT",
    "WEEKDAY_GENERATOR_PRODUCT",
    "RandomFinancialFeed",
    "ReplayStreamingFeed",
]
