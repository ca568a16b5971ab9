"""
PulseChart – Random Financial Feed
====================================
Feed histórico sintético: genera velas diarias a partir de un paseo
aleatorio geométrico (GBM) intradía con numpy.

- Solo granularidad diaria (86400 s); cualquier otra es un error fatal.
- Solo sirve su propio producto (`product_id`, "Data Generator" por defecto).
- La última vela cae en la medianoche UTC del día de `request.end`.

  precio_t+1 = precio_t · exp((μ - σ²/2)·dt + σ·√dt·Z),  Z ~ N(0, 1)
"""

from __future__ import annotations

import math
from typing import FrozenSet, List, Optional

import numpy as np

from pulsechart.application.ports.historic_feed import HistoricFeed, HistoricRequest
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions.domain_errors import ConfigurationError
from pulsechart.domain.services.discontinuity import MILLIS_PER_DAY, is_weekend
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("random_financial_feed")

DATA_GENERATOR_PRODUCT = "Data Generator"
WEEKDAY_GENERATOR_PRODUCT = "Weekday Data Generator"
DAILY = 60 * 60 * 24


class RandomFinancialFeed(HistoricFeed):
    """Generador de datos OHLCV diarios aleatorios."""

    name = "random_financial"
    supported_granularities: Optional[FrozenSet[int]] = frozenset({DAILY})

    def __init__(
        self,
        start_price: float = 100.0,
        mu: float = 0.1,
        sigma: float = 0.1,
        steps_per_day: int = 50,
        volume_range: tuple[int, int] = (100, 10_000),
        skip_weekends: bool = False,
        seed: Optional[int] = None,
        product_id: str = DATA_GENERATOR_PRODUCT,
    ) -> None:
        if start_price <= 0:
            raise ConfigurationError(f"start_price must be > 0, got {start_price}")
        if steps_per_day < 1:
            raise ConfigurationError(f"steps_per_day must be >= 1, got {steps_per_day}")
        self._start_price = start_price
        self._mu = mu
        self._sigma = sigma
        self._steps_per_day = steps_per_day
        self._volume_range = volume_range
        self._skip_weekends = skip_weekends
        self._rng = np.random.default_rng(seed)
        self._product_id = product_id

    def validate_product(self, product_id: str) -> None:
        if product_id != self._product_id:
            raise ConfigurationError(
                "Random Financial Data Generator does not support products.",
                code="UNSUPPORTED_PRODUCT",
            )

    async def fetch(self, request: HistoricRequest) -> List[Candle]:
        self.validate_granularity(request.granularity_seconds)
        self.validate_product(request.product_id)

        end_day = math.floor(request.end / MILLIS_PER_DAY) * MILLIS_PER_DAY
        days = [end_day - i * MILLIS_PER_DAY for i in range(request.candles - 1, -1, -1)]
        if self._skip_weekends:
            days = [d for d in days if not is_weekend(d)]

        candles = self._generate(days)
        logger.debug(
            "Generadas %d velas diarias hasta %s", len(candles), end_day
        )
        return candles

    def _generate(self, days: List[float]) -> List[Candle]:
        if not days:
            return []
        steps = self._steps_per_day
        dt = 1.0 / (365 * steps)
        drift = (self._mu - 0.5 * self._sigma ** 2) * dt
        shocks = self._sigma * math.sqrt(dt) * self._rng.standard_normal((len(days), steps))
        # Paseo continuo: cada día arranca donde cerró el anterior
        log_paths = np.log(self._start_price) + np.cumsum(drift + shocks, axis=None).reshape(
            len(days), steps
        )
        prices = np.exp(log_paths)
        volumes = self._rng.integers(
            self._volume_range[0], self._volume_range[1], size=len(days), endpoint=True
        )

        candles: List[Candle] = []
        for date, path, volume in zip(days, prices, volumes):
            candles.append(
                Candle(
                    date=float(date),
                    open=float(path[0]),
                    high=float(path.max()),
                    low=float(path.min()),
                    close=float(path[-1]),
                    volume=float(volume),
                )
            )
        return candles
