"""
PulseChart – Domain Value Object: Trade
=========================================
Un trade individual recibido del feed de streaming.

- frozen=True → inmutable, seguro de compartir entre handlers.
- slots=True  → menor footprint de memoria en hot-path.
- `time` en epoch ms UTC.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from pulsechart.domain.exceptions.domain_errors import InvalidTradeError


@dataclass(frozen=True, slots=True)
class Trade:
    """Trade atómico: instante, precio y tamaño."""

    time: float     # epoch ms
    price: float
    size: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.time):
            raise InvalidTradeError("Trade requires a finite time", "time", self.time)
        if not math.isfinite(self.price):
            raise InvalidTradeError("Trade requires a finite price", "price", self.price)
        if not math.isfinite(self.size) or self.size < 0:
            raise InvalidTradeError("Trade requires size >= 0", "size", self.size)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Trade:
        """
        Construir desde un mensaje de feed ("match" de un exchange).

        `time` puede ser epoch ms numérico o un string ISO-8601;
        `price` / `size` pueden venir como string.
        """
        raw_time = payload.get("time")
        if isinstance(raw_time, str):
            dt = datetime.fromisoformat(raw_time.replace("Z", "+00:00"))
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            time_ms = dt.timestamp() * 1000
        elif raw_time is None:
            raise InvalidTradeError("Trade payload without time", "time", None)
        else:
            time_ms = float(raw_time)

        try:
            price = float(payload.get("price"))
            size = float(payload.get("size", 0))
        except (TypeError, ValueError) as e:
            raise InvalidTradeError(f"Trade payload not numeric: {e}") from e

        return cls(time=time_ms, price=price, size=size)

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "price": self.price,
            "size": self.size,
        }
