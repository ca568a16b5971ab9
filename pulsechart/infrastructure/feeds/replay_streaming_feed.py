"""
PulseChart – Replay Streaming Feed
====================================
Feed de streaming en memoria: reproduce trades encolados hacia los
listeners. Sirve para demos, backtests visuales y tests de integración.

- Trades empujados antes de `open()` quedan en cola y se emiten al abrir.
- `play(interval)` reproduce la cola de forma asíncrona (asyncio.sleep
  entre trades) para simular un feed en vivo.
- `close()` es idempotente: emite el evento de cierre UNA sola vez.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Deque, Iterable, Optional

from pulsechart.application.ports.streaming_feed import (
    StreamCloseInfo,
    StreamErrorInfo,
    StreamingFeed,
)
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("replay_streaming_feed")


class ReplayStreamingFeed(StreamingFeed):
    name = "replay"

    def __init__(self, trades: Iterable[Trade] = ()) -> None:
        super().__init__()
        self._pending: Deque[Trade] = deque(trades)
        self._product_id: Optional[str] = None
        self._open = False
        self._emitted = 0

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def product_id(self) -> Optional[str]:
        return self._product_id

    @property
    def emitted(self) -> int:
        return self._emitted

    @property
    def pending(self) -> int:
        return len(self._pending)

    def open(self, product_id: str) -> None:
        self._product_id = product_id
        self._open = True
        logger.info("Replay abierto para %s (%d trades en cola)", product_id, len(self._pending))
        self.flush()

    def push(self, trade: Trade) -> None:
        """Emitir un trade (o encolarlo si el feed aún no está abierto)."""
        if not self._open:
            self._pending.append(trade)
            return
        self._emitted += 1
        self._emit_message(trade)

    def push_dict(self, payload: dict[str, Any]) -> None:
        self.push(Trade.from_dict(payload))

    def flush(self) -> None:
        while self._open and self._pending:
            self.push(self._pending.popleft())

    async def play(self, trades: Iterable[Trade], interval: float = 0.0) -> None:
        """Emitir `trades` uno a uno, cediendo el loop entre cada uno."""
        for trade in trades:
            if not self._open:
                break
            self.push(trade)
            await asyncio.sleep(interval)

    def fail(self, message: str, payload: Any = None) -> None:
        """Reportar un error del feed a los listeners."""
        logger.warning("Replay error: %s", message)
        self._emit_error(StreamErrorInfo(type="error", message=message, payload=payload))

    def close(self, code: int = 1000, reason: str = "", was_clean: bool = True) -> None:
        if not self._open:
            return
        self._open = False
        logger.info("Replay cerrado (code=%d)", code)
        self._emit_close(StreamCloseInfo(code=code, reason=reason, was_clean=was_clean))
