"""
PulseChart – Application Port: Streaming Feed
===============================================
Interfaz de un feed de trades en tiempo real.

Ciclo de vida:
  1. on_message / on_error / on_close → registrar listeners
  2. open(product_id)                 → empezar a emitir
  3. close()                          → idempotente; llamar varias veces es seguro

Los listeners son callbacks síncronos: el núcleo es single-threaded y
procesa cada evento completo antes del siguiente.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pulsechart.domain.value_objects.trade import Trade

MessageListener = Callable[[Trade], None]
ErrorListener = Callable[["StreamErrorInfo"], None]
CloseListener = Callable[["StreamCloseInfo"], None]


@dataclass(frozen=True, slots=True)
class StreamErrorInfo:
    """Error reportado por el feed (payload crudo incluido)."""

    type: str = "error"
    message: Optional[str] = None
    payload: Any = None


@dataclass(frozen=True, slots=True)
class StreamCloseInfo:
    """Información de cierre estilo WebSocket."""

    code: int = 1000
    reason: str = ""
    was_clean: bool = True


class StreamingFeed(ABC):
    """Base con registro de listeners; las subclases implementan open/close."""

    name: str = "streaming"

    def __init__(self) -> None:
        self._message_listeners: List[MessageListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._close_listeners: List[CloseListener] = []

    # ──────────────────────── Listeners ─────────────────────────────────

    def on_message(self, listener: MessageListener) -> StreamingFeed:
        self._message_listeners.append(listener)
        return self

    def on_error(self, listener: ErrorListener) -> StreamingFeed:
        self._error_listeners.append(listener)
        return self

    def on_close(self, listener: CloseListener) -> StreamingFeed:
        self._close_listeners.append(listener)
        return self

    def clear_listeners(self) -> None:
        self._message_listeners.clear()
        self._error_listeners.clear()
        self._close_listeners.clear()

    def _emit_message(self, trade: Trade) -> None:
        for listener in list(self._message_listeners):
            listener(trade)

    def _emit_error(self, info: StreamErrorInfo) -> None:
        for listener in list(self._error_listeners):
            listener(info)

    def _emit_close(self, info: StreamCloseInfo) -> None:
        for listener in list(self._close_listeners):
            listener(info)

    # ──────────────────────── Lifecycle ─────────────────────────────────

    @abstractmethod
    def open(self, product_id: str) -> None:
        """Empezar a emitir trades del producto."""

    @abstractmethod
    def close(self) -> None:
        """Cerrar la conexión. Idempotente."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True si el feed está emitiendo."""
