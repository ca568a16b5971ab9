"""
PulseChart – Formateadores de notificaciones
==============================================
Traducen payloads crudos de los feeds (errores, cierres de socket,
respuestas de error de la API histórica) a un mensaje legible, o a None
cuando el evento no merece notificación (cierre limpio, 1000, 1006).
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pulsechart.application.ports.streaming_feed import StreamCloseInfo, StreamErrorInfo

# Cierres normales o abnormales sin información útil
_SILENT_CLOSE_CODES = frozenset({1000, 1006})


def format_websocket_close(event: StreamCloseInfo) -> Optional[str]:
    if event.was_clean is False and event.code not in _SILENT_CLOSE_CODES:
        reason = event.reason or "Unkown reason."
        return f"Disconnected from live stream: {event.code} {reason}"
    return None


def format_streaming_error(event: StreamErrorInfo | StreamCloseInfo) -> Optional[str]:
    """Formateador por defecto para errores Y cierres del streaming feed."""
    if isinstance(event, StreamCloseInfo):
        # El evento de error del socket trae poca información: el cierre sí
        return format_websocket_close(event)
    if event.type == "error" and event.message:
        return f"Live stream error: {event.message}"
    return None


def format_historic_error(response: Optional[Mapping[str, Any]]) -> Optional[str]:
    if response:
        return response.get("message")
    return None
