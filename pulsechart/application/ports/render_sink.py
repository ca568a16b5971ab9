"""
PulseChart – Application Port: Render Sink
============================================
Consumidor puro de viewports: recibe cada cambio aceptado y NUNCA muta
estado del motor.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pulsechart.domain.events.chart_events import ViewportUpdate


@runtime_checkable
class RenderSink(Protocol):
    def render(self, update: ViewportUpdate) -> None:
        """Dibujar `update.visible_data` en `update.domain`."""
        ...
