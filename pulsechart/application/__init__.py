"""
PulseChart – Application Layer
================================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: ChartSession, ZoomController, GenerationToken
- ports/: Interfaces hacia infraestructura (feeds, render sink, publisher)
- dto/: Catálogo de productos/periodos y formateadores de notificaciones

REGLA DE DEPENDENCIA:
Esta capa puede importar de domain/ y de sus propios ports/.
NO puede importar de infrastructure/.
"""

from pulsechart.application.use_cases.chart_session import ChartSession
from pulsechart.application.use_cases.zoom_controller import GestureState, ZoomController

__all__ = [
    "ChartSession",
    "ZoomController",
    "GestureState",
]
