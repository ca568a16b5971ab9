"""Casos de uso de la aplicación."""
from pulsechart.application.use_cases.generation import GenerationToken
from pulsechart.application.use_cases.zoom_controller import GestureState, ZoomController
from pulsechart.application.use_cases.chart_session import ChartSession

__all__ = [
    "GenerationToken",
    "GestureState",
    "ZoomController",
    "ChartSession",
]
