"""Application ports - Interfaces hacia infraestructura."""
from pulsechart.application.ports.historic_feed import HistoricFeed, HistoricRequest
from pulsechart.application.ports.streaming_feed import (
    StreamingFeed,
    StreamErrorInfo,
    StreamCloseInfo,
)
from pulsechart.application.ports.render_sink import RenderSink
from pulsechart.application.ports.event_publisher import IEventPublisher

__all__ = [
    "HistoricFeed",
    "HistoricRequest",
    "StreamingFeed",
    "StreamErrorInfo",
    "StreamCloseInfo",
    "RenderSink",
    "IEventPublisher",
]
