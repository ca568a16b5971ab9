"""Data Transfer Objects."""
from pulsechart.application.dto.catalogue import (
    Period,
    Product,
    DataSource,
    STANDARD_PERIODS,
    WEEK_1,
    DAY_1,
    HOUR_1,
    MINUTE_5,
    MINUTE_1,
)
from pulsechart.application.dto.notifications import (
    format_websocket_close,
    format_streaming_error,
    format_historic_error,
)

__all__ = [
    "Period",
    "Product",
    "DataSource",
    "STANDARD_PERIODS",
    "WEEK_1",
    "DAY_1",
    "HOUR_1",
    "MINUTE_5",
    "MINUTE_1",
    "format_websocket_close",
    "format_streaming_error",
    "format_historic_error",
]
