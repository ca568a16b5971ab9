"""Domain events."""
from pulsechart.domain.events.chart_events import (
    DomainEvent,
    DomainChanged,
    ViewportUpdate,
    Notification,
)

__all__ = ["DomainEvent", "DomainChanged", "ViewportUpdate", "Notification"]
