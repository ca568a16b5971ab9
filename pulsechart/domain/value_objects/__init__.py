"""Domain value objects."""
from pulsechart.domain.value_objects.trade import Trade
from pulsechart.domain.value_objects.time_domain import TimeDomain

__all__ = ["Trade", "TimeDomain"]
