"""Domain exceptions."""
from pulsechart.domain.exceptions.domain_errors import (
    DomainError,
    ConfigurationError,
    InvalidGranularityError,
    FeedError,
    InvalidTradeError,
)

__all__ = [
    "DomainError",
    "ConfigurationError",
    "InvalidGranularityError",
    "FeedError",
    "InvalidTradeError",
]
