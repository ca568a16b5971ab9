"""Domain services - lógica pura sin dependencias externas."""
from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
    SkipWeekendsDiscontinuity,
    provider_for,
)
from pulsechart.domain.services.time_scale import DiscontinuousTimeScale
from pulsechart.domain.services.ohlc_aggregator import OhlcAggregator, bucket_start
from pulsechart.domain.services.viewport import ViewportEngine, data_extent

__all__ = [
    "DiscontinuityProvider",
    "IdentityDiscontinuity",
    "SkipWeekendsDiscontinuity",
    "provider_for",
    "DiscontinuousTimeScale",
    "OhlcAggregator",
    "bucket_start",
    "ViewportEngine",
    "data_extent",
]
