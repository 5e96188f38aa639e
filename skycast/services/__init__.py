from __future__ import annotations

from .weather import WeatherAggregator, build_aggregator

__all__ = ["WeatherAggregator", "build_aggregator"]
