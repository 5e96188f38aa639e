from __future__ import annotations

from .base import ProviderError, QuotaExceeded, RequestConfig, WeatherProvider
from .noaa import AuroraProvider, KpIndexProvider
from .nominatim import PlaceResolver
from .smhi import SMHIProvider
from .weatherapi import WeatherAPIProvider

__all__ = [
    "AuroraProvider",
    "KpIndexProvider",
    "PlaceResolver",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "SMHIProvider",
    "WeatherAPIProvider",
    "WeatherProvider",
]
