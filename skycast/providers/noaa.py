"""NOAA Space Weather Prediction Center feeds: planetary Kp and OVATION aurora."""
from __future__ import annotations

from typing import Any, Optional

from .base import ProviderError, WeatherProvider, safe_float


class KpIndexProvider(WeatherProvider):
    """Latest planetary Kp index; the feed is a JSON array, newest entry last."""

    name = "kp"
    base_url = "https://services.swpc.noaa.gov/json/planetary_k_index_1m.json"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    def _fetch(self, latitude: float, longitude: float) -> Optional[float]:
        data = self._get_json(self.base_url)
        if not isinstance(data, list):
            raise ProviderError("expected a JSON array of readings")
        if not data:
            return None
        return safe_float(data[-1]["kp_index"])


class AuroraProvider(WeatherProvider):
    """Aurora probability from the OVATION model grid.

    The grid is a list of ``[longitude, latitude, probability]`` triples. The
    first entry within ``tolerance`` degrees on both axes wins, which is not
    necessarily the closest one.
    """

    name = "aurora"
    base_url = "https://services.swpc.noaa.gov/json/ovation_aurora_latest.json"

    def __init__(self, base_url: Optional[str] = None, tolerance: float = 1.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.tolerance = tolerance

    def _fetch(self, latitude: float, longitude: float) -> Optional[float]:
        data = self._get_json(self.base_url)
        coordinates = data.get("coordinates") if isinstance(data, dict) else None
        if not isinstance(coordinates, list):
            raise ProviderError("response lacks coordinates")
        return find_probability(coordinates, latitude, longitude, self.tolerance)


def find_probability(coordinates: Any, latitude: float, longitude: float, tolerance: float = 1.0) -> Optional[float]:
    for point_lon, point_lat, probability in coordinates:
        if abs(point_lat - latitude) <= tolerance and _longitude_delta(point_lon, longitude) <= tolerance:
            return safe_float(probability)
    return None


def _longitude_delta(a: float, b: float) -> float:
    # The grid runs 0..359 while callers use -180..180.
    return abs((a - b + 180.0) % 360.0 - 180.0)


__all__ = ["AuroraProvider", "KpIndexProvider", "find_probability"]
