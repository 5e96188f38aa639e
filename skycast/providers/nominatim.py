"""Reverse geocoding through OpenStreetMap Nominatim."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .base import WeatherProvider
from ..entities import FetchResult


def format_place(address: Mapping[str, Any]) -> Optional[str]:
    """Build "City, Country", preferring city over town, else just the country."""
    locality = address.get("city") or address.get("town")
    parts = [part for part in (locality, address.get("country")) if part]
    if not parts:
        return None
    return ", ".join(parts)


class PlaceResolver(WeatherProvider):
    name = "place"
    base_url = "https://nominatim.openstreetmap.org/reverse"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    def resolve(self, latitude: float, longitude: float) -> FetchResult:
        return self.fetch(latitude, longitude)

    def _fetch(self, latitude: float, longitude: float) -> Optional[str]:
        params = {"lat": f"{latitude:.2f}", "lon": f"{longitude:.2f}", "format": "json"}
        data = self._get_json(self.base_url, params=params)
        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            return None
        return format_place(address)


__all__ = ["PlaceResolver", "format_place"]
