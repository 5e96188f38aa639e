from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Number = Union[float, int, str]


@dataclass(frozen=True)
class Coordinates:
    """A location rounded to two decimals, the resolution every feed is queried at."""

    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Number, longitude: Number) -> "Coordinates":
        lat = _to_float(latitude)
        lon = _to_float(longitude)
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"latitude out of range: {lat}")
        if not -180.0 <= lon <= 180.0:
            raise ValueError(f"longitude out of range: {lon}")
        return cls(latitude=round(lat, 2) + 0.0, longitude=round(lon, 2) + 0.0)

    @property
    def lat_text(self) -> str:
        return format_coordinate(self.latitude)

    @property
    def lon_text(self) -> str:
        return format_coordinate(self.longitude)


def format_coordinate(value: float) -> str:
    """Fixed two-decimal text, so 59.1 and 59.10 render identically."""
    # adding 0.0 turns -0.0 into 0.0
    return f"{round(value, 2) + 0.0:.2f}"


def _to_float(value: Number) -> float:
    if isinstance(value, str):
        # Accept "59,127" as written with a decimal comma.
        value = value.strip().replace(",", ".")
    return float(value)


__all__ = ["Coordinates", "format_coordinate"]
