"""Sunrise/sunset computation used to pick day or night icons.

Implements the NOAA style sunrise equation, which is accurate to a couple of
minutes. That is plenty for telling a sun from a moon icon.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

_UNIX_EPOCH_JD = 2440587.5
_J2000 = 2451545.0
_OBLIQUITY = math.radians(23.4397)
# Refraction plus solar disc radius.
_HORIZON = math.radians(-0.833)


@dataclass(frozen=True)
class SunTimes:
    """Sunrise and sunset as Unix timestamps.

    Both are ``None`` when the sun never crosses the horizon that day; in that
    case ``polar_day`` tells whether it stays above (midnight sun) or below.
    """

    sunrise: Optional[int]
    sunset: Optional[int]
    polar_day: bool = False

    def contains(self, timestamp: int) -> bool:
        if self.sunrise is None or self.sunset is None:
            return self.polar_day
        return self.sunrise < timestamp < self.sunset


def sun_times(day: date, latitude: float, longitude: float) -> SunTimes:
    days_since_j2000 = (day - date(2000, 1, 1)).days
    mean_solar_noon = days_since_j2000 - longitude / 360.0

    anomaly = math.radians((357.5291 + 0.98560028 * mean_solar_noon) % 360)
    center = 1.9148 * math.sin(anomaly) + 0.0200 * math.sin(2 * anomaly) + 0.0003 * math.sin(3 * anomaly)
    ecliptic_longitude = math.radians((math.degrees(anomaly) + center + 180.0 + 102.9372) % 360)
    transit = (
        _J2000
        + mean_solar_noon
        + 0.0053 * math.sin(anomaly)
        - 0.0069 * math.sin(2 * ecliptic_longitude)
    )

    declination = math.asin(math.sin(ecliptic_longitude) * math.sin(_OBLIQUITY))
    phi = math.radians(latitude)
    cos_hour_angle = (math.sin(_HORIZON) - math.sin(phi) * math.sin(declination)) / (
        math.cos(phi) * math.cos(declination)
    )
    if cos_hour_angle < -1:
        return SunTimes(sunrise=None, sunset=None, polar_day=True)
    if cos_hour_angle > 1:
        return SunTimes(sunrise=None, sunset=None, polar_day=False)

    hour_angle = math.degrees(math.acos(cos_hour_angle))
    return SunTimes(
        sunrise=_julian_to_unix(transit - hour_angle / 360.0),
        sunset=_julian_to_unix(transit + hour_angle / 360.0),
    )


def is_daytime(timestamp: int, latitude: float, longitude: float) -> bool:
    """Return True when the sun is up at ``timestamp`` for the given point.

    The UTC calendar day and its neighbours are checked because far from
    Greenwich a local daylight span can straddle the UTC date line.
    """
    utc_day = datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
    spans = [sun_times(utc_day + timedelta(days=offset), latitude, longitude) for offset in (-1, 0, 1)]
    if spans[1].sunrise is None:
        return spans[1].polar_day
    return any(span.contains(timestamp) for span in spans if span.sunrise is not None)


def _julian_to_unix(julian_day: float) -> int:
    return int(round((julian_day - _UNIX_EPOCH_JD) * 86400))


__all__ = ["SunTimes", "is_daytime", "sun_times"]
