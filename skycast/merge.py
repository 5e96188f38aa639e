"""Field-level overlay of weather sources into one aggregate record.

Sources are applied in order. A field keeps the first known value it gets;
later sources only fill fields that are still unknown (``None``). Applying the
same data twice is a no-op, and swapping the source order changes which value
wins a conflict.
"""
from __future__ import annotations

from dataclasses import fields, replace
from typing import Dict, Iterable, Optional, Sequence, TypeVar

from .entities import (
    AggregateRecord,
    AirQualitySample,
    ForecastSeries,
    Location,
    WeatherBundle,
    WeatherSample,
)

T = TypeVar("T", WeatherSample, AirQualitySample)


def overlay(base: T, incoming: Optional[T]) -> T:
    """Return ``base`` with its unknown fields taken from ``incoming``."""
    if incoming is None:
        return base
    updates = {}
    for item in fields(base):
        if getattr(base, item.name) is None:
            value = getattr(incoming, item.name)
            if value is not None:
                updates[item.name] = value
    if not updates:
        return base
    return replace(base, **updates)


def merge_forecasts(*series: Optional[ForecastSeries]) -> ForecastSeries:
    """Union of timestamps; each timestamp overlays the series in argument order."""
    merged: Dict[int, WeatherSample] = {}
    for forecast in series:
        if not forecast:
            continue
        for timestamp, sample in forecast.items():
            shell = merged.get(timestamp, WeatherSample())
            merged[timestamp] = overlay(shell, sample)
    return merged


def merge_bundles(
    bundles: Iterable[Optional[WeatherBundle]],
    *,
    location: Location,
    kp_index: Optional[float] = None,
    aurora_probability: Optional[float] = None,
) -> AggregateRecord:
    current = WeatherSample()
    air_quality = AirQualitySample()
    forecasts = []
    for bundle in bundles:
        if bundle is None:
            continue
        current = overlay(current, bundle.current)
        air_quality = overlay(air_quality, bundle.air_quality)
        forecasts.append(bundle.forecast)
    return AggregateRecord(
        location=location,
        current=current,
        forecast=merge_forecasts(*forecasts),
        air_quality=air_quality,
        kp_index=kp_index,
        aurora_probability=aurora_probability,
    )


def merge(
    primary_current: Optional[WeatherSample],
    secondary_current: Optional[WeatherSample],
    primary_air_quality: Optional[AirQualitySample] = None,
    secondary_air_quality: Optional[AirQualitySample] = None,
    primary_forecast: Optional[ForecastSeries] = None,
    secondary_forecast: Optional[ForecastSeries] = None,
    *,
    location: Location,
    kp_index: Optional[float] = None,
    aurora_probability: Optional[float] = None,
) -> AggregateRecord:
    """Two-source merge: every primary value beats the secondary one."""
    bundles: Sequence[WeatherBundle] = (
        WeatherBundle(
            current=primary_current or WeatherSample(),
            forecast=primary_forecast or {},
            air_quality=primary_air_quality,
        ),
        WeatherBundle(
            current=secondary_current or WeatherSample(),
            forecast=secondary_forecast or {},
            air_quality=secondary_air_quality,
        ),
    )
    return merge_bundles(
        bundles,
        location=location,
        kp_index=kp_index,
        aurora_probability=aurora_probability,
    )


__all__ = ["merge", "merge_bundles", "merge_forecasts", "overlay"]
