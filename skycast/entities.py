from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .icons import Icon


def _doc(key: str, unit: str, description: str) -> Dict[str, str]:
    return {"key": key, "unit": unit, "description": description}


@dataclass(frozen=True)
class WeatherSample:
    """Normalized point-in-time weather values.

    Every field defaults to ``None`` which means "this source did not supply
    the value". Units are canonical regardless of the provider:
    - temperatures in Celsius
    - wind and gust in metres per second (m/s)
    - pressure in hectopascal (hPa)
    - cloudiness, humidity, thunder risk and spp in percent
    """

    time: Optional[int] = field(default=None, metadata=_doc("time", "s", "Unix timestamp of the forecast time"))
    time_formatted: Optional[str] = field(
        default=None, metadata=_doc("time_formatted", "", "Forecast time as YYYY-MM-DD HH:MM (UTC)")
    )
    temperature: Optional[float] = field(default=None, metadata=_doc("temperature", "°C", "Air temperature"))
    humidity: Optional[float] = field(default=None, metadata=_doc("humidity", "%", "Relative humidity"))
    visibility: Optional[float] = field(default=None, metadata=_doc("visibility", "km", "Horizontal visibility"))
    gust: Optional[float] = field(default=None, metadata=_doc("gust", "m/s", "Wind gust speed"))
    wind_speed: Optional[float] = field(default=None, metadata=_doc("windSpeed", "m/s", "Wind speed"))
    wind_direction: Optional[float] = field(
        default=None, metadata=_doc("windDirection", "°", "Wind direction, 0-360 degrees")
    )
    pressure: Optional[float] = field(default=None, metadata=_doc("pressure", "hPa", "Mean sea level pressure"))
    cloudiness: Optional[float] = field(default=None, metadata=_doc("cloudiness", "%", "Total cloud cover"))
    thunder_risk: Optional[float] = field(
        default=None, metadata=_doc("thunderRisk", "%", "Thunderstorm probability (0 or 100 for text-only sources)")
    )
    precipitation: Optional[float] = field(
        default=None, metadata=_doc("precipitation", "mm", "Precipitation amount")
    )
    spp: Optional[float] = field(default=None, metadata=_doc("spp", "%", "Probability of frozen precipitation"))
    condition: Optional[str] = field(
        default=None, metadata=_doc("condition", "", "Textual description such as 'Partly cloudy'")
    )
    uv_index: Optional[float] = field(default=None, metadata=_doc("uvIndex", "", "UV index"))
    feels_like: Optional[float] = field(default=None, metadata=_doc("feelsLike", "°C", "Apparent temperature"))
    dew_point: Optional[float] = field(default=None, metadata=_doc("dewPoint", "°C", "Dew point"))
    heat_index: Optional[float] = field(default=None, metadata=_doc("heatIndex", "°C", "Heat index"))
    wind_chill: Optional[float] = field(default=None, metadata=_doc("windChill", "°C", "Wind chill"))
    icon: Optional[Icon] = field(default=None, metadata=_doc("icon", "", "Font Awesome style weather icon name"))

    def to_dict(self) -> Dict[str, Any]:
        payload = _to_keyed_dict(self)
        if self.icon is not None:
            payload["icon"] = self.icon.value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WeatherSample":
        values = _from_keyed_dict(cls, payload)
        if values.get("icon") is not None:
            values["icon"] = Icon(values["icon"])
        return cls(**values)


@dataclass(frozen=True)
class AirQualitySample:
    """Pollutant concentrations in micrograms per cubic metre."""

    pm2_5: Optional[float] = field(default=None, metadata=_doc("pm2_5", "µg/m³", "Particulate matter < 2.5 µm"))
    pm10: Optional[float] = field(default=None, metadata=_doc("pm10", "µg/m³", "Particulate matter < 10 µm"))
    o3: Optional[float] = field(default=None, metadata=_doc("o3", "µg/m³", "Ozone"))
    no2: Optional[float] = field(default=None, metadata=_doc("no2", "µg/m³", "Nitrogen dioxide"))
    so2: Optional[float] = field(default=None, metadata=_doc("so2", "µg/m³", "Sulfur dioxide"))
    co: Optional[float] = field(default=None, metadata=_doc("co", "µg/m³", "Carbon monoxide"))

    def to_dict(self) -> Dict[str, Any]:
        return _to_keyed_dict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AirQualitySample":
        return cls(**_from_keyed_dict(cls, payload))


ForecastSeries = Dict[int, WeatherSample]


@dataclass(frozen=True)
class Location:
    latitude: str
    longitude: str
    place: Optional[str] = None
    generated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "place": self.place,
            "generated_at": self.generated_at,
        }


@dataclass(frozen=True)
class WeatherBundle:
    """What a weather source contributes to the merge."""

    current: WeatherSample = field(default_factory=WeatherSample)
    forecast: ForecastSeries = field(default_factory=dict)
    air_quality: Optional[AirQualitySample] = None

    def is_empty(self) -> bool:
        return not self.forecast and self.air_quality is None and self.current == WeatherSample()


@dataclass(frozen=True)
class AggregateRecord:
    location: Location
    current: WeatherSample = field(default_factory=WeatherSample)
    forecast: ForecastSeries = field(default_factory=dict)
    air_quality: AirQualitySample = field(default_factory=AirQualitySample)
    kp_index: Optional[float] = None
    aurora_probability: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "weather": {
                "current": self.current.to_dict(),
                "forecast": {str(ts): sample.to_dict() for ts, sample in sorted(self.forecast.items())},
            },
            "air_quality": self.air_quality.to_dict(),
            "geomagnetic": {"kp_index": self.kp_index},
            "aurora": {"probability": self.aurora_probability},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AggregateRecord":
        """Rebuild a record from :meth:`to_dict` output.

        Raises ``ValueError`` when the payload does not have the expected
        structure so callers can treat it as corrupt.
        """
        try:
            location = payload["location"]
            weather = payload["weather"]
            return cls(
                location=Location(
                    latitude=str(location["latitude"]),
                    longitude=str(location["longitude"]),
                    place=location.get("place"),
                    generated_at=location.get("generated_at"),
                ),
                current=WeatherSample.from_dict(weather["current"]),
                forecast={
                    int(ts): WeatherSample.from_dict(sample) for ts, sample in weather["forecast"].items()
                },
                air_quality=AirQualitySample.from_dict(payload["air_quality"]),
                kp_index=payload["geomagnetic"]["kp_index"],
                aurora_probability=payload["aurora"]["probability"],
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid aggregate record: {exc!r}") from exc


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a single upstream fetch.

    ``data`` is only meaningful for ``OK``; the other statuses carry a short
    ``reason`` for logs.
    """

    source: str
    status: FetchStatus
    data: Any = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, source: str, data: Any) -> "FetchResult":
        if data is None or (isinstance(data, WeatherBundle) and data.is_empty()):
            return cls(source=source, status=FetchStatus.EMPTY, reason="no data")
        return cls(source=source, status=FetchStatus.OK, data=data)

    @classmethod
    def failure(cls, source: str, reason: str) -> "FetchResult":
        return cls(source=source, status=FetchStatus.FAILED, reason=reason)

    @classmethod
    def skipped(cls, source: str, reason: str) -> "FetchResult":
        return cls(source=source, status=FetchStatus.SKIPPED, reason=reason)


def describe_fields() -> List[Tuple[str, str, str, str]]:
    """Enumerate the documented fields as ``(section, key, unit, description)``."""
    rows: List[Tuple[str, str, str, str]] = []
    for section, model in (("weather", WeatherSample), ("air_quality", AirQualitySample)):
        for item in fields(model):
            meta = item.metadata
            rows.append((section, meta["key"], meta["unit"], meta["description"]))
    rows.append(("geomagnetic", "kp_index", "", "Planetary Kp index, 0-9"))
    rows.append(("aurora", "probability", "%", "Aurora probability at the location"))
    return rows


# helpers ------------------------------------------------------------
def _to_keyed_dict(instance: Any) -> Dict[str, Any]:
    return {item.metadata["key"]: getattr(instance, item.name) for item in fields(instance)}


def _from_keyed_dict(model: type, payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {item.name: payload.get(item.metadata["key"]) for item in fields(model)}


__all__ = [
    "AggregateRecord",
    "AirQualitySample",
    "FetchResult",
    "FetchStatus",
    "ForecastSeries",
    "Location",
    "WeatherBundle",
    "WeatherSample",
    "describe_fields",
]
