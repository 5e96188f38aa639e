"""SMHI point forecast provider.

See https://opendata.smhi.se/apidocs/metfcst/parameters.html for the
parameter names handled here.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .base import ProviderError, WeatherProvider, format_timestamp, safe_float
from ..entities import WeatherBundle, WeatherSample
from ..icons import icon_for_symbol
from ..solar import is_daytime

# SMHI publishes -9 when a value does not apply, e.g. spp without precipitation.
MISSING_VALUE = -9


def _rounded(value: object) -> Optional[float]:
    return safe_float(value, 1)


def _okta_to_percent(value: object) -> Optional[float]:
    okta = safe_float(value)
    if okta is None:
        return None
    return okta / 8 * 100


def _frozen_probability(value: object) -> Optional[float]:
    number = safe_float(value)
    if number is None or number == MISSING_VALUE:
        return None
    return number


# parameter name -> (WeatherSample field, converter)
PARAMETERS: Mapping[str, Tuple[str, Callable[[object], Optional[float]]]] = {
    "t": ("temperature", _rounded),
    "r": ("humidity", safe_float),
    "vis": ("visibility", _rounded),
    "ws": ("wind_speed", _rounded),
    "gust": ("gust", _rounded),
    "wd": ("wind_direction", safe_float),
    "msl": ("pressure", _rounded),
    "spp": ("spp", _frozen_probability),
    "tcc_mean": ("cloudiness", _okta_to_percent),
    "tstm": ("thunder_risk", safe_float),
    "pmean": ("precipitation", safe_float),
}


class SMHIProvider(WeatherProvider):
    name = "smhi"
    base_url = (
        "https://opendata-download-metfcst.smhi.se/api/category/pmp3g/version/2"
        "/geotype/point/lon/{longitude}/lat/{latitude}/data.json"
    )

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    def _fetch(self, latitude: float, longitude: float) -> WeatherBundle:
        url = self.base_url.format(latitude=f"{latitude:.2f}", longitude=f"{longitude:.2f}")
        data = self._get_json(url)
        if not isinstance(data, dict) or not isinstance(data.get("timeSeries"), list):
            raise ProviderError("response lacks time series data")

        cutoff = self._current_hour()
        forecast: Dict[int, WeatherSample] = {}
        for entry in data["timeSeries"]:
            sample = self._build_sample(entry, latitude, longitude)
            if sample.time is not None and sample.time > cutoff:
                forecast[sample.time] = sample

        if not forecast:
            return WeatherBundle()
        return WeatherBundle(current=forecast[min(forecast)], forecast=forecast)

    def _build_sample(self, entry: Mapping[str, Any], latitude: float, longitude: float) -> WeatherSample:
        timestamp = _parse_valid_time(entry["validTime"])
        is_day = is_daytime(timestamp, latitude, longitude)
        values: Dict[str, Any] = {
            "time": timestamp,
            "time_formatted": format_timestamp(timestamp),
        }
        for parameter in entry.get("parameters") or []:
            name = parameter.get("name")
            raw = (parameter.get("values") or [None])[0]
            if name == "Wsymb2":
                values["icon"] = icon_for_symbol(raw, is_day)
                continue
            mapping = PARAMETERS.get(name)
            if mapping is None:
                continue
            field_name, convert = mapping
            values[field_name] = convert(raw)
        return WeatherSample(**values)


def _parse_valid_time(value: str) -> int:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


__all__ = ["SMHIProvider", "MISSING_VALUE", "PARAMETERS"]
