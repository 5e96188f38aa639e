"""WeatherAPI.com forecast and air-quality provider.

See https://www.weatherapi.com/docs/ for the response layout.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .base import ProviderError, WeatherProvider, format_timestamp, safe_float
from ..entities import AirQualitySample, FetchResult, WeatherBundle, WeatherSample
from ..icons import icon_for_condition
from ..solar import is_daytime


def _kmh_to_ms(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round(value / 3.6, 2)


def _thunder_risk(condition: Optional[str]) -> Optional[float]:
    if condition is None:
        return None
    return 100.0 if "thunder" in condition.lower() else 0.0


class WeatherAPIProvider(WeatherProvider):
    name = "weatherapi"
    base_url = "https://api.weatherapi.com/v1/forecast.json"

    def __init__(self, api_key: Optional[str], base_url: Optional[str] = None, days: int = 14, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = (api_key or "").strip()
        self.base_url = base_url or self.base_url
        self.days = days

    def fetch(self, latitude: float, longitude: float) -> FetchResult:
        if not self.api_key:
            self._log.debug("No WeatherAPI key configured, skipping")
            return FetchResult.skipped(self.name, "missing api key")
        return super().fetch(latitude, longitude)

    def _fetch(self, latitude: float, longitude: float) -> WeatherBundle:
        params = {
            "key": self.api_key,
            "q": f"{latitude:.2f},{longitude:.2f}",
            "days": self.days,
            "aqi": "yes",
            "alerts": "no",
        }
        data = self._get_json(self.base_url, params=params)
        forecast_days = (data.get("forecast") or {}).get("forecastday") if isinstance(data, dict) else None
        if not isinstance(forecast_days, list):
            raise ProviderError("response lacks forecast data")

        cutoff = self._current_hour()
        forecast: Dict[int, WeatherSample] = {}
        for day in forecast_days:
            for hour in day.get("hour") or []:
                sample = self._build_sample(hour, latitude, longitude)
                if sample.time > cutoff:
                    forecast[sample.time] = sample

        current = forecast[min(forecast)] if forecast else WeatherSample()
        return WeatherBundle(
            current=current,
            forecast=forecast,
            air_quality=self._air_quality(data.get("current") or {}),
        )

    # helpers ------------------------------------------------------------
    def _build_sample(self, hour: Mapping[str, Any], latitude: float, longitude: float) -> WeatherSample:
        timestamp = self._hour_timestamp(hour)
        condition = (hour.get("condition") or {}).get("text")
        is_day = is_daytime(timestamp, latitude, longitude)
        return WeatherSample(
            time=timestamp,
            time_formatted=format_timestamp(timestamp),
            temperature=safe_float(hour.get("temp_c"), 1),
            humidity=safe_float(hour.get("humidity")),
            visibility=safe_float(hour.get("vis_km")),
            gust=_kmh_to_ms(safe_float(hour.get("gust_kph"))),
            wind_speed=_kmh_to_ms(safe_float(hour.get("wind_kph"))),
            wind_direction=safe_float(hour.get("wind_degree")),
            # millibar and hectopascal are the same unit
            pressure=safe_float(hour.get("pressure_mb")),
            cloudiness=safe_float(hour.get("cloud")),
            thunder_risk=_thunder_risk(condition),
            precipitation=safe_float(hour.get("precip_mm")),
            condition=condition,
            uv_index=safe_float(hour.get("uv")),
            feels_like=safe_float(hour.get("feelslike_c")),
            dew_point=safe_float(hour.get("dewpoint_c")),
            heat_index=safe_float(hour.get("heatindex_c")),
            wind_chill=safe_float(hour.get("windchill_c")),
            icon=icon_for_condition(condition, is_day),
        )

    def _hour_timestamp(self, hour: Mapping[str, Any]) -> int:
        epoch = hour.get("time_epoch")
        if epoch is not None:
            return int(epoch)
        # "2025-01-09 14:00"; taken as UTC
        parsed = datetime.strptime(hour["time"], "%Y-%m-%d %H:%M")
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())

    def _air_quality(self, current: Mapping[str, Any]) -> Optional[AirQualitySample]:
        payload = current.get("air_quality")
        if not isinstance(payload, dict):
            return None
        return AirQualitySample(
            pm2_5=safe_float(payload.get("pm2_5")),
            pm10=safe_float(payload.get("pm10")),
            o3=safe_float(payload.get("o3")),
            no2=safe_float(payload.get("no2")),
            so2=safe_float(payload.get("so2")),
            co=safe_float(payload.get("co")),
        )


__all__ = ["WeatherAPIProvider"]
