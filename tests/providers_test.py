from __future__ import annotations

import pytest
import requests

from skycast.entities import AirQualitySample, FetchStatus, WeatherSample
from skycast.icons import Icon
from skycast.providers.noaa import AuroraProvider, KpIndexProvider, find_probability
from skycast.providers.nominatim import PlaceResolver, format_place
from skycast.providers.smhi import SMHIProvider
from skycast.providers.weatherapi import WeatherAPIProvider
from tests.feeds import (
    AURORA_URL,
    KP_URL,
    LATITUDE,
    LONGITUDE,
    NOMINATIM_URL,
    SMHI_URL,
    T09,
    T10,
    T11,
    T12,
    T22,
    WEATHERAPI_URL,
    smhi_entry,
    weatherapi_hour,
)

LAT, LON = round(LATITUDE, 2), round(LONGITUDE, 2)


# SMHI -----------------------------------------------------------------
def test_smhi_normalization(requests_mock, smhi_payload, clock):
    requests_mock.get(SMHI_URL, json=smhi_payload)
    provider = SMHIProvider(clock=clock)

    result = provider.fetch(LAT, LON)

    assert result.status is FetchStatus.OK
    bundle = result.data
    assert sorted(bundle.forecast) == [T10, T11, T22]
    assert bundle.forecast[T10] == WeatherSample(
        time=T10,
        time_formatted="2025-06-21 10:00",
        temperature=18.4,
        humidity=62.0,
        visibility=42.0,
        gust=7.1,
        wind_speed=3.4,
        wind_direction=215.0,
        pressure=1013.3,
        cloudiness=50.0,
        thunder_risk=1.0,
        precipitation=0.0,
        spp=None,
        icon=Icon.CLOUD_SUN,
    )
    assert bundle.current == bundle.forecast[T10]
    assert bundle.air_quality is None


@pytest.mark.parametrize("okta, expected", [(0, 0.0), (4, 50.0), (8, 100.0), (2, 25.0)])
def test_smhi_okta_to_percent(requests_mock, clock, okta, expected):
    requests_mock.get(SMHI_URL, json={"timeSeries": [smhi_entry("2025-06-21T10:00:00Z", tcc_mean=okta)]})

    bundle = SMHIProvider(clock=clock).fetch(LAT, LON).data

    assert bundle.forecast[T10].cloudiness == expected


def test_smhi_frozen_precipitation_sentinel(requests_mock, clock):
    requests_mock.get(
        SMHI_URL,
        json={
            "timeSeries": [
                smhi_entry("2025-06-21T10:00:00Z", spp=-9),
                smhi_entry("2025-06-21T11:00:00Z", spp=0),
                smhi_entry("2025-06-21T12:00:00Z", spp=40),
            ]
        },
    )

    forecast = SMHIProvider(clock=clock).fetch(LAT, LON).data.forecast

    assert forecast[T10].spp is None
    assert forecast[T11].spp == 0.0
    assert forecast[T12].spp == 40.0


def test_smhi_day_and_night_icons(requests_mock, smhi_payload, clock):
    requests_mock.get(SMHI_URL, json=smhi_payload)

    forecast = SMHIProvider(clock=clock).fetch(LAT, LON).data.forecast

    assert forecast[T11].icon is Icon.SUN
    assert forecast[T22].icon is Icon.MOON


def test_smhi_unknown_symbol_leaves_icon_unknown(requests_mock, clock):
    requests_mock.get(SMHI_URL, json={"timeSeries": [smhi_entry("2025-06-21T10:00:00Z", Wsymb2=99, t=3)]})

    sample = SMHIProvider(clock=clock).fetch(LAT, LON).data.forecast[T10]

    assert sample.icon is None
    assert sample.temperature == 3.0


def test_smhi_time_without_zone_is_utc(requests_mock, clock):
    requests_mock.get(SMHI_URL, json={"timeSeries": [smhi_entry("2025-06-21T10:00:00", t=3)]})

    forecast = SMHIProvider(clock=clock).fetch(LAT, LON).data.forecast

    assert list(forecast) == [T10]
    assert forecast[T10].time_formatted == "2025-06-21 10:00"


def test_smhi_drops_past_hours(requests_mock, clock):
    requests_mock.get(
        SMHI_URL,
        json={"timeSeries": [smhi_entry("2025-06-21T08:00:00Z", t=1), smhi_entry("2025-06-21T09:00:00Z", t=2)]},
    )

    result = SMHIProvider(clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.EMPTY


def test_smhi_missing_time_series_is_a_failure(requests_mock, clock):
    requests_mock.get(SMHI_URL, json={"message": "out of bounds"})

    result = SMHIProvider(clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert "time series" in result.reason


def test_smhi_transport_errors_are_failures(requests_mock, clock):
    requests_mock.get(SMHI_URL, exc=requests.ConnectionError("dns failure"))

    result = SMHIProvider(clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert result.reason == "request failed"


def test_smhi_invalid_json_is_a_failure(requests_mock, clock):
    requests_mock.get(SMHI_URL, text="<html>maintenance</html>")

    result = SMHIProvider(clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert result.reason == "invalid json"


# WeatherAPI -----------------------------------------------------------
def test_weatherapi_without_key_skips_network(requests_mock, clock):
    provider = WeatherAPIProvider(api_key="  ", clock=clock)

    result = provider.fetch(LAT, LON)

    assert result.status is FetchStatus.SKIPPED
    assert requests_mock.call_count == 0


def test_weatherapi_normalization(requests_mock, weatherapi_payload, clock):
    requests_mock.get(WEATHERAPI_URL, json=weatherapi_payload)
    provider = WeatherAPIProvider(api_key="secret", clock=clock)

    result = provider.fetch(LAT, LON)

    assert result.ok
    query = requests_mock.last_request.qs
    assert query["key"] == ["secret"]
    assert query["q"] == ["59.13,18.10"]
    assert query["aqi"] == ["yes"]

    bundle = result.data
    assert sorted(bundle.forecast) == [T10, T12]
    assert T09 not in bundle.forecast
    sample = bundle.forecast[T12]
    assert sample.gust == pytest.approx(7.0)
    assert sample.wind_speed == pytest.approx(4.0)
    assert sample.pressure == 1013.0
    assert sample.cloudiness == 75.0
    assert sample.thunder_risk == 0.0
    assert sample.condition == "Patchy rain nearby"
    assert sample.icon is Icon.CLOUD_SHOWERS_HEAVY
    assert sample.spp is None
    assert bundle.current == bundle.forecast[T10]
    assert bundle.current.icon is Icon.CLOUD_SUN
    assert bundle.air_quality == AirQualitySample(pm2_5=3.2, pm10=5.4, o3=72.0, no2=4.1, so2=0.6, co=210.3)


def test_weatherapi_missing_values_stay_unknown(requests_mock, clock):
    requests_mock.get(
        WEATHERAPI_URL,
        json={"forecast": {"forecastday": [{"date": "2025-06-21", "hour": [{"time_epoch": T10, "temp_c": 4.0}]}]}},
    )

    bundle = WeatherAPIProvider(api_key="secret", clock=clock).fetch(LAT, LON).data
    sample = bundle.forecast[T10]

    assert sample.temperature == 4.0
    assert sample.gust is None
    assert sample.wind_speed is None
    assert sample.condition is None
    assert sample.thunder_risk is None
    assert sample.icon is Icon.CLOUD_SUN
    assert bundle.air_quality is None


def test_weatherapi_parses_time_without_epoch(requests_mock, clock):
    requests_mock.get(
        WEATHERAPI_URL,
        json={"forecast": {"forecastday": [{"date": "2025-06-21", "hour": [{"time": "2025-06-21 11:00", "temp_c": 4.0}]}]}},
    )

    bundle = WeatherAPIProvider(api_key="secret", clock=clock).fetch(LAT, LON).data

    assert list(bundle.forecast) == [T11]


@pytest.mark.parametrize(
    "text, risk, icon",
    [
        ("Thundery outbreaks in nearby", 100.0, Icon.CLOUD_BOLT),
        ("Moderate or heavy rain with thunder", 100.0, Icon.CLOUD_SHOWERS_HEAVY),
        ("Patchy light snow with thunder", 100.0, Icon.CLOUD_BOLT),
        ("Light drizzle", 0.0, Icon.CLOUD_DRIZZLE),
        ("Freezing fog", 0.0, Icon.SMOG),
        ("Overcast ", 0.0, Icon.CLOUD),
        ("Clear ", 0.0, Icon.MOON),
    ],
)
def test_weatherapi_condition_keywords(requests_mock, clock, text, risk, icon):
    requests_mock.get(
        WEATHERAPI_URL,
        json={"forecast": {"forecastday": [{"date": "2025-06-21", "hour": [weatherapi_hour(T22, text)]}]}},
    )

    sample = WeatherAPIProvider(api_key="secret", clock=clock).fetch(LAT, LON).data.forecast[T22]

    assert sample.thunder_risk == risk
    assert sample.icon is icon


def test_weatherapi_quota_is_a_failure(requests_mock, clock):
    requests_mock.get(WEATHERAPI_URL, status_code=429, text="quota exceeded")

    result = WeatherAPIProvider(api_key="secret", clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert result.reason == "quota exceeded"


def test_weatherapi_bad_key_is_a_failure(requests_mock, clock):
    requests_mock.get(WEATHERAPI_URL, status_code=401, json={"error": {"code": 2006, "message": "API key is invalid."}})

    result = WeatherAPIProvider(api_key="wrong", clock=clock).fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert result.reason == "HTTP 401"


# Space weather --------------------------------------------------------
def test_kp_index_takes_last_reading(requests_mock, kp_payload):
    requests_mock.get(KP_URL, json=kp_payload)

    result = KpIndexProvider().fetch(LAT, LON)

    assert result.ok
    assert result.data == 3.0


def test_kp_index_empty_feed(requests_mock):
    requests_mock.get(KP_URL, json=[])

    assert KpIndexProvider().fetch(LAT, LON).status is FetchStatus.EMPTY


def test_kp_index_malformed_entry(requests_mock):
    requests_mock.get(KP_URL, json=[{"time_tag": "2025-06-21T09:29:00"}])

    result = KpIndexProvider().fetch(LAT, LON)

    assert result.status is FetchStatus.FAILED
    assert result.reason.startswith("malformed response")


def test_aurora_tolerance():
    grid = [[18.5, 59.5, 12], [19.0, 61.5, 40]]

    assert find_probability(grid, 60.0, 19.0) == 12.0
    assert find_probability([[19.0, 61.5, 40]], 60.0, 19.0) is None


def test_aurora_first_match_wins(requests_mock, aurora_payload):
    requests_mock.get(AURORA_URL, json=aurora_payload)

    result = AuroraProvider().fetch(LAT, LON)

    assert result.data == 7.0


def test_aurora_matches_across_the_prime_meridian():
    grid = [[359, 51, 3]]

    assert find_probability(grid, 51.5, -0.12) == 3.0


def test_aurora_without_match_is_empty(requests_mock):
    requests_mock.get(AURORA_URL, json={"coordinates": [[100, 10, 0]]})

    assert AuroraProvider().fetch(LAT, LON).status is FetchStatus.EMPTY


# Place ----------------------------------------------------------------
@pytest.mark.parametrize(
    "address, expected",
    [
        ({"city": "Stockholm", "town": "Haninge", "country": "Sverige"}, "Stockholm, Sverige"),
        ({"town": "Haninge", "country": "Sverige"}, "Haninge, Sverige"),
        ({"village": "Dalarö", "country": "Sverige"}, "Sverige"),
        ({"road": "E4"}, None),
    ],
)
def test_format_place(address, expected):
    assert format_place(address) == expected


def test_place_resolver(requests_mock, nominatim_payload):
    requests_mock.get(NOMINATIM_URL, json=nominatim_payload)
    resolver = PlaceResolver()

    result = resolver.resolve(LAT, LON)

    assert result.data == "Haninge, Sverige"
    assert requests_mock.last_request.qs["lat"] == ["59.13"]
    assert requests_mock.last_request.headers["User-Agent"] == "skycast/0.1"


def test_place_resolver_without_address(requests_mock):
    requests_mock.get(NOMINATIM_URL, json={"error": "Unable to geocode"})

    result = PlaceResolver().resolve(0.0, -160.0)

    assert result.status is FetchStatus.EMPTY
    assert result.data is None
