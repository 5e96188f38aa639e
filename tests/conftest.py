from __future__ import annotations

from typing import Any, Dict, List

import pytest

from tests.feeds import (
    AURORA_URL,
    KP_URL,
    NOMINATIM_URL,
    SMHI_URL,
    T09,
    T10,
    T12,
    WEATHERAPI_URL,
    TimeController,
    smhi_entry,
    weatherapi_hour,
)


@pytest.fixture
def clock() -> TimeController:
    return TimeController()


@pytest.fixture
def smhi_payload() -> Dict[str, Any]:
    return {
        "approvedTime": "2025-06-21T08:05:00Z",
        "referenceTime": "2025-06-21T08:00:00Z",
        "geometry": {"type": "Point", "coordinates": [[18.1, 59.13]]},
        "timeSeries": [
            smhi_entry("2025-06-21T09:00:00Z", t=15.0, Wsymb2=1),
            smhi_entry(
                "2025-06-21T10:00:00Z",
                t=18.44, r=62, vis=42.04, ws=3.44, gust=7.12, wd=215, msl=1013.26,
                spp=-9, tcc_mean=4, tstm=1, pmean=0.0, Wsymb2=2,
            ),
            smhi_entry(
                "2025-06-21T11:00:00Z",
                t=19.1, r=58, vis=45.0, ws=4.0, gust=8.0, wd=220, msl=1013.0,
                spp=-9, tcc_mean=0, tstm=0, pmean=0.0, Wsymb2=1,
            ),
            smhi_entry(
                "2025-06-21T22:00:00Z",
                t=12.5, r=88, vis=20.0, ws=1.5, gust=3.2, wd=180, msl=1012.4,
                spp=0, tcc_mean=8, tstm=12, pmean=0.3, Wsymb2=1,
            ),
        ],
    }


@pytest.fixture
def weatherapi_payload() -> Dict[str, Any]:
    return {
        "location": {"name": "Haninge", "country": "Sweden", "lat": 59.13, "lon": 18.1},
        "current": {
            "last_updated_epoch": T09,
            "temp_c": 17.0,
            "air_quality": {
                "co": 210.3,
                "no2": 4.1,
                "o3": 72.0,
                "so2": 0.6,
                "pm2_5": 3.2,
                "pm10": 5.4,
                "us-epa-index": 1,
            },
        },
        "forecast": {
            "forecastday": [
                {
                    "date": "2025-06-21",
                    "hour": [
                        weatherapi_hour(T09, "Sunny", time="2025-06-21 11:00", temp_c=17.0),
                        weatherapi_hour(
                            T10, "Partly Cloudy ", time="2025-06-21 12:00",
                            temp_c=20.3, humidity=55, vis_km=10.0, gust_kph=18.0, wind_kph=10.8,
                            wind_degree=200, pressure_mb=1014.0, cloud=25, precip_mm=0.0, uv=6.0,
                            feelslike_c=20.3, dewpoint_c=10.9, heatindex_c=20.3, windchill_c=20.3,
                        ),
                        weatherapi_hour(
                            T12, "Patchy rain nearby", time="2025-06-21 14:00",
                            temp_c=21.0, humidity=50, vis_km=10.0, gust_kph=25.2, wind_kph=14.4,
                            wind_degree=190, pressure_mb=1013.0, cloud=75, precip_mm=0.4, uv=5.0,
                            feelslike_c=21.0, dewpoint_c=10.2, heatindex_c=21.5, windchill_c=21.0,
                        ),
                    ],
                }
            ]
        },
    }


@pytest.fixture
def kp_payload() -> List[Dict[str, Any]]:
    return [
        {"time_tag": "2025-06-21T09:28:00", "kp_index": 2, "estimated_kp": 2.0, "kp": "2M"},
        {"time_tag": "2025-06-21T09:29:00", "kp_index": 3, "estimated_kp": 3.33, "kp": "3P"},
    ]


@pytest.fixture
def aurora_payload() -> Dict[str, Any]:
    return {
        "Observation Time": "2025-06-21T09:05:00Z",
        "Forecast Time": "2025-06-21T09:50:00Z",
        "Data Format": "[Longitude, Latitude, Aurora]",
        "coordinates": [[17, 57, 1], [18, 59, 7], [19, 60, 9]],
    }


@pytest.fixture
def nominatim_payload() -> Dict[str, Any]:
    return {
        "place_id": 1,
        "display_name": "Haninge, Stockholms län, Sverige",
        "address": {"town": "Haninge", "county": "Stockholms län", "country": "Sverige", "country_code": "se"},
    }


@pytest.fixture
def all_feeds(requests_mock, smhi_payload, weatherapi_payload, kp_payload, aurora_payload, nominatim_payload):
    requests_mock.get(SMHI_URL, json=smhi_payload)
    requests_mock.get(WEATHERAPI_URL, json=weatherapi_payload)
    requests_mock.get(KP_URL, json=kp_payload)
    requests_mock.get(AURORA_URL, json=aurora_payload)
    requests_mock.get(NOMINATIM_URL, json=nominatim_payload)
    return requests_mock
