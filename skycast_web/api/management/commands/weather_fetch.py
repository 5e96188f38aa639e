"""Management command to fetch the merged weather record for one location."""
from __future__ import annotations

import json
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from skycast.coordinates import Coordinates
from skycast.entities import describe_fields
from skycast.services.weather import build_aggregator


class Command(BaseCommand):
    help = "Fetch weather, air quality, Kp index and aurora probability for the provided coordinates"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=str, help="Latitude, decimal point or comma")
        parser.add_argument("--lon", type=str, help="Longitude, decimal point or comma")
        parser.add_argument("--api-key", type=str, default=None, help="WeatherAPI.com key (defaults to WEATHERAPI_KEY)")
        parser.add_argument("--cache-dir", type=str, default=None, help="Directory for cached records")
        parser.add_argument("--indent", type=int, default=None, help="Indent the JSON output")
        parser.add_argument("--fields", action="store_true", help="List the record fields and their units")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        if options.get("fields"):
            for section, key, unit, description in describe_fields():
                unit_text = f" [{unit}]" if unit else ""
                self.stdout.write(f"{section}.{key}{unit_text}: {description}")
            return

        latitude = options.get("lat")
        longitude = options.get("lon")
        if latitude is None or longitude is None:
            raise CommandError("--lat and --lon are required")
        try:
            coords = Coordinates.parse(latitude, longitude)
        except ValueError as exc:
            raise CommandError(f"Invalid coordinates: {exc}") from exc

        api_key = options.get("api_key")
        aggregator = build_aggregator(
            weatherapi_key=api_key if api_key is not None else settings.WEATHERAPI_KEY,
            cache_dir=options.get("cache_dir") or settings.WEATHER_CACHE_DIR,
            cache_ttl=settings.WEATHER_CACHE_TTL,
            timeout=settings.WEATHER_HTTP_TIMEOUT,
            fetch_timeout=settings.WEATHER_FETCH_TIMEOUT,
            user_agent=settings.WEATHER_USER_AGENT,
        )
        record = aggregator.get_weather(coords.latitude, coords.longitude)
        self.stdout.write(json.dumps(record.to_dict(), indent=options.get("indent"), ensure_ascii=False))
