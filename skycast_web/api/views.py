"""REST API views for aggregated weather records."""
from __future__ import annotations

from functools import lru_cache

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from skycast.coordinates import Coordinates
from skycast.services.weather import WeatherAggregator, build_aggregator


@lru_cache(maxsize=1)
def get_aggregator() -> WeatherAggregator:
    return build_aggregator(
        weatherapi_key=settings.WEATHERAPI_KEY,
        cache_dir=settings.WEATHER_CACHE_DIR,
        cache_ttl=settings.WEATHER_CACHE_TTL,
        timeout=settings.WEATHER_HTTP_TIMEOUT,
        fetch_timeout=settings.WEATHER_FETCH_TIMEOUT,
        user_agent=settings.WEATHER_USER_AGENT,
    )


class WeatherView(APIView):
    """Provide the merged weather record for requested coordinates."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the aggregate record for the specified coordinates."""
        try:
            coords = Coordinates.parse(request.query_params["lat"], request.query_params["lon"])
        except KeyError:
            return Response({"detail": "lat and lon query parameters are required"}, status=status.HTTP_400_BAD_REQUEST)
        except ValueError:
            return Response({"detail": "lat and lon must be valid coordinates"}, status=status.HTTP_400_BAD_REQUEST)

        record = get_aggregator().get_weather(coords.latitude, coords.longitude)
        return Response(record.to_dict(), status=status.HTTP_200_OK)
