from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..cache import FileWeatherCache
from ..coordinates import Coordinates, Number
from ..entities import AggregateRecord, FetchResult, Location
from ..merge import merge_bundles
from ..providers.base import RequestConfig, WeatherProvider
from ..providers.noaa import AuroraProvider, KpIndexProvider
from ..providers.nominatim import PlaceResolver
from ..providers.smhi import SMHIProvider
from ..providers.weatherapi import WeatherAPIProvider

Fetch = Callable[[float, float], FetchResult]


class WeatherAggregator:
    """Fetch every feed for a location and merge them into one record.

    Weather sources merge in a fixed order, SMHI first, so its values win
    over WeatherAPI's. A failing feed only leaves its fields unknown;
    :meth:`get_weather` does not raise for upstream problems.
    """

    DEFAULT_FETCH_TIMEOUT = 30.0

    def __init__(
        self,
        *,
        smhi: WeatherProvider,
        weatherapi: WeatherProvider,
        place_resolver: PlaceResolver,
        kp_provider: WeatherProvider,
        aurora_provider: WeatherProvider,
        cache: Optional[FileWeatherCache] = None,
        clock: Callable[[], float] = time.time,
        max_workers: int = 5,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.smhi = smhi
        self.weatherapi = weatherapi
        self.place_resolver = place_resolver
        self.kp_provider = kp_provider
        self.aurora_provider = aurora_provider
        self.cache = cache
        self.clock = clock
        self.max_workers = max_workers
        self.fetch_timeout = fetch_timeout
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def get_weather(self, latitude: Number, longitude: Number) -> AggregateRecord:
        coords = Coordinates.parse(latitude, longitude)
        if self.cache is not None:
            cached = self.cache.get(coords.latitude, coords.longitude)
            if cached is not None:
                self._log.debug("Cache hit for %s,%s", coords.lat_text, coords.lon_text)
                return cached

        results = self._fetch_all(coords)
        record = merge_bundles(
            [_data(results["smhi"]), _data(results["weatherapi"])],
            location=Location(
                latitude=coords.lat_text,
                longitude=coords.lon_text,
                place=_data(results["place"]),
                generated_at=self._generated_at(),
            ),
            kp_index=_data(results["kp"]),
            aurora_probability=_data(results["aurora"]),
        )
        if not results["smhi"].ok and not results["weatherapi"].ok:
            self._log.warning(
                "No weather source returned data for %s,%s (smhi: %s, weatherapi: %s)",
                coords.lat_text,
                coords.lon_text,
                results["smhi"].reason,
                results["weatherapi"].reason,
            )
        if self.cache is not None:
            self.cache.put(coords.latitude, coords.longitude, record)
        return record

    # Helpers ------------------------------------------------------------
    def _sources(self) -> Dict[str, Fetch]:
        return {
            "smhi": self.smhi.fetch,
            "weatherapi": self.weatherapi.fetch,
            "place": self.place_resolver.resolve,
            "kp": self.kp_provider.fetch,
            "aurora": self.aurora_provider.fetch,
        }

    def _fetch_all(self, coords: Coordinates) -> Dict[str, FetchResult]:
        sources = self._sources()
        if self.max_workers <= 1:
            return {
                name: self._call(name, fetch, coords)
                for name, fetch in sources.items()
            }

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="skycast-fetch")
        try:
            futures: Dict[str, Future] = {
                name: executor.submit(self._call, name, fetch, coords)
                for name, fetch in sources.items()
            }
            done, _ = wait(futures.values(), timeout=self.fetch_timeout)
            results: Dict[str, FetchResult] = {}
            for name, future in futures.items():
                if future in done:
                    results[name] = future.result()
                else:
                    future.cancel()
                    self._log.warning("Fetch from %s timed out after %ss", name, self.fetch_timeout)
                    results[name] = FetchResult.failure(name, "timed out")
            return results
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _call(self, name: str, fetch: Fetch, coords: Coordinates) -> FetchResult:
        try:
            return fetch(coords.latitude, coords.longitude)
        except Exception as exc:  # noqa: BLE001
            self._log.error("Provider %s raised unexpectedly", name, exc_info=exc)
            return FetchResult.failure(name, f"unexpected error: {exc!r}")

    def _generated_at(self) -> str:
        now = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        return now.strftime("%Y-%m-%d %H:%M:%S UTC")


def _data(result: FetchResult):
    return result.data if result.ok else None


def build_aggregator(
    *,
    weatherapi_key: Optional[str] = None,
    cache_dir: Optional[Union[str, Path]] = None,
    cache_ttl: float = FileWeatherCache.DEFAULT_TTL,
    timeout: float = 10.0,
    fetch_timeout: float = WeatherAggregator.DEFAULT_FETCH_TIMEOUT,
    user_agent: str = "skycast/0.1",
    clock: Callable[[], float] = time.time,
) -> WeatherAggregator:
    """Wire the default providers with one shared request configuration."""
    config = RequestConfig(timeout=timeout, user_agent=user_agent)
    return WeatherAggregator(
        smhi=SMHIProvider(request_config=config, clock=clock),
        weatherapi=WeatherAPIProvider(api_key=weatherapi_key, request_config=config, clock=clock),
        place_resolver=PlaceResolver(request_config=config, clock=clock),
        kp_provider=KpIndexProvider(request_config=config, clock=clock),
        aurora_provider=AuroraProvider(request_config=config, clock=clock),
        cache=FileWeatherCache(cache_dir, ttl=cache_ttl, time_func=clock) if cache_dir else None,
        clock=clock,
        fetch_timeout=fetch_timeout,
    )


__all__ = ["WeatherAggregator", "build_aggregator"]
