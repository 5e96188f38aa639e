from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import requests
from requests import Response

from ..entities import FetchResult

Clock = Callable[[], float]


class ProviderError(RuntimeError):
    """Base provider error."""


class QuotaExceeded(ProviderError):
    """Raised when a provider reports a quota/usage limit issue."""


@dataclass
class RequestConfig:
    timeout: float = 10.0
    user_agent: str = "skycast/0.1"


class WeatherProvider:
    """Base class for the upstream feeds.

    Subclasses implement ``_fetch`` and may raise :class:`ProviderError` (or
    trip over a malformed payload); :meth:`fetch` turns every such failure
    into a :class:`FetchResult` so callers never see the exception.
    """

    name = "provider"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
        clock: Clock = time.time,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self.clock = clock
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch(self, latitude: float, longitude: float) -> FetchResult:
        try:
            data = self._fetch(latitude, longitude)
        except ProviderError as exc:
            self._log.warning("Provider %s failed: %s", self.name, exc)
            return FetchResult.failure(self.name, str(exc))
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            self._log.warning("Provider %s returned a malformed payload: %r", self.name, exc)
            return FetchResult.failure(self.name, f"malformed response: {exc!r}")
        result = FetchResult.success(self.name, data)
        self._log.debug("Provider %s: %s", self.name, result.status.value)
        return result

    def _fetch(self, latitude: float, longitude: float) -> Any:
        raise NotImplementedError

    # Helpers ------------------------------------------------------------
    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = config.user_agent
        return session

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded("quota exceeded")
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise ProviderError(f"HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise ProviderError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise ProviderError("request failed") from exc
        return self._handle_response(response)

    def _get_json(self, url: str, **kwargs) -> Any:
        response = self._request("GET", url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ProviderError("invalid json") from exc

    def _current_hour(self) -> int:
        """Start of the current hour; forecasts at or before it are stale."""
        return int(math.floor(self.clock() / 3600) * 3600)


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def safe_float(value: Optional[object], digits: Optional[int] = None) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    if digits is not None:
        number = round(number, digits)
    return number


__all__ = [
    "Clock",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "WeatherProvider",
    "format_timestamp",
    "safe_float",
]
