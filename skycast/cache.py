from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Optional, Union

from .coordinates import Coordinates, Number
from .entities import AggregateRecord


logger = logging.getLogger(__name__)


def cache_key(latitude: Number, longitude: Number) -> str:
    coords = Coordinates.parse(latitude, longitude)
    return f"weatherCache-{coords.lat_text}-{coords.lon_text}.json"


class FileWeatherCache:
    """One JSON file per rounded coordinate pair; file mtime decides freshness.

    The cache is best effort: a missing directory disables it, and unreadable
    or unwritable files are logged and otherwise ignored.
    """

    DEFAULT_TTL = 60 * 60

    def __init__(
        self,
        directory: Union[str, Path],
        ttl: float = DEFAULT_TTL,
        time_func=time.time,
    ) -> None:
        self.directory = Path(directory)
        self.ttl = ttl
        self._time_func = time_func

    def path_for(self, latitude: Number, longitude: Number) -> Path:
        return self.directory / cache_key(latitude, longitude)

    def get(self, latitude: Number, longitude: Number) -> Optional[AggregateRecord]:
        if not os.path.isdir(self.directory):
            return None
        path = self.path_for(latitude, longitude)
        try:
            modified = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot stat cache entry %s: %s", path.name, exc)
            return None
        if self._time_func() - modified > self.ttl:
            logger.debug("Cache entry %s expired, removing", path.name)
            self._remove(path)
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return AggregateRecord.from_dict(payload)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path.name, exc)
            return None

    def put(self, latitude: Number, longitude: Number, record: AggregateRecord) -> bool:
        if not os.path.isdir(self.directory):
            logger.debug("Cache directory %s does not exist, not caching", self.directory)
            return False
        path = self.path_for(latitude, longitude)
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_text(json.dumps(record.to_dict()), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.warning("Could not write cache entry %s: %s", path.name, exc)
            self._remove(tmp_path)
            return False
        return True

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove cache entry %s: %s", path.name, exc)


__all__ = ["FileWeatherCache", "cache_key"]
