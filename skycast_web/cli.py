"""Console entry point: ``skycast --lat 59.13 --lon 18.10``."""
from __future__ import annotations

import os
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "skycast_web.settings")
    from django.core.management import execute_from_command_line

    args = sys.argv[1:] if argv is None else argv
    execute_from_command_line(["skycast", "weather_fetch", *args])


if __name__ == "__main__":
    main()
