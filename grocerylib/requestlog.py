"""Append-only plain-text request log."""
from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _timestamp(now: _dt.datetime | None = None) -> str:
    now = now or _dt.datetime.now(_dt.timezone.utc)
    return now.astimezone(_dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RequestLog:
    """Writes one ``<timestamp> <METHOD> <target>`` line per request.

    Write failures are logged and dropped so they never fail the request that
    triggered them.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def format_entry(self, method: str, target: str, now: _dt.datetime | None = None) -> str:
        return f"{_timestamp(now)} {method.upper()} {target}\n"

    def append(self, method: str, target: str) -> None:
        entry = self.format_entry(method, target)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(entry)
        except OSError as exc:
            logger.warning("Could not write request log %s: %s", self.path, exc)
