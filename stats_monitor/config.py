"""Monitor settings: built-in defaults with environment overrides."""

import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_URL = "http://srv.msk01.gigacorp.local/_stats"


@dataclass(frozen=True)
class MonitorConfig:
    url: str = DEFAULT_URL
    poll_interval_sec: float = 60.0
    timeout_sec: float = 10.0
    error_threshold: int = 3
    delimiter: str = ","
    notify: bool = False

    @classmethod
    def from_env(cls) -> "MonitorConfig":
        """Defaults overlaid with any STATS_MONITOR_* variables that parse."""
        cfg = cls()
        overrides = {}

        url = os.getenv("STATS_MONITOR_URL", "").strip()
        if url:
            overrides["url"] = url

        poll = _env_float("STATS_MONITOR_POLL_SEC")
        if poll is not None and poll >= 0:
            overrides["poll_interval_sec"] = poll

        timeout = _env_float("STATS_MONITOR_TIMEOUT_SEC")
        if timeout is not None and timeout > 0:
            overrides["timeout_sec"] = timeout

        threshold = _env_int("STATS_MONITOR_ERROR_THRESHOLD")
        if threshold is not None and threshold > 0:
            overrides["error_threshold"] = threshold

        # Not stripped: a single space is a valid delimiter.
        delimiter = os.getenv("STATS_MONITOR_DELIMITER")
        if delimiter:
            overrides["delimiter"] = delimiter

        return replace(cfg, **overrides)


def _env_int(name: str) -> Optional[int]:
    v = os.getenv(name)
    if v is None or v == "":
        return None
    try:
        return int(v)
    except ValueError:
        return None


def _env_float(name: str) -> Optional[float]:
    v = os.getenv(name)
    if v is None or v == "":
        return None
    try:
        return float(v)
    except ValueError:
        return None
