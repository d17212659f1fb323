"""Local host snapshot via psutil, rendered in the same wire format the monitor reads."""

import time

import psutil

from .decoder import DEFAULT_DELIMITER, encode
from .types import Readings


def _network_capacity() -> float:
    # Link speeds are reported in Mbit/s; 0 means unknown.
    total_mbit = sum(
        s.speed for name, s in psutil.net_if_stats().items()
        if s.isup and s.speed > 0
    )
    return total_mbit * 1_000_000 / 8


def _network_usage(interval_sec: float) -> float:
    before = psutil.net_io_counters()
    time.sleep(interval_sec)
    after = psutil.net_io_counters()
    transferred = (after.bytes_sent - before.bytes_sent) + (after.bytes_recv - before.bytes_recv)
    return max(transferred, 0) / interval_sec if interval_sec > 0 else 0.0


def collect_local_readings(interval_sec: float = 1.0, disk_path: str = "/") -> Readings:
    load_1m, _, _ = psutil.getloadavg()
    mem = psutil.virtual_memory()
    disk = psutil.disk_usage(disk_path)

    return Readings.from_values(
        load_average=load_1m,
        memory_total=float(mem.total),
        memory_used=float(mem.used),
        disk_total=float(disk.total),
        disk_used=float(disk.used),
        network_total=_network_capacity(),
        network_used=_network_usage(interval_sec),
    )


def local_payload(interval_sec: float = 1.0, delimiter: str = DEFAULT_DELIMITER) -> str:
    return encode(collect_local_readings(interval_sec), delimiter)
