"""
Stats Monitor
=============

Polls a single remote host for a compact stats snapshot (load average,
memory, disk and network usage), checks each figure against a fixed
threshold and prints an alert line for every one in violation.

The payload is 7 comma-separated numbers::

    load_average,memory_total,memory_used,disk_total,disk_used,network_total,network_used

Quick start::

    from stats_monitor import ConsoleSink, HttpTransport, StatsMonitor

    monitor = StatsMonitor(
        url="http://srv.msk01.gigacorp.local/_stats",
        transport=HttpTransport(),
        sink=ConsoleSink(),
    )
    monitor.run()

Or standalone::

    python -m stats_monitor --url http://host/_stats --poll-sec 60
"""

from .decoder import decode, encode
from .evaluator import Thresholds, evaluate
from .monitor import StatsMonitor
from .notify import ConsoleSink, NotifySink
from .transport import HttpTransport
from .types import (
    AlertRecord,
    FormatError,
    MetricKind,
    PollState,
    Readings,
    ResourceMetric,
    TransportError,
)

__all__ = [
    "StatsMonitor",
    "decode",
    "encode",
    "evaluate",
    "Thresholds",
    "HttpTransport",
    "ConsoleSink",
    "NotifySink",
    "AlertRecord",
    "FormatError",
    "MetricKind",
    "PollState",
    "Readings",
    "ResourceMetric",
    "TransportError",
]
