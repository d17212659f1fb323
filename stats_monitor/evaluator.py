"""Threshold evaluation: turns Readings into alert records."""

from dataclasses import dataclass
from typing import List, Optional

from .types import AlertRecord, MetricKind, Readings, ResourceMetric

MEGA = 1024 * 1024


@dataclass(frozen=True)
class Thresholds:
    load_average: float = 30.0
    memory_ratio: float = 0.8
    disk_ratio: float = 0.9
    network_ratio: float = 0.9


DEFAULT_THRESHOLDS = Thresholds()

_TEMPLATES = {
    "load": "Load Average is too high: {value:.0f}",
    "memory": "Memory usage too high: {value:.0f}%",
    "disk": "Free disk space is too low: {value:.0f} Mb left",
    "network": "Network bandwidth usage high: {value:.0f} Mbit/s available",
}


def _limit_for(metric: ResourceMetric, thresholds: Thresholds) -> float:
    return {
        "load": thresholds.load_average,
        "memory": thresholds.memory_ratio,
        "disk": thresholds.disk_ratio,
        "network": thresholds.network_ratio,
    }[metric.name]


def _check(metric: ResourceMetric, limit: float) -> Optional[float]:
    """Return the figure to report if the metric violates its limit, else None."""
    if metric.kind is MetricKind.DIRECT:
        return metric.used if metric.used > limit else None

    # A zero-capacity resource is never overused.
    if not metric.capacity:
        return None
    ratio = metric.used / metric.capacity
    if ratio <= limit:
        return None

    if metric.kind is MetricKind.PERCENTAGE:
        return ratio * 100
    # used can exceed capacity in a torn snapshot
    return max(metric.capacity - metric.used, 0.0) / MEGA


def evaluate(readings: Readings, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> List[AlertRecord]:
    """
    Evaluate every metric against its threshold.

    Alerts come back in fixed order (load, memory, disk, network); the list is
    empty when nothing is in violation.
    """
    alerts: List[AlertRecord] = []
    for metric in readings:
        value = _check(metric, _limit_for(metric, thresholds))
        if value is None:
            continue
        alerts.append(AlertRecord(
            metric_name=metric.name,
            message=_TEMPLATES[metric.name].format(value=value),
            observed_value=value,
        ))
    return alerts
