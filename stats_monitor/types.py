"""Core data types shared across the package."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class MetricKind(Enum):
    DIRECT = "direct"
    PERCENTAGE = "percentage"
    FREE_CAPACITY = "free_capacity"


@dataclass(frozen=True)
class ResourceMetric:
    name: str
    capacity: Optional[float]
    used: float
    kind: MetricKind


@dataclass(frozen=True)
class Readings:
    """
    Decoded form of one snapshot, grouped as four resource metrics.

    Iterating yields the metrics in evaluation order: load, memory, disk, network.
    """

    load: ResourceMetric
    memory: ResourceMetric
    disk: ResourceMetric
    network: ResourceMetric

    @classmethod
    def from_values(
        cls,
        load_average: float,
        memory_total: float,
        memory_used: float,
        disk_total: float,
        disk_used: float,
        network_total: float,
        network_used: float,
    ) -> "Readings":
        return cls(
            load=ResourceMetric("load", None, load_average, MetricKind.DIRECT),
            memory=ResourceMetric("memory", memory_total, memory_used, MetricKind.PERCENTAGE),
            disk=ResourceMetric("disk", disk_total, disk_used, MetricKind.FREE_CAPACITY),
            network=ResourceMetric("network", network_total, network_used, MetricKind.FREE_CAPACITY),
        )

    @property
    def load_average(self) -> float:
        return self.load.used

    @property
    def memory_total(self) -> float:
        return self.memory.capacity

    @property
    def memory_used(self) -> float:
        return self.memory.used

    @property
    def disk_total(self) -> float:
        return self.disk.capacity

    @property
    def disk_used(self) -> float:
        return self.disk.used

    @property
    def network_total(self) -> float:
        return self.network.capacity

    @property
    def network_used(self) -> float:
        return self.network.used

    def __iter__(self) -> Iterator[ResourceMetric]:
        return iter((self.load, self.memory, self.disk, self.network))

    def values(self) -> tuple:
        """The 7 raw fields in wire order."""
        return (
            self.load_average,
            self.memory_total,
            self.memory_used,
            self.disk_total,
            self.disk_used,
            self.network_total,
            self.network_used,
        )


@dataclass(frozen=True)
class AlertRecord:
    metric_name: str
    message: str
    observed_value: float


@dataclass(frozen=True)
class PollState:
    consecutive_failures: int = 0
    # Set once the unavailable signal has fired; cleared by the next successful fetch.
    unavailable_signalled: bool = False


class TransportError(Exception):
    """Network, DNS, timeout or non-2xx failure while fetching a snapshot."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FormatError(ValueError):
    """A payload that does not match the 7-field wire format."""

    def __init__(self, reason: str, token: Optional[str] = None):
        self.reason = reason
        self.token = token
        detail = f"{reason}: {token!r}" if token is not None else reason
        super().__init__(detail)
