import threading
from typing import List, Tuple, Union

import pytest

from stats_monitor.monitor import StatsMonitor
from stats_monitor.types import AlertRecord, PollState, TransportError

HEALTHY = b"10,1000,100,1000,100,1000,100"
OVERLOADED = b"35,1000,900,1000,950,1000,950"


class FakeTransport:
    """Replays a scripted sequence of (status, body) responses or TransportErrors."""

    def __init__(self, script: List[Union[Tuple[int, bytes], Exception]]):
        self.script = list(script)
        self.calls: List[Tuple[str, float]] = []
        self.closed = False

    def fetch(self, url: str, timeout: float) -> Tuple[int, bytes]:
        self.calls.append((url, timeout))
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class RecordingSink:
    def __init__(self):
        self.events: List[object] = []

    def emit(self, record: AlertRecord) -> None:
        self.events.append(record)

    def emit_unavailable(self) -> None:
        self.events.append("unavailable")


def _monitor(script, **kwargs) -> Tuple[StatsMonitor, FakeTransport, RecordingSink]:
    transport = FakeTransport(script)
    sink = RecordingSink()
    kwargs.setdefault("sleep", lambda _: None)
    monitor = StatsMonitor("http://stats.test/_stats", transport, sink, **kwargs)
    return monitor, transport, sink


def _down() -> TransportError:
    return TransportError("connection refused")


def test_successful_cycle_emits_alerts_in_order() -> None:
    monitor, transport, sink = _monitor([(200, OVERLOADED)], timeout_sec=2.5)

    state = monitor.run_cycle(PollState())

    assert state == PollState()
    assert transport.calls == [("http://stats.test/_stats", 2.5)]
    assert [r.metric_name for r in sink.events] == ["load", "memory", "disk", "network"]


def test_healthy_cycle_emits_nothing() -> None:
    monitor, _, sink = _monitor([(200, HEALTHY)])
    monitor.run_cycle(PollState())
    assert sink.events == []


def test_transport_failure_increments_counter() -> None:
    monitor, _, sink = _monitor([_down()])
    state = monitor.run_cycle(PollState())
    assert state.consecutive_failures == 1
    assert sink.events == []


def test_non_2xx_status_counts_as_failure() -> None:
    monitor, _, sink = _monitor([(503, b"busy"), (404, OVERLOADED)])
    state = monitor.run_cycle(PollState())
    state = monitor.run_cycle(state)
    assert state.consecutive_failures == 2
    assert sink.events == []


def test_unavailable_signalled_once_per_crossing() -> None:
    script = [_down()] * 5 + [(200, HEALTHY)] + [_down()] * 3
    monitor, _, sink = _monitor(script, error_threshold=3)

    state = PollState()
    for _ in range(5):
        state = monitor.run_cycle(state)
    assert state.consecutive_failures == 5
    assert sink.events == ["unavailable"]

    state = monitor.run_cycle(state)
    assert state == PollState(consecutive_failures=0, unavailable_signalled=False)

    for _ in range(2):
        state = monitor.run_cycle(state)
    assert sink.events == ["unavailable"]

    state = monitor.run_cycle(state)
    assert state.consecutive_failures == 3
    assert sink.events == ["unavailable", "unavailable"]


def test_decode_failure_does_not_count_as_fetch_failure(capsys) -> None:
    monitor, _, sink = _monitor([_down(), _down(), (200, b"1,2,3")])

    state = monitor.run_cycle(PollState())
    state = monitor.run_cycle(state)
    state = monitor.run_cycle(state)

    assert state.consecutive_failures == 0
    assert sink.events == []
    assert "field-count" in capsys.readouterr().err


def test_run_threads_state_across_cycles() -> None:
    sleeps: List[float] = []
    monitor, transport, sink = _monitor(
        [_down(), _down(), _down(), (200, OVERLOADED)],
        poll_interval_sec=60.0,
        sleep=sleeps.append,
    )

    final = monitor.run(max_cycles=4)

    assert sleeps == [60.0] * 4
    assert len(transport.calls) == 4
    assert sink.events[0] == "unavailable"
    assert len(sink.events) == 5
    assert final == PollState()
    assert monitor.state == final
    assert transport.closed
    assert not monitor.running


def test_run_survives_unexpected_sink_errors(capsys) -> None:
    class BrokenSink(RecordingSink):
        def emit(self, record: AlertRecord) -> None:
            raise RuntimeError("sink exploded")

    transport = FakeTransport([(200, OVERLOADED), (200, HEALTHY)])
    monitor = StatsMonitor("http://stats.test/_stats", transport, BrokenSink(), sleep=lambda _: None)

    monitor.run(max_cycles=2)

    assert len(transport.calls) == 2
    assert "sink exploded" in capsys.readouterr().err


def test_stop_preempts_wait() -> None:
    monitor, transport, _ = _monitor([], poll_interval_sec=3600.0, sleep=None)

    worker = threading.Thread(target=monitor.run)
    worker.start()
    monitor.stop()
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert transport.calls == []


@pytest.mark.parametrize("status", [200, 204, 299])
def test_any_2xx_is_success(status: int) -> None:
    monitor, _, _ = _monitor([_down(), (status, HEALTHY)])
    state = monitor.run_cycle(PollState())
    state = monitor.run_cycle(state)
    assert state.consecutive_failures == 0


@pytest.mark.parametrize("kwargs", [
    {"delimiter": ""},
    {"poll_interval_sec": -1.0},
    {"timeout_sec": 0.0},
    {"error_threshold": 0},
])
def test_invalid_settings_rejected_at_construction(kwargs) -> None:
    with pytest.raises(ValueError):
        StatsMonitor("http://stats.test/_stats", FakeTransport([]), RecordingSink(), **kwargs)


def test_space_delimited_monitor_resets_counter_on_success() -> None:
    monitor, _, sink = _monitor([_down(), (200, b"35 1000 100 1000 100 1000 100")], delimiter=" ")

    state = monitor.run_cycle(PollState())
    state = monitor.run_cycle(state)

    assert state == PollState()
    assert [r.metric_name for r in sink.events] == ["load"]
