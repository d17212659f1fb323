"""StatsMonitor: the long-running poll / decode / evaluate loop."""

import sys
import threading
from dataclasses import replace
from typing import Any, Callable, Optional

from .decoder import DEFAULT_DELIMITER, decode
from .evaluator import DEFAULT_THRESHOLDS, Thresholds, evaluate
from .types import FormatError, PollState, TransportError


class StatsMonitor:
    """
    Polls one remote host for its stats snapshot:
    - Waits a fixed interval between cycles
    - Fetches the payload through the injected transport
    - Decodes and evaluates it, forwarding alerts to the sink
    - Counts consecutive fetch failures and signals unavailability once
      per crossing of the error threshold

    The transport needs ``fetch(url, timeout) -> (status_code, body)``;
    the sink needs ``emit(record)`` and ``emit_unavailable()``.
    """

    def __init__(
        self,
        url: str,
        transport: Any,
        sink: Any,
        poll_interval_sec: float = 60.0,
        timeout_sec: float = 10.0,
        error_threshold: int = 3,
        delimiter: str = DEFAULT_DELIMITER,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        sleep: Optional[Callable[[float], Any]] = None,
    ):
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        if poll_interval_sec < 0:
            raise ValueError(f"poll_interval_sec must be >= 0, got {poll_interval_sec}")
        if timeout_sec <= 0:
            raise ValueError(f"timeout_sec must be > 0, got {timeout_sec}")
        if error_threshold < 1:
            raise ValueError(f"error_threshold must be >= 1, got {error_threshold}")

        self.url = url
        self.transport = transport
        self.sink = sink
        self.poll_interval = poll_interval_sec
        self.timeout = timeout_sec
        self.error_threshold = error_threshold
        self.delimiter = delimiter
        self.thresholds = thresholds

        self._stop_event = threading.Event()
        self._sleep = sleep or self._stop_event.wait
        self._state = PollState()

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    # ------------------------------------------------------------------ #
    #  One cycle
    # ------------------------------------------------------------------ #

    def _on_fetch_failure(self, state: PollState, error: Exception) -> PollState:
        failures = state.consecutive_failures + 1
        print(f"[monitor] Fetch error ({failures} in a row): {error}", file=sys.stderr)

        signalled = state.unavailable_signalled
        if failures >= self.error_threshold and not signalled:
            self.sink.emit_unavailable()
            signalled = True
        return replace(state, consecutive_failures=failures, unavailable_signalled=signalled)

    def run_cycle(self, state: PollState) -> PollState:
        """Fetch, decode and evaluate once. Returns the next PollState."""
        try:
            status, body = self.transport.fetch(self.url, self.timeout)
        except TransportError as e:
            return self._on_fetch_failure(state, e)

        if not 200 <= status < 300:
            return self._on_fetch_failure(state, TransportError(f"HTTP status: {status}", status_code=status))

        state = PollState()

        try:
            readings = decode(body, self.delimiter)
        except FormatError as e:
            print(f"[monitor] Invalid data format: {e}", file=sys.stderr)
            return state

        for record in evaluate(readings, self.thresholds):
            self.sink.emit(record)
        return state

    # ------------------------------------------------------------------ #
    #  Main loop
    # ------------------------------------------------------------------ #

    def run(self, max_cycles: Optional[int] = None) -> PollState:
        print(f"[monitor] Polling {self.url}", file=sys.stderr)
        print(f"[monitor] Poll interval: {self.poll_interval:.1f} s, timeout: {self.timeout:.1f} s",
              file=sys.stderr)
        print(f"[monitor] Unavailable after {self.error_threshold} consecutive failures", file=sys.stderr)

        cycles = 0
        try:
            while self.running:
                if max_cycles is not None and cycles >= max_cycles:
                    break

                self._sleep(self.poll_interval)
                if not self.running:
                    break

                try:
                    self._state = self.run_cycle(self._state)
                except Exception as e:
                    print(f"[monitor] Cycle error: {e}", file=sys.stderr)
                cycles += 1
        finally:
            self.stop()
        return self._state

    def stop(self) -> None:
        if not self._stop_event.is_set():
            self._stop_event.set()
            print("[monitor] Stopped", file=sys.stderr)
        close = getattr(self.transport, "close", None)
        if close is not None:
            try:
                close()
            except Exception as e:
                print(f"[monitor] Transport close failed: {e}", file=sys.stderr)
