"""CLI entry point: ``python -m stats_monitor``."""

import argparse
import signal
import sys
from urllib.parse import urlparse

from .config import MonitorConfig
from .monitor import StatsMonitor
from .notify import ConsoleSink, NotifySink
from .system_metrics import local_payload
from .transport import HttpTransport


def _non_empty(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def _non_negative_float(value: str) -> float:
    v = float(value)
    if v < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return v


def _positive_float(value: str) -> float:
    v = float(value)
    if v <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return v


def _positive_int(value: str) -> int:
    v = int(value)
    if v < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return v


def build_parser(cfg: MonitorConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resource-health monitor for a single remote host",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--url", type=str, default=cfg.url,
                        help="Stats endpoint returning 7 comma-separated numbers")
    parser.add_argument("--poll-sec", type=_non_negative_float, default=cfg.poll_interval_sec,
                        help="Seconds to wait before each poll")
    parser.add_argument("--timeout-sec", type=_positive_float, default=cfg.timeout_sec,
                        help="Per-request timeout in seconds")
    parser.add_argument("--error-threshold", type=_positive_int, default=cfg.error_threshold,
                        help="Consecutive fetch failures before reporting the stats as unavailable")
    parser.add_argument("--delimiter", type=_non_empty, default=cfg.delimiter,
                        help="Field delimiter of the payload")
    parser.add_argument("--notify", action=argparse.BooleanOptionalAction, default=cfg.notify,
                        help="Forward alerts to Telegram/Pushover when their env vars are set")
    parser.add_argument("--once", action="store_true",
                        help="Run a single poll immediately and exit")
    parser.add_argument("--print-local", action="store_true",
                        help="Print this host's snapshot in the wire format and exit")
    return parser


def main() -> int:
    args = build_parser(MonitorConfig.from_env()).parse_args()

    if args.print_local:
        print(local_payload(delimiter=args.delimiter))
        return 0

    if args.notify:
        sink = NotifySink(source=urlparse(args.url).hostname or args.url)
    else:
        sink = ConsoleSink()
    monitor = StatsMonitor(
        url=args.url,
        transport=HttpTransport(),
        sink=sink,
        poll_interval_sec=args.poll_sec,
        timeout_sec=args.timeout_sec,
        error_threshold=args.error_threshold,
        delimiter=args.delimiter,
    )

    if args.once:
        try:
            state = monitor.run_cycle(monitor.state)
        finally:
            monitor.stop()
        return 1 if state.consecutive_failures else 0

    def signal_handler(sig, frame):
        print("\n[monitor] Shutting down...", file=sys.stderr)
        monitor.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        monitor.run()
    except KeyboardInterrupt:
        monitor.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
