"""Alert sinks: console rendering plus optional Telegram/Pushover forwarding."""

import os
import sys
from typing import Dict

import requests

from .types import AlertRecord

UNAVAILABLE_MESSAGE = "Unable to fetch server statistic"
DEFAULT_SOURCE = "stats-monitor"
DELIVERY_TIMEOUT_SEC = 10

TELEGRAM_API = "https://api.telegram.org"
PUSHOVER_API = "https://api.pushover.net/1/messages.json"

# Pushover priorities: 0 normal, 1 high (bypasses quiet hours).
_PUSHOVER_PRIORITY = {"alert": 1, "info": 0}


def _post(url: str, data: Dict[str, object]) -> None:
    resp = requests.post(url, data=data, timeout=DELIVERY_TIMEOUT_SEC)
    resp.raise_for_status()


def send_telegram(message: str, source: str = DEFAULT_SOURCE) -> None:
    """Send one alert line to the configured chat, tagged with the monitored host."""
    token = os.getenv("TELEGRAM_BOT_TOKEN")
    chat_id = os.getenv("TELEGRAM_CHAT_ID")
    if not token or not chat_id:
        raise RuntimeError("Telegram env vars not set (TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID)")

    _post(
        f"{TELEGRAM_API}/bot{token}/sendMessage",
        {"chat_id": chat_id, "text": f"[{source}] {message}", "disable_web_page_preview": True},
    )


def send_pushover(message: str, source: str = DEFAULT_SOURCE, level: str = "info") -> None:
    user_key = os.getenv("PUSHOVER_USER_KEY")
    app_token = os.getenv("PUSHOVER_APP_TOKEN")
    if not user_key or not app_token:
        raise RuntimeError("Pushover env vars not set (PUSHOVER_USER_KEY, PUSHOVER_APP_TOKEN)")

    _post(
        PUSHOVER_API,
        {
            "token": app_token,
            "user": user_key,
            "title": source,
            "message": message,
            "priority": _PUSHOVER_PRIORITY.get(level, 0),
        },
    )


def notify(message: str, level: str = "info", allow_telegram: bool = True,
           source: str = DEFAULT_SOURCE) -> bool:
    """
    Deliver a message over Telegram or Pushover, whichever is configured.

    Returns True if a remote channel accepted it. Delivery failures are
    reported on stderr and never raised.
    """
    prefix = "🚨 " if level == "alert" else "ℹ️ " if level == "info" else ""
    full_message = prefix + message

    try:
        if allow_telegram and os.getenv("TELEGRAM_BOT_TOKEN") and os.getenv("TELEGRAM_CHAT_ID"):
            send_telegram(full_message, source=source)
            return True
        if os.getenv("PUSHOVER_USER_KEY") and os.getenv("PUSHOVER_APP_TOKEN"):
            send_pushover(full_message, source=source, level=level)
            return True
    except Exception as e:
        print(f"[monitor] Notification failed: {e}", file=sys.stderr)

    return False


def render_alert(record: AlertRecord) -> str:
    return record.message


class ConsoleSink:
    """Prints one line per alert on stdout."""

    def __init__(self, stream=None):
        self.stream = stream

    def _write(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout, flush=True)

    def emit(self, record: AlertRecord) -> None:
        self._write(render_alert(record))

    def emit_unavailable(self) -> None:
        self._write(UNAVAILABLE_MESSAGE)


class NotifySink(ConsoleSink):
    """Console output, forwarded to Telegram/Pushover when configured."""

    def __init__(self, stream=None, allow_telegram: bool = True, source: str = DEFAULT_SOURCE):
        super().__init__(stream)
        self.allow_telegram = allow_telegram
        self.source = source

    def emit(self, record: AlertRecord) -> None:
        super().emit(record)
        notify(render_alert(record), level="alert", allow_telegram=self.allow_telegram, source=self.source)

    def emit_unavailable(self) -> None:
        super().emit_unavailable()
        notify(UNAVAILABLE_MESSAGE, level="alert", allow_telegram=self.allow_telegram, source=self.source)
