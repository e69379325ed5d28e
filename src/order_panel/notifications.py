from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_NOTIFICATION_TTL_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    message: str
    source_label: str
    token: int


@dataclass
class NotificationCenter:
    """Single-slot notification holder with a self-expiry timer.

    A new notification replaces the current one and re-arms the timer.
    """

    ttl_seconds: float = DEFAULT_NOTIFICATION_TTL_SECONDS
    loop: asyncio.AbstractEventLoop | None = None
    current: Notification | None = None
    _timer: asyncio.TimerHandle | None = field(default=None, repr=False)
    _token: int = 0

    def push(self, *, message: str, source_label: str) -> Notification:
        self._cancel_timer()
        self._token += 1
        notification = Notification(message=message, source_label=source_label, token=self._token)
        self.current = notification
        loop = self.loop or _running_loop()
        if loop is None:
            logger.warning("notification_without_expiry", extra={"reason": "no running event loop"})
            return notification
        self._timer = loop.call_later(self.ttl_seconds, self._expire, notification.token)
        return notification

    def dismiss(self) -> None:
        self._cancel_timer()
        self.current = None

    def _expire(self, token: int) -> None:
        if self.current is not None and self.current.token == token:
            self.current = None
            self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def render(self) -> dict[str, Any] | None:
        if self.current is None:
            return None
        return {"message": self.current.message, "source_label": self.current.source_label}


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
