from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Mapping[str, Any]], None]


@dataclass
class MessageChannel:
    """Single inbound channel from the host, dispatched by message tag.

    Messages look like ``{"action": "<tag>", "data": {...}}``.
    """

    handlers: dict[str, MessageHandler] = field(default_factory=dict)

    def subscribe(self, tag: str, handler: MessageHandler) -> None:
        self.handlers[tag] = handler

    def unsubscribe(self, tag: str) -> None:
        self.handlers.pop(tag, None)

    def dispatch(self, message: Mapping[str, Any]) -> bool:
        tag = message.get("action")
        handler = self.handlers.get(tag) if isinstance(tag, str) else None
        if handler is None:
            logger.debug("unhandled_message", extra={"action": tag})
            return False
        data = message.get("data")
        handler(data if isinstance(data, Mapping) else {})
        return True
