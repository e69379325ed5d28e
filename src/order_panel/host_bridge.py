from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

import httpx

from .config import PanelConfig
from .error_mapper import map_error
from .exceptions import HostError, TransportError

logger = logging.getLogger(__name__)

SUBMIT_ORDER = "submitOrder"
UPDATE_ORDER_STATUS = "updateOrderStatus"
GET_DASHBOARD_STATS = "getDashboardStats"
GET_BANK_BALANCE = "getBankBalance"
WITHDRAW_BANK = "withdrawBank"

HostHandler = Callable[[dict[str, Any]], Any | Awaitable[Any]]


class HostBridge(Protocol):
    async def call(self, operation: str, payload: dict[str, Any]) -> Any: ...


@dataclass
class LastOperation:
    operation: str
    duration_ms: int
    result: str


class HttpHostBridge:
    """POSTs each operation as JSON to ``<host_url>/<operation>``.

    Requests are never retried; the caller decides whether to re-issue.
    """

    def __init__(self, config: PanelConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self.last_operation: LastOperation | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_ssl,
            )
        return self._client

    def _build_url(self, operation: str) -> str:
        return f"{self.config.host_url.rstrip('/')}/{operation.lstrip('/')}"

    async def call(self, operation: str, payload: dict[str, Any]) -> Any:
        started = time.monotonic()
        try:
            response = await self.client.post(
                self._build_url(operation),
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as exc:
            self._record(operation, started, "timeout")
            raise TransportError(
                code="TIMEOUT_ERROR",
                message=f"Host did not answer {operation} in time",
                details={"type": type(exc).__name__},
            ) from exc
        except httpx.TransportError as exc:
            self._record(operation, started, "transport_error")
            raise TransportError(
                code="NETWORK_ERROR",
                message=str(exc) or f"Could not reach host for {operation}",
                details={"type": type(exc).__name__},
            ) from exc

        if response.status_code >= 400:
            payload_body = self._safe_json(response)
            self._record(operation, started, "error")
            raise map_error(response.status_code, payload_body if isinstance(payload_body, dict) else None)

        self._record(operation, started, "success")
        if not response.content:
            return None
        return self._safe_json(response)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _record(self, operation: str, started: float, result: str) -> None:
        self.last_operation = LastOperation(
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
        )

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}


@dataclass
class LocalHostBridge:
    """In-process host: operations are answered by registered handlers."""

    handlers: dict[str, HostHandler] = field(default_factory=dict)
    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def register(self, operation: str, handler: HostHandler) -> None:
        self.handlers[operation] = handler

    def calls_to(self, operation: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.calls if name == operation]

    async def call(self, operation: str, payload: dict[str, Any]) -> Any:
        self.calls.append((operation, payload))
        handler = self.handlers.get(operation)
        if handler is None:
            raise TransportError(
                code="UNKNOWN_OPERATION",
                message=f"No host handler registered for {operation}",
            )
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                result = await result
        except HostError:
            raise
        except Exception as exc:
            logger.warning("host_handler_failed", extra={"operation": operation, "error": str(exc)})
            raise TransportError(
                code="HOST_HANDLER_ERROR",
                message=str(exc) or f"Host handler for {operation} failed",
                details={"type": type(exc).__name__},
            ) from exc
        return result
