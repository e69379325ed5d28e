from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from order_panel.config import PanelConfig
from order_panel.exceptions import HostRejectedError, NotFoundError, ServerError, TransportError, ValidationError
from order_panel.host_bridge import HttpHostBridge, LocalHostBridge


def _bridge(handler) -> HttpHostBridge:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpHostBridge(PanelConfig(host_url="https://host.test/"), client=client)


def _call(bridge, operation: str, payload: dict):
    async def scenario():
        try:
            return await bridge.call(operation, payload)
        finally:
            if isinstance(bridge, HttpHostBridge):
                await bridge.client.aclose()

    return asyncio.run(scenario())


def test_http_bridge_posts_json_to_operation_path() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    bridge = _bridge(handler)
    result = _call(bridge, "updateOrderStatus", {"orderId": "ORDER_001", "status": "completed"})

    assert result == {"success": True}
    assert seen == {
        "method": "POST",
        "url": "https://host.test/updateOrderStatus",
        "body": {"orderId": "ORDER_001", "status": "completed"},
    }
    assert bridge.last_operation is not None
    assert bridge.last_operation.result == "success"


def test_http_bridge_empty_body_is_none() -> None:
    bridge = _bridge(lambda request: httpx.Response(200))
    assert _call(bridge, "submitOrder", {}) is None


def test_http_bridge_non_json_body_is_wrapped() -> None:
    bridge = _bridge(lambda request: httpx.Response(200, text="ok"))
    assert _call(bridge, "submitOrder", {}) == {"message": "ok"}


@pytest.mark.parametrize(
    ("status", "error_type"),
    [(404, NotFoundError), (422, ValidationError), (400, ValidationError), (503, ServerError)],
)
def test_http_bridge_maps_error_statuses(status: int, error_type: type) -> None:
    bridge = _bridge(lambda request: httpx.Response(status, json={"code": "NOPE", "message": "refused"}))

    with pytest.raises(error_type) as exc_info:
        _call(bridge, "withdrawBank", {"amount": 5})

    assert exc_info.value.status_code == status
    assert exc_info.value.message == "refused"
    assert bridge.last_operation.result == "error"


def test_http_bridge_wraps_connection_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    bridge = _bridge(handler)
    with pytest.raises(TransportError) as exc_info:
        _call(bridge, "getBankBalance", {})

    assert exc_info.value.code == "NETWORK_ERROR"


def test_http_bridge_wraps_timeouts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow host", request=request)

    bridge = _bridge(handler)
    with pytest.raises(TransportError) as exc_info:
        _call(bridge, "getDashboardStats", {})

    assert exc_info.value.code == "TIMEOUT_ERROR"
    assert bridge.last_operation.result == "timeout"


def test_local_bridge_runs_sync_and_async_handlers() -> None:
    async def balance(payload: dict) -> dict:
        await asyncio.sleep(0)
        return {"balance": 12}

    bridge = LocalHostBridge()
    bridge.register("getBankBalance", balance)
    bridge.register("withdrawBank", lambda payload: {"success": True, "echo": payload["amount"]})

    assert _call(bridge, "getBankBalance", {}) == {"balance": 12}
    assert _call(bridge, "withdrawBank", {"amount": 5}) == {"success": True, "echo": 5}
    assert bridge.calls_to("withdrawBank") == [{"amount": 5}]


def test_local_bridge_unknown_operation() -> None:
    with pytest.raises(TransportError) as exc_info:
        _call(LocalHostBridge(), "closePanel", {})
    assert exc_info.value.code == "UNKNOWN_OPERATION"


def test_local_bridge_wraps_handler_crashes_and_keeps_host_errors() -> None:
    def crash(payload: dict) -> dict:
        raise RuntimeError("database offline")

    def refuse(payload: dict) -> dict:
        raise HostRejectedError(code="CLOSED", message="Restaurant closed")

    bridge = LocalHostBridge()
    bridge.register("submitOrder", crash)
    bridge.register("withdrawBank", refuse)

    with pytest.raises(TransportError) as crashed:
        _call(bridge, "submitOrder", {})
    assert crashed.value.code == "HOST_HANDLER_ERROR"

    with pytest.raises(HostRejectedError):
        _call(bridge, "withdrawBank", {})
