from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..error_mapper import failure_message, to_service_error
from ..exceptions import FailureReason, HostRejectedError, PanelServiceError
from ..host_bridge import HostBridge
from ..models import ActionResponse

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class BaseService:
    bridge: HostBridge

    async def _call(self, operation: str, payload: dict[str, Any], *, failure: str) -> Any:
        try:
            return await self.bridge.call(operation, payload)
        except Exception as exc:
            raise to_service_error(exc, failure) from exc

    async def _acknowledged(self, operation: str, payload: dict[str, Any], *, failure: str) -> ActionResponse:
        response = await self._call(operation, payload, failure=failure)
        ack = _coerce_model(response if isinstance(response, Mapping) else {}, ActionResponse, failure)
        if not ack.success:
            rejected = _rejection(response, failure)
            raise to_service_error(rejected, failure) from rejected
        return ack


def _rejection(response: Any, failure: str) -> HostRejectedError:
    """The host answered but refused: ``success: false`` or an ``error`` field."""
    return HostRejectedError(
        code="HOST_REJECTED",
        message=failure_message(response, failure),
        raw_payload=response,
    )


def _coerce_model(value: Any, model_type: type[ModelT], failure: str) -> ModelT:
    if not isinstance(value, Mapping):
        raise PanelServiceError(
            message=failure,
            reason=FailureReason.INVALID_RESPONSE,
            details=f"Expected a JSON object, got {type(value).__name__}",
        )
    try:
        return model_type.model_validate(value)
    except ValidationError as exc:
        raise PanelServiceError(message=failure, reason=FailureReason.INVALID_RESPONSE, details=str(exc)) from exc
