from __future__ import annotations

from typing import Any, Mapping

from .exceptions import (
    FailureReason,
    HostError,
    NotFoundError,
    PanelServiceError,
    ServerError,
    TransportError,
    ValidationError,
)


def map_error(status_code: int, payload: Mapping[str, object] | None) -> HostError:
    payload = payload or {}
    code = str(payload.get("code") or "HTTP_ERROR")
    message = str(payload.get("message") or payload.get("error") or "Request failed")
    details = payload.get("details")
    mapped: type[HostError]
    if status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = HostError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def failure_message(response: Any, default: str) -> str:
    """Host-supplied error string from an acknowledgement, or ``default``."""
    if isinstance(response, Mapping):
        error = response.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return default


def to_service_error(exc: Exception, default: str) -> PanelServiceError:
    if isinstance(exc, PanelServiceError):
        return exc
    if isinstance(exc, TransportError):
        return PanelServiceError(
            message=default,
            reason=FailureReason.TRANSPORT_ERROR,
            details=f"{exc.code}: {exc.message}",
        )
    if isinstance(exc, HostError):
        primary = exc.message.strip() or default
        details = f"{exc.code} (HTTP {exc.status_code})" if exc.status_code else exc.code
        return PanelServiceError(message=primary, reason=FailureReason.HOST_REJECTED, details=details)
    return PanelServiceError(
        message=default,
        reason=FailureReason.TRANSPORT_ERROR,
        details=str(exc) or type(exc).__name__,
    )
