from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from app.domain import DomainValidationError, ValidationError
from app.service import DuplicateRecordError, SessionNotFoundError


def api_error(
    *,
    code: str,
    message: str,
    details: Any | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "code": code,
            "message": message,
            "details": details,
        },
    )


def domain_error(exc: DomainValidationError) -> HTTPException:
    if isinstance(exc, SessionNotFoundError):
        return api_error(code="session_not_found", message=str(exc), status_code=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, DuplicateRecordError):
        return api_error(code="duplicate_record", message=str(exc), status_code=status.HTTP_409_CONFLICT)
    if isinstance(exc, ValidationError):
        return api_error(code="invalid_record", message=str(exc), details=_describe(exc.record))
    return api_error(code="invalid_input", message=str(exc))


def _describe(record: Any) -> dict[str, Any] | None:
    if record is None:
        return None
    return {key: str(getattr(value, "value", value)) for key, value in vars(record).items() if value is not None}
