"""Maps domain errors to HTTP responses."""

from typing import Any, Dict

from fastapi import HTTPException

from ..domain.errors import (
    FactCheckCancelledError,
    FactCheckTimeoutError,
    FactCheckValidationError,
    RequestError,
    SessionBusyError,
    describe_error,
)


def error_status(error: Exception) -> int:
    if isinstance(error, FactCheckValidationError):
        return 400
    if isinstance(error, (SessionBusyError, FactCheckCancelledError)):
        return 409
    if isinstance(error, FactCheckTimeoutError):
        return 504
    if isinstance(error, RequestError):
        return 502
    return 500


def error_detail(error: Exception) -> Dict[str, Any]:
    description = describe_error(error)
    return {
        "error": str(error),
        "error_type": type(error).__name__,
        "title": description.title,
        "suggestions": description.suggestions,
    }


def to_http_exception(error: Exception) -> HTTPException:
    return HTTPException(status_code=error_status(error), detail=error_detail(error))
