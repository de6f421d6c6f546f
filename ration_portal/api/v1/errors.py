from fastapi import HTTPException

from ration_portal.application.exceptions import (
    CapacityExceeded,
    ConflictRetryable,
    DirectoryUnavailableError,
    InsufficientStock,
    NotFoundError,
    PermissionDeniedError,
    RationPortalError,
    ValidationError,
)


def to_http_error(exc: RationPortalError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, CapacityExceeded):
        return HTTPException(status_code=409, detail={"error": "capacity_exceeded", "message": str(exc)})
    if isinstance(exc, InsufficientStock):
        return HTTPException(
            status_code=409,
            detail={"error": "insufficient_stock", "message": str(exc), "shortfall": exc.shortfall},
        )
    if isinstance(exc, ConflictRetryable):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, DirectoryUnavailableError):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
