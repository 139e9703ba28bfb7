from __future__ import annotations

from fastapi import HTTPException, status

from planboard.services.errors import GroupConflictError, NotFoundError, ServiceError


def http_error(exc: ServiceError) -> HTTPException:
    """Map a service error onto the HTTP status the API reports for it."""
    if isinstance(exc, GroupConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "existing_group_id": str(exc.existing_group_id)},
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
