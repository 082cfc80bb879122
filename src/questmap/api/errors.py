from __future__ import annotations

from fastapi import HTTPException

from questmap.domain.usecase.ports import (
    BadRequestError,
    NotFoundError,
    UnavailableError,
)

DOMAIN_ERRORS = (BadRequestError, NotFoundError, UnavailableError)


def http_error(err: Exception) -> HTTPException:
    """Map a domain exception onto the status code the API promises for it."""
    if isinstance(err, NotFoundError):
        if err.details:
            return HTTPException(
                status_code=404, detail={"message": str(err), **err.details}
            )
        return HTTPException(status_code=404, detail=str(err))
    if isinstance(err, BadRequestError):
        return HTTPException(status_code=400, detail=str(err))
    if isinstance(err, UnavailableError):
        return HTTPException(status_code=503, detail=str(err))
    return HTTPException(status_code=500, detail="Internal error")
