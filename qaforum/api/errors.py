import logging

from fastapi import HTTPException, status

from qaforum.errors import (
    ForumError,
    InvalidInputError,
    InvariantViolationError,
    NotFoundError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


def http_error(error: ForumError) -> HTTPException:
    """Translate a service error into the HTTP error the client sees.

    Client-fixable errors keep their message; store failures become a
    generic retryable 503.
    """
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, InvariantViolationError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, PersistenceError):
        logger.error("Store call failed: %s", error)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is temporarily unavailable, please retry",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
    )
