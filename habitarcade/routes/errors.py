"""
Translation of service exceptions into HTTP errors.
"""
from fastapi import HTTPException, status

from habitarcade.exceptions import (
    HabitArcadeException, NotFoundException, ValidationException
)


def to_http_exception(exc: HabitArcadeException) -> HTTPException:
    """Map a service exception to an HTTPException with a machine-readable code"""
    if isinstance(exc, NotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ValidationException):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=status_code, detail={"error": str(exc), "code": exc.code})


# Errors the client can fix; everything else propagates
CLIENT_ERRORS = (NotFoundException, ValidationException)
