from fastapi import HTTPException, status

from gym_schedule.core.result import ErrorKind, Result
from gym_schedule.errors.booking_errors import (
    ActingForAnotherMember,
    AlreadyCheckedOut,
    LookupFailure,
    MemberEmailTaken,
    MemberInactive,
    NotBookingOwner,
)

# Каждый вид отказа получает свой 4xx код
STATUS_BY_KIND = {
    ErrorKind.CLASS_UNAVAILABLE: 423,
    ErrorKind.DUPLICATE_BOOKING: 409,
    ErrorKind.CAPACITY_EXCEEDED: 422,
    ErrorKind.INVALID_STATE: 400,
    ErrorKind.NOT_TODAY: 412,
    ErrorKind.CONFIGURATION_ERROR: 424,
}


def raise_for_error(result: Result) -> None:
    """Raises HTTPException with a machine-readable code when the result is a failure."""
    if result.ok:
        return
    raise HTTPException(
        status_code=STATUS_BY_KIND[result.error.kind],
        detail=result.error.as_dict(),
    )


def http_error_for(exc: LookupFailure) -> HTTPException:
    if isinstance(exc, (ActingForAnotherMember, MemberInactive, NotBookingOwner)):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=exc.message)
    if isinstance(exc, (AlreadyCheckedOut, MemberEmailTaken)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
