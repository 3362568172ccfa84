"""
Typed results for business operations.

Rejections such as a full class or a duplicate booking are normal outcomes,
so the engine returns them instead of raising.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    CLASS_UNAVAILABLE = "ClassUnavailable"
    DUPLICATE_BOOKING = "DuplicateBooking"
    CAPACITY_EXCEEDED = "CapacityExceeded"
    INVALID_STATE = "InvalidState"
    NOT_TODAY = "NotToday"
    CONFIGURATION_ERROR = "ConfigurationError"


@dataclass(frozen=True)
class DomainError:
    kind: ErrorKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"code": self.kind.value, "message": self.message, **self.context}


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[DomainError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, **context: Any) -> "Result[T]":
        return cls(error=DomainError(kind=kind, message=message, context=context))

    @classmethod
    def from_error(cls, error: DomainError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value
