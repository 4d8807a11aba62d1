from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "InvalidArgument"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    NO_OP = "NoOp"
    INVARIANT_VIOLATION = "InvariantViolation"


class GraphOperationError(Exception):
    """Raised by OperationResult.unwrap() when the operation failed."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class OperationError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a graph operation: either a value or an OperationError."""
    value: Optional[T] = None
    error: Optional[OperationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OperationResult[T]":
        return cls(error=OperationError(kind=kind, message=message))

    def unwrap(self) -> T:
        if self.error is not None:
            raise GraphOperationError(self.error.kind, self.error.message)
        return self.value
