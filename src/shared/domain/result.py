"""Result / Error primitives for expected failure paths.

Use-case handlers return a ``Result`` instead of raising for outcomes the
caller is expected to handle (validation, not found, conflict).  Exceptions
remain reserved for infrastructure faults and programming errors.

- ``ErrorCode``: closed taxonomy consumed by the API layer for status mapping.
- ``Error``: immutable ``(code, message)`` pair, with optional field details.
- ``Result``: success/failure value; ``Result.success(value)`` or
  ``Result.failure(error)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    VALIDATION = "validation.failed"
    NOT_FOUND = "catalog.not_found"
    CONFLICT = "catalog.conflict"
    CACHE_UNAVAILABLE = "cache.unavailable"
    STORE_UNAVAILABLE = "store.unavailable"


@dataclass(frozen=True)
class Error:
    """An expected failure.

    ``details`` carries field-level violations for ``VALIDATION`` errors,
    keyed by field name.
    """

    code: ErrorCode
    message: str
    details: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not isinstance(self.code, ErrorCode):
            raise ValueError(f"Unknown error code: {self.code!r}")
        if not self.message:
            raise ValueError("Error message must not be empty.")
        frozen = {name: tuple(messages) for name, messages in self.details.items()}
        object.__setattr__(self, "details", MappingProxyType(frozen))

    @classmethod
    def validation(cls, details: Mapping[str, Sequence[str]]) -> Error:
        return cls(
            ErrorCode.VALIDATION,
            "One or more validation errors occurred.",
            {name: tuple(messages) for name, messages in details.items()},
        )

    @classmethod
    def not_found(cls, message: str) -> Error:
        return cls(ErrorCode.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> Error:
        return cls(ErrorCode.CONFLICT, message)

    @classmethod
    def store_unavailable(cls, message: str = "The data store is unavailable.") -> Error:
        return cls(ErrorCode.STORE_UNAVAILABLE, message)


class ResultAccessError(RuntimeError):
    """Raised when reading the value of a failure or the error of a success."""


class Result(Generic[T]):
    """Immutable success/failure value.

    Exactly one of ``value`` / ``error`` is meaningful.  Construction with an
    inconsistent pair fails fast with ``ValueError``.
    """

    __slots__ = ("_is_success", "_value", "_error")

    def __init__(
        self, is_success: bool, value: Optional[T] = None, error: Optional[Error] = None
    ) -> None:
        if is_success and error is not None:
            raise ValueError("A successful result cannot carry an error.")
        if not is_success and not isinstance(error, Error):
            raise ValueError("A failed result must carry an error.")
        if not is_success and value is not None:
            raise ValueError("A failed result cannot carry a value.")
        object.__setattr__(self, "_is_success", is_success)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_error", error)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Result is immutable.")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Result is immutable.")

    @classmethod
    def success(cls, value: Optional[T] = None) -> Result[T]:
        return cls(True, value=value)

    @classmethod
    def failure(cls, error: Error) -> Result[T]:
        return cls(False, error=error)

    @property
    def is_success(self) -> bool:
        return self._is_success

    @property
    def is_failure(self) -> bool:
        return not self._is_success

    @property
    def value(self) -> T:
        if not self._is_success:
            raise ResultAccessError("Cannot access the value of a failed result.")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> Error:
        if self._is_success:
            raise ResultAccessError("Cannot access the error of a successful result.")
        return self._error  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (self._is_success, self._value, self._error) == (
            other._is_success,
            other._value,
            other._error,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"
