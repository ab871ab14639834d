"""
Result type for operations that fail in expected, typed ways.

Providers and the validation step return a ``Result`` instead of raising, so
the HTTP layer alone decides how each failure is reported. Unexpected errors
are still raised normally.

Example:
    match await service.ask("What is Rust?"):
        case Success(answer):
            print(answer.text)
        case Failure(error):
            print(error.code)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class UnwrapError(RuntimeError):
    """Raised by ``Failure.unwrap``; the original error is kept on ``.error``."""

    def __init__(self, error: object) -> None:
        super().__init__(f"called unwrap() on a failure: {error}")
        self.error = error


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure(Generic[E]):
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        raise UnwrapError(self.error)


Result = Union[Success[T], Failure[E]]


def success(value: T) -> Success[T]:
    return Success(value)


def failure(error: E) -> Failure[E]:
    return Failure(error)


__all__ = ["Failure", "Result", "Success", "UnwrapError", "failure", "success"]
