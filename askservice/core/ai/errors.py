from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Request-time failure kinds. Values are the codes sent to clients."""

    EMPTY_QUESTION = "EMPTY_QUESTION"
    UPSTREAM_AUTH = "UPSTREAM_AUTH"
    UPSTREAM_NETWORK = "UPSTREAM_NETWORK"
    UPSTREAM_RATE_LIMITED = "UPSTREAM_RATE_LIMITED"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"


@dataclass(frozen=True, slots=True)
class AiServiceError:
    """A typed failure returned (not raised) by validation and providers.

    ``message`` is safe to show to API clients: it never carries credentials
    or raw upstream bodies.
    """

    kind: ErrorKind
    message: str

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def is_upstream(self) -> bool:
        return self.kind is not ErrorKind.EMPTY_QUESTION

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


__all__ = ["AiServiceError", "ErrorKind"]
