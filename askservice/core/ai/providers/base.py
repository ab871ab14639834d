from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from askservice.core.result import Result

from ..errors import AiServiceError


@dataclass(frozen=True, slots=True)
class Answer:
    text: str
    source: str
    system_prompt_applied: bool = False


@runtime_checkable
class AnswerProvider(Protocol):
    name: str

    async def ask(self, question: str) -> Result[Answer, AiServiceError]:
        """Answer an already validated (stripped, non-empty) question.

        Implementations are shared by all in-flight requests and must not keep
        per-request state on the instance. Expected failures come back as
        ``Failure(AiServiceError)``; only programming errors may raise.
        """
