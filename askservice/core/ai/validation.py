from __future__ import annotations

from askservice.core.result import Result, failure, success

from .errors import AiServiceError, ErrorKind

EMPTY_QUESTION_MESSAGE = "Question must not be empty"


def validate_question(raw: str) -> Result[str, AiServiceError]:
    """Strip surrounding whitespace and reject what is left if it is empty."""
    question = (raw or "").strip()
    if not question:
        return failure(AiServiceError(ErrorKind.EMPTY_QUESTION, EMPTY_QUESTION_MESSAGE))
    return success(question)


__all__ = ["EMPTY_QUESTION_MESSAGE", "validate_question"]
