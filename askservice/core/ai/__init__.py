"""Question answering core.

Input is validated before any provider sees it; providers return
``Result[Answer, AiServiceError]`` and never log or swallow failures.
"""

from .errors import AiServiceError, ErrorKind
from .providers import Answer, AnswerProvider
from .service import AnswerService, select_provider
from .validation import validate_question

__all__ = [
    "AiServiceError",
    "Answer",
    "AnswerProvider",
    "AnswerService",
    "ErrorKind",
    "select_provider",
    "validate_question",
]
