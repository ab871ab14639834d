"""Answer providers.

- ``GigaChatProvider``: forwards questions to the GigaChat API.
- ``MockProvider``: offline, deterministic keyword rules.
- ``AnswerProvider``: Protocol both implement.
"""

from .base import Answer, AnswerProvider
from .gigachat import GigaChatProvider
from .mock import DEFAULT_RULES, MockProvider, MockRule

__all__ = [
    "Answer",
    "AnswerProvider",
    "DEFAULT_RULES",
    "GigaChatProvider",
    "MockProvider",
    "MockRule",
]
