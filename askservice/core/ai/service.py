"""Answer service: validation in front of the provider chosen at startup.

Provider selection happens exactly once, from resolved ``Settings``:
a GigaChat credential selects ``GigaChatProvider``, its absence selects
``MockProvider``. There is no per-request fallback from one to the other;
an unreachable GigaChat surfaces as an upstream error.
"""

from __future__ import annotations

from askservice.core.result import Failure, Result
from askservice.core.settings import Settings

from .errors import AiServiceError
from .providers import Answer, AnswerProvider, GigaChatProvider, MockProvider
from .validation import validate_question


def select_provider(settings: Settings) -> AnswerProvider:
    """Instantiate the provider for resolved settings (gigachat or mock)."""
    if settings.remote_enabled:
        return GigaChatProvider(
            token=settings.gigachat_token,
            config=settings.gigachat,
            system_prompt=settings.system_prompt,
        )
    return MockProvider()


class AnswerService:
    """Read-only capability shared by every request handler."""

    def __init__(self, provider: AnswerProvider) -> None:
        self._provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnswerService":
        return cls(select_provider(settings))

    @property
    def provider(self) -> AnswerProvider:
        return self._provider

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def remote_enabled(self) -> bool:
        return self._provider.name != MockProvider.name

    async def ask(self, raw_question: str) -> Result[Answer, AiServiceError]:
        validated = validate_question(raw_question)
        if isinstance(validated, Failure):
            return validated
        return await self._provider.ask(validated.value)


__all__ = ["AnswerService", "select_provider"]
