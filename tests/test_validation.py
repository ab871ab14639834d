from __future__ import annotations

import pytest

from askservice.core.ai import AnswerService, ErrorKind, validate_question
from askservice.core.result import Failure, Success


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", " 　 "])
def test_blank_questions_are_rejected(raw):
    result = validate_question(raw)
    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.EMPTY_QUESTION
    assert result.error.code == "EMPTY_QUESTION"


def test_question_is_stripped_and_otherwise_unchanged():
    result = validate_question("  What is   Rust?\n")
    assert isinstance(result, Success)
    assert result.value == "What is   Rust?"


def test_long_questions_are_not_limited():
    question = "why " * 5000
    assert validate_question(question).unwrap() == question.strip()


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", "   ", "\n\t  "])
async def test_provider_is_not_called_for_blank_question(raw, counting_provider):
    service = AnswerService(counting_provider)

    result = await service.ask(raw)

    assert result.is_failure()
    assert result.error.kind is ErrorKind.EMPTY_QUESTION
    assert counting_provider.calls == []


@pytest.mark.asyncio
async def test_provider_receives_trimmed_question(counting_provider):
    service = AnswerService(counting_provider)

    result = await service.ask("  What is Rust?  ")

    assert counting_provider.calls == ["What is Rust?"]
    assert result.unwrap().text == "echo: What is Rust?"
