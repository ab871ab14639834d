from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from askservice.core.result import Result, success

from ..errors import AiServiceError
from .base import Answer


@dataclass(frozen=True, slots=True)
class MockRule:
    """One canned answer and the lower-cased question shapes that trigger it.

    A rule matches when any of ``any_of`` is a substring, or all of ``all_of``
    are substrings, or the question starts with one of ``prefixes``, or equals
    one of ``exact``.
    """

    key: str
    answer: str
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()
    prefixes: tuple[str, ...] = ()
    exact: tuple[str, ...] = ()

    def matches(self, question: str) -> bool:
        if any(word in question for word in self.any_of):
            return True
        if self.all_of and all(word in question for word in self.all_of):
            return True
        if question.startswith(self.prefixes):
            return True
        return question in self.exact


# First match wins: narrower topics must come before broader ones
# ("how ... work" before "python", "api" after "fastapi").
DEFAULT_RULES: tuple[MockRule, ...] = (
    MockRule(
        key="greeting",
        any_of=("hello",),
        prefixes=("hi ", "hi!", "hi,"),
        exact=("hi",),
        answer=(
            "Hello! I'm a demo AI assistant running in mock mode.\n\n"
            "I can answer questions about:\n"
            "- Rust and Python\n"
            "- FastAPI\n"
            "- Async programming\n"
            "- REST APIs and JSON\n"
            "- Testing\n"
            "- Error handling\n\n"
            "Try asking about any of these topics! For full AI answers, "
            "configure the GigaChat API connection."
        ),
    ),
    MockRule(
        key="fastapi",
        any_of=("fastapi",),
        answer=(
            "FastAPI is a Python web framework for building APIs on top of Starlette "
            "and pydantic. Key features:\n"
            "- Request and response models declared with type hints\n"
            "- Automatic JSON validation and serialization\n"
            "- Native async request handlers\n"
            "- Dependency injection via Depends()\n"
            "- Generated OpenAPI documentation\n"
            "- TestClient for in-process testing\n"
            "It is a good fit for REST APIs and small web services like this one."
        ),
    ),
    MockRule(
        key="testing",
        any_of=("test",),
        answer=(
            "Testing is how you keep a service honest. Common kinds of tests:\n"
            "- Unit tests check individual functions in isolation\n"
            "- Integration tests check components working together\n"
            "- HTTP tests drive the app through its public endpoints\n"
            "This project uses pytest, pytest-asyncio for coroutine tests and "
            "FastAPI's TestClient for the HTTP layer. Run them with: pytest"
        ),
    ),
    MockRule(
        key="errors",
        any_of=("error",),
        answer=(
            "Error handling works best when failures are explicit:\n"
            "- Expected failures are returned as typed results (Success / Failure)\n"
            "- Each failure kind has a stable machine-readable code\n"
            "- Unexpected exceptions propagate to a single top-level handler\n"
            "- Clients always receive a structured JSON error body\n"
            "This keeps the happy path readable and makes every failure testable."
        ),
    ),
    MockRule(
        key="json",
        any_of=("pydantic", "json"),
        answer=(
            "pydantic validates and serializes data using Python type hints. "
            "It lets you:\n"
            "- Parse JSON request bodies into typed models\n"
            "- Reject malformed input with precise error locations\n"
            "- Serialize models back to JSON\n"
            "- Declare defaults and constraints with Field()\n"
            "Example: class AskRequest(BaseModel): question: str"
        ),
    ),
    MockRule(
        key="async",
        any_of=("async",),
        answer=(
            "Async programming lets one process handle many concurrent tasks "
            "without a thread per task. Key concepts:\n"
            "- async def / await define and suspend coroutines\n"
            "- The event loop schedules coroutines cooperatively\n"
            "- asyncio.to_thread moves blocking work off the loop\n"
            "- Timeouts (asyncio.wait_for) bound how long you wait\n"
            "It shines for web servers, network clients and other I/O-bound work."
        ),
    ),
    MockRule(
        key="api",
        any_of=("api",),
        answer=(
            "A REST API is an architectural style for web services. Main verbs:\n"
            "- GET retrieves data\n"
            "- POST creates resources or triggers actions\n"
            "- PUT/PATCH update existing resources\n"
            "- DELETE removes resources\n"
            "This service exposes GET /health and POST /ask, both speaking JSON."
        ),
    ),
    MockRule(
        key="how_it_works",
        all_of=("how", "work"),
        answer=(
            "This app is a small question-answering web service. Architecture:\n"
            "- FastAPI accepts HTTP requests (askservice/apps/api)\n"
            "- A validation step rejects empty questions\n"
            "- An answer provider produces the answer (askservice/core/ai/providers)\n"
            "- Settings come from config.toml plus environment overrides\n\n"
            "The service runs either against the real GigaChat API or, as now, "
            "in mock mode with canned answers."
        ),
    ),
    MockRule(
        key="python",
        any_of=("python",),
        answer=(
            "Python is a general-purpose programming language that emphasises "
            "readability. It ships with a large standard library and has a rich "
            "ecosystem for web services, data processing, automation and machine "
            "learning. asyncio, type hints and dataclasses make it practical for "
            "building small, well-structured network services like this one."
        ),
    ),
    MockRule(
        key="rust",
        any_of=("rust",),
        answer=(
            "Rust is a systems programming language focused on safety, speed and "
            "concurrency. It was developed by Mozilla Research and first released in "
            "2010. Rust guarantees memory safety without a garbage collector through "
            "its ownership and borrowing system, which makes it well suited for "
            "systems programming, web servers, embedded systems and "
            "high-performance applications."
        ),
    ),
)

DEFAULT_ANSWER = (
    "This is a demo response from the mock service.\n\n"
    "I can help with questions about:\n"
    "- Rust and Python\n"
    "- FastAPI\n"
    "- Async programming\n"
    "- REST APIs\n"
    "- Testing\n\n"
    "Try asking: 'What is Rust?' or 'How does this service work?'\n\n"
    "For real AI answers, set the GIGACHAT_TOKEN environment variable "
    "and keep gigachat.enabled = true in config.toml."
)


class MockProvider:
    """Deterministic, offline provider driven by an ordered rule table.

    Used whenever no GigaChat credential is configured. It never fails and
    never blocks.
    """

    name = "mock"

    def __init__(self, rules: Sequence[MockRule] = DEFAULT_RULES, default_answer: str = DEFAULT_ANSWER) -> None:
        self._rules = tuple(rules)
        self._default_answer = default_answer

    @property
    def rules(self) -> tuple[MockRule, ...]:
        return self._rules

    def match(self, question: str) -> MockRule | None:
        """Return the first rule matching ``question``, if any."""
        normalized = question.strip().lower()
        for rule in self._rules:
            if rule.matches(normalized):
                return rule
        return None

    async def ask(self, question: str) -> Result[Answer, AiServiceError]:
        rule = self.match(question)
        text = rule.answer if rule is not None else self._default_answer
        return success(Answer(text=text, source=self.name))


__all__ = ["DEFAULT_ANSWER", "DEFAULT_RULES", "MockProvider", "MockRule"]
