from __future__ import annotations

import asyncio
import uuid
from typing import Any, Optional

import aiohttp

from askservice.core.error_handler import install_loop_exception_handler
from askservice.core.result import Result, failure, success
from askservice.core.settings import ConfigError, GigaChatConfig

from ..errors import AiServiceError, ErrorKind
from .base import Answer

# Extra time allowed for the worker thread to hand its result back after the
# upstream exchange itself has been cut off.
_JOIN_GRACE_SECONDS = 1.0


class _UpstreamFailure(Exception):
    """Internal carrier for a typed failure raised inside the worker."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def _failure_for_status(status: int, stage: str) -> _UpstreamFailure:
    if status in (401, 403):
        return _UpstreamFailure(ErrorKind.UPSTREAM_AUTH, f"GigaChat rejected the credentials ({stage}: HTTP {status})")
    if status == 429:
        return _UpstreamFailure(ErrorKind.UPSTREAM_RATE_LIMITED, f"GigaChat rate limit reached ({stage})")
    return _UpstreamFailure(ErrorKind.UPSTREAM_NETWORK, f"GigaChat returned HTTP {status} ({stage})")


def _extract_content(data: Any) -> str:
    """Pull the assistant text out of a chat/completions response."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = (choices[0] or {}).get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


def build_messages(question: str, system_prompt: Optional[str]) -> list[dict[str, str]]:
    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": question})
    return messages


class GigaChatProvider:
    """Answers questions through the GigaChat chat/completions API.

    The provider only holds inert data (token and config). An HTTP client
    session is bound to the event loop that created it, so each call builds a
    fresh session inside a worker thread running its own loop, uses it for the
    OAuth and chat requests, and closes it before the thread returns. No
    session or connection outlives a call or crosses an ``await`` in the
    caller's loop.

    Failures are never retried here.
    """

    name = "gigachat"

    def __init__(self, token: str, config: GigaChatConfig, system_prompt: Optional[str] = None) -> None:
        if not token or not token.strip():
            raise ConfigError("GigaChat token is empty")
        self._token = token.strip()
        self._config = config
        prompt = (system_prompt or "").strip()
        self._system_prompt = prompt or None

    @property
    def config(self) -> GigaChatConfig:
        return self._config

    @property
    def system_prompt_applied(self) -> bool:
        return self._system_prompt is not None

    def __repr__(self) -> str:
        return f"GigaChatProvider(model={self._config.model!r}, base_url={self._config.base_url!r})"

    async def ask(self, question: str) -> Result[Answer, AiServiceError]:
        timeout = self._config.timeout_seconds
        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self._run_isolated, question),
                timeout=timeout + _JOIN_GRACE_SECONDS,
            )
        except asyncio.TimeoutError:
            return failure(
                AiServiceError(ErrorKind.UPSTREAM_TIMEOUT, f"GigaChat did not answer within {timeout:g}s")
            )
        except _UpstreamFailure as exc:
            return failure(AiServiceError(exc.kind, exc.message))
        return success(Answer(text=text, source=self.name, system_prompt_applied=self.system_prompt_applied))

    def _run_isolated(self, question: str) -> str:
        """Worker-thread entry point: one private event loop per call."""
        with asyncio.Runner() as runner:
            install_loop_exception_handler(runner.get_loop(), self.name)
            return runner.run(self._exchange_with_deadline(question))

    async def _exchange_with_deadline(self, question: str) -> str:
        timeout = self._config.timeout_seconds
        try:
            return await asyncio.wait_for(self._exchange(question), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise _UpstreamFailure(
                ErrorKind.UPSTREAM_TIMEOUT, f"GigaChat did not answer within {timeout:g}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise _UpstreamFailure(
                ErrorKind.UPSTREAM_NETWORK, f"GigaChat connection error: {type(exc).__name__}"
            ) from exc

    async def _exchange(self, question: str) -> str:
        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        connector = aiohttp.TCPConnector(ssl=self._config.verify_ssl)
        async with aiohttp.ClientSession(timeout=timeout, connector=connector) as session:
            access_token = await self._fetch_access_token(session)
            return await self._complete(session, access_token, question)

    async def _fetch_access_token(self, session: aiohttp.ClientSession) -> str:
        headers = {
            "Authorization": f"Basic {self._token}",
            "RqUID": str(uuid.uuid4()),
            "Accept": "application/json",
        }
        async with session.post(self._config.auth_url, headers=headers, data={"scope": self._config.scope}) as resp:
            if not 200 <= resp.status < 300:
                raise _failure_for_status(resp.status, "oauth")
            try:
                data = await resp.json(content_type=None)
            except ValueError as exc:
                raise _UpstreamFailure(ErrorKind.UPSTREAM_NETWORK, "GigaChat OAuth returned non-JSON response") from exc
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise _UpstreamFailure(ErrorKind.UPSTREAM_AUTH, "GigaChat OAuth response has no access token")
        return access_token

    async def _complete(self, session: aiohttp.ClientSession, access_token: str, question: str) -> str:
        url = f"{self._config.base_url}/chat/completions"
        payload = {
            "model": self._config.model,
            "messages": build_messages(question, self._system_prompt),
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }
        headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}
        async with session.post(url, headers=headers, json=payload) as resp:
            if not 200 <= resp.status < 300:
                raise _failure_for_status(resp.status, "chat")
            try:
                data = await resp.json(content_type=None)
            except ValueError as exc:
                raise _UpstreamFailure(ErrorKind.UPSTREAM_NETWORK, "GigaChat returned non-JSON response") from exc
        text = _extract_content(data)
        if not text:
            raise _UpstreamFailure(ErrorKind.UPSTREAM_NETWORK, "GigaChat returned an empty answer")
        return text


__all__ = ["GigaChatProvider", "build_messages"]
