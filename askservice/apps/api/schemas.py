"""Pydantic bodies for the public HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    question: str = Field(..., description="Free-text question")


class AskResponse(BaseModel):
    answer: str
    source: str = Field(..., description="Provider that produced the answer: 'gigachat' or 'mock'")
    system_prompt_applied: bool = False


class HealthResponse(BaseModel):
    status: str
    version: str
    gigachat_enabled: bool


class ErrorResponse(BaseModel):
    error: str
    code: str
