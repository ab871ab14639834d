from __future__ import annotations

from fastapi import Request

from askservice.core.ai import AnswerService
from askservice.core.settings import Settings


def get_answer_service(request: Request) -> AnswerService:
    return request.app.state.answer_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
