from fastapi import APIRouter, Depends

from askservice.apps.api.dependencies import get_answer_service
from askservice.apps.api.errors import service_error_response
from askservice.apps.api.schemas import AskRequest, AskResponse, ErrorResponse
from askservice.core.ai import AnswerService
from askservice.core.result import Failure

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 422, 502, 503, 504)},
)
async def ask(
    payload: AskRequest,
    service: AnswerService = Depends(get_answer_service),
):
    result = await service.ask(payload.question)
    if isinstance(result, Failure):
        return service_error_response(result.error)
    answer = result.value
    return AskResponse(
        answer=answer.text,
        source=answer.source,
        system_prompt_applied=answer.system_prompt_applied,
    )
