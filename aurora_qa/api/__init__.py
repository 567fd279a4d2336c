"""
API routes for the question answering functionality.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from aurora_qa.core.logging import logger
from aurora_qa.schemas import (
    AskResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    UsageResponse,
)
from aurora_qa.services import QAService, get_qa_service
from aurora_qa.exceptions import APIException, InvalidQuestionError
from aurora_qa.core.config import settings

router = APIRouter(tags=["qa"])


def error_response(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(),
    )


@router.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint.

    Returns:
        Health check response with status, version and configuration flag
    """
    logger.info("Health check requested")
    return HealthCheckResponse(
        status="healthy",
        version=settings.APP_VERSION,
        configured=settings.is_configured,
    )


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def ask(request: Request, service: QAService = Depends(get_qa_service)):
    """
    Ask endpoint.

    Expects a JSON body of the form ``{"question": "..."}``.

    Returns:
        Answer response, or an error payload with details
    """
    try:
        try:
            body = await request.json()
        except ValueError:
            raise InvalidQuestionError("Request body must be valid JSON")

        question = body.get("question") if isinstance(body, dict) else None
        answer = await service.ask(question)
        return AskResponse(answer=answer)

    except APIException as e:
        if e.status_code >= 500:
            logger.error(f"Ask failed: {e.message}")
        else:
            logger.warning(f"Rejected question: {e.message}")
        return error_response(e.status_code, e.error, e.message)

    except Exception as e:
        logger.exception(f"Unexpected error: {str(e)}")
        return error_response(500, "Internal server error", str(e) or "Unknown error occurred")


@router.get("/ask", response_model=UsageResponse)
async def ask_usage(service: QAService = Depends(get_qa_service)) -> UsageResponse:
    """Usage help with example questions."""
    return UsageResponse(**service.usage())


@router.get("/cache-stats", response_model=CacheStatsResponse, response_model_by_alias=True)
async def cache_stats(service: QAService = Depends(get_qa_service)) -> CacheStatsResponse:
    """Current message cache state."""
    return CacheStatsResponse(**service.cache.stats())


@router.delete("/cache", response_model=CacheStatsResponse, response_model_by_alias=True)
async def clear_cache(service: QAService = Depends(get_qa_service)) -> CacheStatsResponse:
    """Drop the cached messages; the next question triggers a fresh fetch."""
    logger.info("Cache clear requested")
    service.cache.clear()
    return CacheStatsResponse(**service.cache.stats())
