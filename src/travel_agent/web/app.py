"""FastAPI application serving the web chat API."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

import psutil
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travel_agent.ai.client import AIClientError, AIErrorKind
from travel_agent.ai.handler import MessageHandler
from travel_agent.core.state import AppState
from travel_agent.core.types import Platform
from travel_agent.log import get_logger, mask_user_id
from travel_agent.utils.validation import MessageValidationError
from travel_agent.web.schemas import ChatRequest, ChatResponse, ClearResponse, ErrorResponse
from travel_agent.web.ratelimit import RateLimitExceeded, SlidingWindowLimiter

logger = get_logger(__name__)

__version__ = "0.1.0"

AI_ERROR_STATUS = {
    AIErrorKind.RATE_LIMITED: 429,
    AIErrorKind.UPSTREAM_UNAVAILABLE: 503,
}

router = APIRouter()


def _state(request: Request) -> AppState:
    return request.app.state.travel


def _handler(request: Request) -> MessageHandler:
    return request.app.state.handler


def _user_id(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def _chat_rate_limit(request: Request) -> None:
    request.app.state.chat_limiter.hit(_user_id(request))


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(_chat_rate_limit)],
)
async def chat(body: ChatRequest, request: Request) -> ChatResponse:
    reply = await _handler(request).handle_message(Platform.WEB, _user_id(request), body.message)
    return ChatResponse(response=reply.text, usage=reply.usage)


@router.post("/api/clear", response_model=ClearResponse)
async def clear(request: Request) -> ClearResponse:
    _state(request).store.clear_conversation(Platform.WEB, _user_id(request))
    logger.info("conversation_cleared", platform="web", user=mask_user_id(_user_id(request)))
    return ClearResponse(success=True, message="Conversation cleared")


@router.get("/api/stats")
async def stats(request: Request) -> dict[str, Any]:
    state = _state(request)
    state.metrics.update_active_conversations(len(state.store))
    return {
        "conversations": state.store.get_stats(),
        "tools": state.tools.availability(),
        "services": state.recovery.get_service_status(),
        "metrics": state.metrics.snapshot(),
    }


@router.post("/api/metrics/reset")
async def reset_metrics(request: Request) -> dict[str, Any]:
    _state(request).metrics.reset()
    logger.info("metrics_reset")
    return {"success": True, "message": "Metrics reset"}


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(_state(request).uptime, 1),
        "memory": _memory_usage(),
        "version": __version__,
    }


def _memory_usage() -> dict[str, float]:
    """Resident and virtual size of this process, in MB."""
    info = psutil.Process().memory_info()
    return {"rss_mb": round(info.rss / 1024 / 1024, 1), "vms_mb": round(info.vms / 1024 / 1024, 1)}


async def _validation_error(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("chat_validation_failed", path=request.url.path, error=str(exc))
    if isinstance(exc, RequestValidationError):
        detail = exc.errors()[0].get("msg", "invalid request") if exc.errors() else "invalid request"
        return JSONResponse(status_code=400, content={"error": f"Invalid message: {detail}"})
    return JSONResponse(status_code=400, content={"error": f"Invalid message: {exc}"})


async def _ai_error(request: Request, exc: AIClientError) -> JSONResponse:
    logger.error("chat_ai_error", path=request.url.path, kind=exc.kind.value, error=str(exc))
    return JSONResponse(status_code=AI_ERROR_STATUS.get(exc.kind, 500), content={"error": str(exc)})


async def _rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"error": str(exc)})


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": "Failed to process your request"})


def create_app(state: AppState, handler: MessageHandler) -> FastAPI:
    """Build the FastAPI app around an already-constructed AppState.

    Lifecycle of the state belongs to the caller, so no lifespan hook is set.
    """
    web = state.config.web
    app = FastAPI(title="Travel Agent Bot", version=__version__)
    app.state.travel = state
    app.state.handler = handler
    app.state.api_limiter = SlidingWindowLimiter(
        "api",
        limit=web.rate_limit_max_requests,
        window=web.rate_limit_window_seconds,
        message="Too many requests, please try again later",
    )
    app.state.chat_limiter = SlidingWindowLimiter(
        "chat",
        limit=web.chat_rate_limit_max_requests,
        window=web.chat_rate_limit_window_seconds,
        message="Too many chat requests, please slow down",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_requests(request: Request, call_next):
        start = time.monotonic()
        api_limiter: SlidingWindowLimiter = app.state.api_limiter
        if request.url.path.startswith("/api/") and not api_limiter.check(_user_id(request)):
            state.metrics.record_request(request.url.path, time.monotonic() - start, success=False)
            return JSONResponse(status_code=429, content={"error": api_limiter.message})
        try:
            response = await call_next(request)
        except Exception:
            state.metrics.record_request(request.url.path, time.monotonic() - start, success=False)
            raise
        duration = time.monotonic() - start
        state.metrics.record_request(request.url.path, duration, success=response.status_code < 400)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response

    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(MessageValidationError, _validation_error)
    app.add_exception_handler(AIClientError, _ai_error)
    app.add_exception_handler(RateLimitExceeded, _rate_limited)
    app.add_exception_handler(Exception, _unhandled_error)
    app.include_router(router)
    return app
