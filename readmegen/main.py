"""
FastAPI application — README generator relay.

Endpoints:
    GET  /health                     → {"status": "ok"}
    POST /api/generate-from-files    → GenerateResponse
    POST /api/generate-from-github   → GenerateResponse

Run with ``readmegen serve`` or
``uvicorn readmegen.main:create_app --factory``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from readmegen.errors import InputValidationError, ProviderError
from readmegen.llm_client import LLMClient
from readmegen.logging_config import new_request_id, request_id_ctx, setup_logging
from readmegen.models import (
    ErrorResponse,
    GenerateFromFilesRequest,
    GenerateResponse,
    GithubRef,
)
from readmegen.relay import ReadmeRelay
from readmegen.settings import Settings

logger = logging.getLogger("readmegen.main")

router = APIRouter()


# ── Error helpers ──────────────────────────────────────────────
def _error_response(status: int, message: str, details: str | None = None) -> JSONResponse:
    """Return {"error": "...", "details": "..."} with ``details`` omitted when empty."""
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def _describe_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc or 'body'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = _describe_validation_errors(exc.errors())
    logger.info("Rejected %s body: %s", request.url.path, details)
    return _error_response(400, "Invalid request body", details=details)


async def _run_generation(operation: Awaitable[str]) -> GenerateResponse | JSONResponse:
    try:
        readme = await operation
    except InputValidationError as exc:
        return _error_response(400, str(exc))
    except ProviderError as exc:
        logger.exception("README generation failed")
        cause = exc.__cause__
        return _error_response(500, str(exc), details=repr(cause) if cause else None)
    except Exception as exc:
        logger.exception("Unexpected error generating README")
        return _error_response(500, "Something went wrong", details=str(exc))
    return GenerateResponse(readme=readme)


# ── Middleware: request_id + timing ────────────────────────────
async def request_context_middleware(request: Request, call_next):
    rid = new_request_id()
    request_id_ctx.set(rid)
    t0 = time.perf_counter()
    response = await call_next(request)
    elapsed = round((time.perf_counter() - t0) * 1000, 1)
    response.headers["X-Request-Id"] = rid
    logger.info(
        "%s %s → %s (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


# ── Endpoints ──────────────────────────────────────────────────
def get_relay(request: Request) -> ReadmeRelay:
    return request.app.state.relay


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/api/generate-from-files", response_model=GenerateResponse)
async def generate_from_files(
    body: GenerateFromFilesRequest, relay: ReadmeRelay = Depends(get_relay)
):
    return await _run_generation(relay.generate_from_files(body.files))


@router.post("/api/generate-from-github", response_model=GenerateResponse)
async def generate_from_github(body: GithubRef, relay: ReadmeRelay = Depends(get_relay)):
    return await _run_generation(relay.generate_from_github(body))


# ── Factory ────────────────────────────────────────────────────
def create_app(
    settings: Settings | None = None, llm_client: LLMClient | None = None
) -> FastAPI:
    """Build the relay app.

    Raises ``ConfigurationError`` when no provider credential is configured,
    so a misconfigured server never starts listening.
    """
    settings = settings or Settings()
    settings.require_api_key()
    relay = ReadmeRelay(llm_client or LLMClient(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        logger.info(
            "Relay started (model=%s, cors_origin=%s)",
            settings.llm_model, settings.cors_origin,
        )
        yield
        await relay.aclose()
        logger.info("Relay shutdown")

    app = FastAPI(
        title="README Generator Relay",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.relay = relay

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(router)
    return app
