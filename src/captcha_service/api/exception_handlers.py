"""Maps errors to plain-text responses and stamps CORS headers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from captcha_service.config import Settings
from captcha_service.services.errors import CaptchaError, MethodNotAllowed

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"


def _plain(error: CaptchaError) -> PlainTextResponse:
    return PlainTextResponse(error.message, status_code=error.status_code)


async def captcha_error_handler(request: Request, exc: CaptchaError) -> PlainTextResponse:
    logger.info("%s %s rejected: %s (%d)", request.method, request.url.path, exc.message, exc.status_code)
    return _plain(exc)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    if exc.status_code == 405:
        logger.info("%s %s rejected: method not allowed", request.method, request.url.path)
        error = MethodNotAllowed()
        return PlainTextResponse(error.message, status_code=error.status_code, headers=exc.headers)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def install(app: FastAPI, config: Settings) -> None:
    """Register error handlers and the CORS header middleware on *app*."""
    app.add_exception_handler(CaptchaError, captcha_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    cors_headers = {
        "Access-Control-Allow-Origin": config.cors_allow_origin,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
    }

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(cors_headers)
        return response
