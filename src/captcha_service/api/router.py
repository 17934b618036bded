"""Captcha API router.

Endpoints
---------
POST    /api/send-captcha     → issue a code for a phone number
POST    /api/verify-captcha   → check and consume a code
OPTIONS /api/send-captcha     → CORS preflight
OPTIONS /api/verify-captcha   → CORS preflight
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, StrictStr, ValidationError

from captcha_service.services.captcha_service import CaptchaService
from captcha_service.services.errors import MalformedBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["captcha"])

SEND_PATH = "/send-captcha"
VERIFY_PATH = "/verify-captcha"


# ── Request / response models ────────────────────────────
# JSON ``null`` and missing fields both read as the empty string.

class SendCaptchaRequest(BaseModel):
    phone: StrictStr | None = None

    @property
    def phone_text(self) -> str:
        return self.phone or ""


class VerifyCaptchaRequest(BaseModel):
    phone: StrictStr | None = None
    code: StrictStr | None = None

    @property
    def phone_text(self) -> str:
        return self.phone or ""

    @property
    def code_text(self) -> str:
        return self.code or ""


class CaptchaResponse(BaseModel):
    code: int = 0
    msg: str


# ── Dependencies ─────────────────────────────────────────

def get_captcha_service(request: Request) -> CaptchaService:
    """Return the service instance created by the application factory."""
    return request.app.state.captcha_service


def _decode(model: type[BaseModel], raw: bytes):
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        logger.debug("Undecodable request body: %s", exc.errors())
        raise MalformedBody() from exc


async def send_request_body(request: Request) -> SendCaptchaRequest:
    """Decode the body as JSON whatever the Content-Type header says."""
    return _decode(SendCaptchaRequest, await request.body())


async def verify_request_body(request: Request) -> VerifyCaptchaRequest:
    return _decode(VerifyCaptchaRequest, await request.body())


# ── Endpoints ────────────────────────────────────────────
# Plain ``def`` handlers: Starlette runs each request on a pool thread.

@router.post(SEND_PATH, response_model=CaptchaResponse)
def send_captcha(
    body: SendCaptchaRequest = Depends(send_request_body),
    service: CaptchaService = Depends(get_captcha_service),
):
    """Issue a code for the given phone number.

    The code is not returned; in a real deployment it would go out by SMS.
    """
    service.issue(body.phone_text)
    return CaptchaResponse(msg="Captcha sent successfully")


@router.post(VERIFY_PATH, response_model=CaptchaResponse)
def verify_captcha(
    body: VerifyCaptchaRequest = Depends(verify_request_body),
    service: CaptchaService = Depends(get_captcha_service),
):
    """Validate and consume a code for the given phone number."""
    service.verify(body.phone_text, body.code_text)
    return CaptchaResponse(msg="Captcha verified successfully")


@router.options(SEND_PATH)
@router.options(VERIFY_PATH)
def preflight() -> Response:
    return Response(status_code=200)
