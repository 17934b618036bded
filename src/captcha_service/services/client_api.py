"""Captcha API client — async HTTP wrapper around the captcha endpoints.

Used by the interactive simulator and by anything that needs to drive a
running captcha service.  ``base_url`` defaults to
``settings.service_base_url``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from captcha_service.config import settings

logger = logging.getLogger(__name__)


@dataclass
class CaptchaResult:
    """Outcome of one API call.

    ``status_code`` is ``0`` when the request never got a response.
    """

    ok: bool
    status_code: int
    message: str


class CaptchaClient:
    """Async HTTP wrapper around ``/api/send-captcha`` and ``/api/verify-captcha``."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.service_base_url).rstrip("/")
        self._transport = transport

    async def send_captcha(self, phone: str) -> CaptchaResult:
        """Ask the service to issue a code for *phone*."""
        return await self._post("/api/send-captcha", {"phone": phone})

    async def verify_captcha(self, phone: str, code: str) -> CaptchaResult:
        """Submit *code* for *phone*."""
        return await self._post("/api/verify-captcha", {"phone": phone, "code": code})

    async def _post(self, path: str, payload: dict) -> CaptchaResult:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.exception("Request to %s failed: %s", url, exc)
            return CaptchaResult(ok=False, status_code=0, message=str(exc))

        if resp.status_code == 200:
            data = resp.json()
            return CaptchaResult(ok=data.get("code") == 0, status_code=200, message=data.get("msg", ""))

        logger.info("%s rejected: %s %s", path, resp.status_code, resp.text)
        return CaptchaResult(ok=False, status_code=resp.status_code, message=resp.text.strip())
