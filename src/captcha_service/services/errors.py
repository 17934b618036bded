"""Captcha error taxonomy.

Every error is request-local and terminal: the HTTP layer turns it into a
plain-text response carrying ``status_code`` and ``message``.
"""

from __future__ import annotations


class CaptchaError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 400
    message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MalformedBody(CaptchaError):
    message = "Invalid request body"


class InvalidIdentifier(CaptchaError):
    message = "Invalid phone number"


class InvalidCodeShape(CaptchaError):
    message = "Captcha must be 6 digits"


class CooldownActive(CaptchaError):
    status_code = 429
    message = "Too many requests, please try again later"


class NotFound(CaptchaError):
    message = "Captcha not found"


class Expired(CaptchaError):
    message = "Captcha expired"


class Mismatch(CaptchaError):
    message = "Invalid captcha"


class MethodNotAllowed(CaptchaError):
    status_code = 405
    message = "Method not allowed"
