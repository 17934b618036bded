"""Captcha service — issues and verifies phone verification codes."""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from captcha_service.config import Settings, settings as default_settings
from captcha_service.models.captcha import CodeEntry
from captcha_service.services.errors import (
    CooldownActive,
    Expired,
    InvalidCodeShape,
    InvalidIdentifier,
    Mismatch,
    NotFound,
)
from captcha_service.store.base import CaptchaStore

logger = logging.getLogger(__name__)

# Mainland China mobile number: 11 digits, 1 followed by 3-9.
PHONE_PATTERN = re.compile(r"^1[3-9][0-9]{9}$")

CODE_LENGTH = 6
EXPIRY_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_code() -> str:
    """Return a uniformly random code in ``[100000, 999999]``."""
    return str(100000 + secrets.randbelow(900000))


def is_valid_phone(phone: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone) is not None


class CaptchaService:
    """Issues and verifies short-lived codes over an injected store.

    Parameters
    ----------
    store:
        Where entries live.  Shared by every request handled by the app.
    config:
        Lifecycle timings and the ``log_codes`` debug switch.
    clock:
        Returns the current UTC time; replaced in tests.
    code_factory:
        Produces new codes; replaced in tests.
    """

    def __init__(
        self,
        store: CaptchaStore,
        config: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        code_factory: Callable[[], str] = generate_code,
    ) -> None:
        config = config or default_settings
        self._store = store
        self._clock = clock
        self._code_factory = code_factory
        self._ttl = timedelta(seconds=config.code_ttl_seconds)
        self._cooldown = timedelta(seconds=config.cooldown_seconds)
        self._log_codes = config.log_codes

    @property
    def store(self) -> CaptchaStore:
        return self._store

    # ── Issue ────────────────────────────────────────────

    def issue(self, phone: str) -> CodeEntry:
        """Generate and store a new code for *phone*.

        Raises ``InvalidIdentifier`` for a malformed phone number and
        ``CooldownActive`` when the previous code is younger than the
        cooldown.  The returned entry is for in-process callers only and
        must never be echoed back over the API.
        """
        phone = phone.strip()
        if not is_valid_phone(phone):
            raise InvalidIdentifier()

        now = self._clock()
        existing = self._store.get(phone)
        if existing is not None and existing.issued_at > now - self._cooldown:
            logger.info("Cooldown active for %s, rejecting re-issue", phone)
            raise CooldownActive()

        entry = CodeEntry(
            code=self._code_factory(),
            issued_at=now,
            expires_at=now + self._ttl,
        )
        self._store.set(phone, entry)

        expires = entry.expires_at.astimezone().strftime(EXPIRY_FORMAT)
        if self._log_codes:
            logger.warning(
                "[DEBUG log_codes] Captcha %s sent to %s (expires %s)",
                entry.code,
                phone,
                expires,
            )
        else:
            logger.info("Captcha sent to %s (expires %s)", phone, expires)
        return entry

    # ── Verify ───────────────────────────────────────────

    def verify(self, phone: str, code: str) -> None:
        """Check *code* against the stored entry and consume it on success.

        A mismatch leaves the entry in place; an expired entry is removed.
        Only the length of *code* is checked, not its digits.
        """
        phone = phone.strip()
        code = code.strip()

        if not is_valid_phone(phone):
            raise InvalidIdentifier()
        if len(code) != CODE_LENGTH:
            raise InvalidCodeShape()

        entry = self._store.get(phone)
        if entry is None:
            raise NotFound()

        if entry.is_expired(self._clock()):
            self._store.delete(phone)
            logger.info("Captcha expired for %s", phone)
            raise Expired()

        if not secrets.compare_digest(entry.code.encode(), code.encode()):
            logger.info("Captcha mismatch for %s", phone)
            raise Mismatch()

        self._store.delete(phone)
        logger.info("Captcha verified for %s", phone)
