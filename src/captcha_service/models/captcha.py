"""Captcha entry value object."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CodeEntry:
    """A verification code issued for one phone number.

    ``issued_at`` drives the re-issue cooldown, ``expires_at`` the validity
    window.  Both are timezone-aware UTC timestamps.
    """

    code: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def __repr__(self) -> str:
        # Keep the code itself out of reprs that end up in logs.
        return f"<CodeEntry issued_at={self.issued_at.isoformat()} expires_at={self.expires_at.isoformat()}>"
