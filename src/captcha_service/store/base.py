"""Base store — abstract interface every captcha store must implement."""

from abc import ABC, abstractmethod

from captcha_service.models.captcha import CodeEntry


class CaptchaStore(ABC):
    """Abstract mapping of phone number → :class:`CodeEntry`.

    Implementations must make ``get`` / ``set`` / ``delete`` atomic with
    respect to each other.  One entry per phone; ``set`` overwrites.
    """

    @abstractmethod
    def get(self, phone: str) -> CodeEntry | None:
        """Return the entry stored for *phone*, or ``None``."""

    @abstractmethod
    def set(self, phone: str, entry: CodeEntry) -> None:
        """Store *entry* for *phone*, replacing any previous one."""

    @abstractmethod
    def delete(self, phone: str) -> None:
        """Remove the entry for *phone*.  Missing keys are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of entries currently held (expired ones included)."""
