"""In-memory captcha store guarded by a reader-writer lock."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from captcha_service.models.captcha import CodeEntry
from captcha_service.store.base import CaptchaStore

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer.

    Once a writer is waiting, new readers queue behind it so a steady
    stream of reads cannot starve writes.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryCaptchaStore(CaptchaStore):
    """Process-local store keyed by phone number.

    Entries are never swept in the background; callers purge expired
    entries when they notice them.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CodeEntry] = {}
        self._lock = ReadWriteLock()

    def get(self, phone: str) -> CodeEntry | None:
        with self._lock.read():
            return self._entries.get(phone)

    def set(self, phone: str, entry: CodeEntry) -> None:
        with self._lock.write():
            self._entries[phone] = entry

    def delete(self, phone: str) -> None:
        with self._lock.write():
            self._entries.pop(phone, None)

    def clear(self) -> None:
        with self._lock.write():
            count = len(self._entries)
            self._entries.clear()
        logger.info("Captcha store cleared (%d entries dropped)", count)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
