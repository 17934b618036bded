"""Tests for CaptchaService — issue / verify rules and the entry lifecycle."""

import logging
from datetime import UTC, datetime, timedelta

import pytest

from captcha_service.config import Settings
from captcha_service.services.captcha_service import (
    CaptchaService,
    generate_code,
    is_valid_phone,
)
from captcha_service.services.errors import (
    CooldownActive,
    Expired,
    InvalidCodeShape,
    InvalidIdentifier,
    Mismatch,
    NotFound,
)
from captcha_service.store.memory import InMemoryCaptchaStore

PHONE = "13800138000"


class FakeClock:
    """Controllable clock; advance it instead of sleeping."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryCaptchaStore()


@pytest.fixture
def service(store, clock):
    return CaptchaService(store, Settings(), clock=clock)


def _wrong(code: str) -> str:
    return "000000" if code != "000000" else "111111"


# ──────────────────────────────────────────────────────────
# Phone shape and code generation
# ──────────────────────────────────────────────────────────
@pytest.mark.parametrize("phone", ["13800138000", "19912345678", "15000000000"])
def test_valid_phones(phone):
    assert is_valid_phone(phone)


@pytest.mark.parametrize(
    "phone",
    ["", "12800138000", "1380013800", "138001380000", "23800138000", "1380013800a", "+8613800138000"],
)
def test_invalid_phones(phone):
    assert not is_valid_phone(phone)


def test_generated_codes_are_six_digits():
    for _ in range(500):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


# ──────────────────────────────────────────────────────────
# Issue
# ──────────────────────────────────────────────────────────
def test_issue_stores_entry(service, store, clock):
    entry = service.issue(PHONE)

    stored = store.get(PHONE)
    assert stored == entry
    assert len(stored.code) == 6 and stored.code.isdigit()
    assert stored.issued_at == clock.now
    assert stored.expires_at == clock.now + timedelta(minutes=5)


def test_issue_trims_whitespace(service, store):
    service.issue(f"  {PHONE}\n")
    assert store.get(PHONE) is not None


@pytest.mark.parametrize("phone", ["", "abc", "12345678901", "1380013800"])
def test_issue_rejects_invalid_phone(service, store, phone):
    with pytest.raises(InvalidIdentifier):
        service.issue(phone)
    assert len(store) == 0


def test_issue_within_cooldown_rejected(service, store, clock):
    first = service.issue(PHONE)
    clock.advance(seconds=59)

    with pytest.raises(CooldownActive):
        service.issue(PHONE)
    assert store.get(PHONE) == first


def test_reissue_after_cooldown_overwrites(store, clock):
    codes = iter(["111111", "222222"])
    service = CaptchaService(store, Settings(), clock=clock, code_factory=lambda: next(codes))

    service.issue(PHONE)
    clock.advance(seconds=61)
    second = service.issue(PHONE)

    assert second.code == "222222"
    assert store.get(PHONE).code == "222222"
    assert store.get(PHONE).expires_at == clock.now + timedelta(minutes=5)


def test_reissue_after_expiry_allowed(service, clock):
    service.issue(PHONE)
    clock.advance(minutes=10)
    service.issue(PHONE)


def test_issue_does_not_log_code_by_default(store, clock, caplog):
    service = CaptchaService(store, Settings(), clock=clock, code_factory=lambda: "975312")
    with caplog.at_level(logging.INFO, logger="captcha_service"):
        service.issue(PHONE)
    assert PHONE in caplog.text
    assert "975312" not in caplog.text


def test_issue_logs_code_when_enabled(store, clock, caplog):
    service = CaptchaService(store, Settings(log_codes=True), clock=clock)
    with caplog.at_level(logging.INFO, logger="captcha_service"):
        entry = service.issue(PHONE)
    assert entry.code in caplog.text


# ──────────────────────────────────────────────────────────
# Verify
# ──────────────────────────────────────────────────────────
def test_verify_success_consumes_entry(service, store):
    entry = service.issue(PHONE)

    service.verify(PHONE, entry.code)
    assert store.get(PHONE) is None

    with pytest.raises(NotFound):
        service.verify(PHONE, entry.code)


def test_verify_trims_inputs(service, store):
    entry = service.issue(PHONE)
    service.verify(f" {PHONE} ", f" {entry.code}\t")
    assert store.get(PHONE) is None


@pytest.mark.parametrize("phone", ["", "1380013800", "10000000000"])
def test_verify_rejects_invalid_phone(service, phone):
    with pytest.raises(InvalidIdentifier):
        service.verify(phone, "123456")


@pytest.mark.parametrize("code", ["", "12345", "1234567", "1"])
def test_verify_rejects_wrong_length_before_lookup(service, code):
    with pytest.raises(InvalidCodeShape):
        service.verify(PHONE, code)


def test_verify_only_checks_code_length(service, store):
    entry = service.issue(PHONE)
    with pytest.raises(Mismatch):
        service.verify(PHONE, "abcdef")
    assert store.get(PHONE) == entry


def test_verify_not_found(service):
    with pytest.raises(NotFound):
        service.verify(PHONE, "123456")


def test_verify_mismatch_keeps_entry(service, store):
    entry = service.issue(PHONE)
    for _ in range(3):
        with pytest.raises(Mismatch):
            service.verify(PHONE, _wrong(entry.code))
    assert store.get(PHONE) == entry

    service.verify(PHONE, entry.code)
    assert store.get(PHONE) is None


def test_verify_at_expiry_boundary_succeeds(service, store, clock):
    entry = service.issue(PHONE)
    clock.advance(minutes=5)
    service.verify(PHONE, entry.code)


def test_verify_expired_removes_entry(service, store, clock):
    entry = service.issue(PHONE)
    clock.advance(minutes=5, seconds=1)

    with pytest.raises(Expired):
        service.verify(PHONE, entry.code)
    assert store.get(PHONE) is None

    with pytest.raises(NotFound):
        service.verify(PHONE, entry.code)


def test_full_scenario(service, store, clock):
    issued_at = clock.now
    entry = service.issue(PHONE)
    assert store.get(PHONE).expires_at == issued_at + timedelta(minutes=5)

    with pytest.raises(Mismatch):
        service.verify(PHONE, _wrong(entry.code))
    assert store.get(PHONE) is not None

    service.verify(PHONE, entry.code)
    assert store.get(PHONE) is None

    with pytest.raises(NotFound):
        service.verify(PHONE, entry.code)


def test_custom_timings(store, clock):
    service = CaptchaService(store, Settings(code_ttl_seconds=30, cooldown_seconds=10), clock=clock)
    entry = service.issue(PHONE)
    assert entry.expires_at == clock.now + timedelta(seconds=30)

    clock.advance(seconds=11)
    service.issue(PHONE)
