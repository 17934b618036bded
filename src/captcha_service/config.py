"""Captcha Service — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Server ────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8080

    # ── Captcha lifecycle ─────────────────────────────────
    code_ttl_seconds: int = 300
    cooldown_seconds: int = 60

    # Debug only: writes plaintext codes to the log. Never enable in production.
    log_codes: bool = False

    # ── CORS ──────────────────────────────────────────────
    cors_allow_origin: str = "*"

    # ── Client ────────────────────────────────────────────
    service_base_url: str = "http://localhost:8080"

    # ── App ───────────────────────────────────────────────
    app_name: str = "Captcha Service"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton settings instance
settings = Settings()
