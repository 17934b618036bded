"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from captcha_service.api import exception_handlers
from captcha_service.api.router import router as captcha_router
from captcha_service.config import Settings, settings
from captcha_service.services.captcha_service import CaptchaService
from captcha_service.store.memory import InMemoryCaptchaStore

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    service: CaptchaService | None = None,
) -> FastAPI:
    """Build the application with its own store and service instance."""
    config = config or settings
    service = service or CaptchaService(InMemoryCaptchaStore(), config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle hook."""
        logger.info("Starting %s …", config.app_name)
        if config.log_codes:
            logger.warning("log_codes is enabled: plaintext captchas will be written to the log")
        yield
        logger.info("Shutting down %s …", config.app_name)
        service.store.clear()

    app = FastAPI(
        title=config.app_name,
        description="Issues and verifies short-lived phone verification codes",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.captcha_service = service

    exception_handlers.install(app, config)
    app.include_router(captcha_router)

    @app.get("/health")
    def health_check(request: Request):
        """Simple liveness probe."""
        return {
            "status": "healthy",
            "app": config.app_name,
            "active_codes": len(request.app.state.captcha_service.store),
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point; uvicorn exits non-zero if the port cannot be bound."""
    logger.info("Server starting on %s:%d …", settings.host, settings.port)
    uvicorn.run(
        "captcha_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
