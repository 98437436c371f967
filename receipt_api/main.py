import os

import sentry_sdk
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from receipt_api.config import Settings
from receipt_api.error_handlers import http_exception_handler, rate_limit_exceeded_handler, receipt_error_handler
from receipt_api.errors import ReceiptError
from receipt_api.logging_config import setup_logging
from receipt_api.middleware import RequestLoggingMiddleware
from receipt_api.ratelimit import limiter
from receipt_api.routes import receipts

logger = setup_logging()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    # Sentry
    if settings.sentry_dsn:
        # Disable the auto-detected OpenAI Agents integration due to
        # version incompatibility (sentry-sdk expects a different internal API)
        _disabled = []
        try:
            from sentry_sdk.integrations.openai_agents import OpenAIAgentsIntegration
            _disabled.append(OpenAIAgentsIntegration)
        except ImportError:
            pass
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=0.1,
            send_default_pii=False,
            environment=settings.app_env,
            disabled_integrations=_disabled,
        )

    app = FastAPI(title="Receipt API", version="0.1.0")
    app.state.settings = settings
    app.state.limiter = limiter
    app.add_exception_handler(ReceiptError, receipt_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Routes
    app.include_router(receipts.router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info(
        "Receipt API configured",
        extra={"extra_data": {"provider": settings.receipt_provider, "env": settings.app_env}},
    )
    return app


app = create_app()


def serve():
    """Run the API with uvicorn (`receipt-api` console script)."""
    uvicorn.run(
        "receipt_api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level="info",
    )
