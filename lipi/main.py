import logging
from fastapi import FastAPI
from lipi.api.routes import health_router, router as api_router
from lipi.core.config import settings
from lipi.core.logging import configure_logging
from lipi.middleware.request_id import RequestIDMiddleware
from lipi.middleware.metrics import MetricsMiddleware
from lipi.middleware.auth import AuthMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Lipi Bridge", version="1.0.0")

    # added last runs first: request id is set before metrics and auth read it
    app.add_middleware(AuthMiddleware, client_registry=settings.CLIENT_REGISTRY, max_per_minute=settings.RATE_LIMIT_PER_MIN)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    logging.info("lipi_starting port=%s clients=%d", settings.PORT, len(settings.CLIENT_REGISTRY))

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
