import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hybrid_app.config import settings
from hybrid_app.api.v1 import calculations, catalog, load_profiles, projects, reports
from hybrid_app.core.logging import RequestLoggingMiddleware, setup_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json, level=settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        debug=settings.debug,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(catalog.router, prefix="/api/v1/catalog", tags=["catalog"])
    application.include_router(
        load_profiles.router, prefix="/api/v1/load-profiles", tags=["load-profiles"]
    )
    application.include_router(
        calculations.router, prefix="/api/v1/calculations", tags=["calculations"]
    )
    application.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])
    application.include_router(projects.router, prefix="/api/v1/projects", tags=["projects"])

    @application.get("/health")
    async def health_check() -> dict:
        result: dict = {"status": "ok", "services": {}}

        try:
            import redis

            r = redis.from_url(settings.redis_url, socket_connect_timeout=1)
            r.ping()
            result["services"]["redis"] = "ok"
        except Exception as e:
            logger.warning("Redis health check failed: %s", e)
            result["services"]["redis"] = f"error: {e}"
            result["status"] = "degraded"

        return result

    logger.info("%s started (%s)", settings.app_name, settings.environment)
    return application


app = create_app()
