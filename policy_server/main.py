from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.admin import router as admin_router
from .api.health import router as health_router
from .api.policies import router as policies_router
from .api.prometheus import router as prometheus_router
from .config import Settings, load_settings
from .db import Database
from .errors import PolicyServerError
from .logging_config import setup_logging
from .middleware import TracingMiddleware
from .services.admin import AdminService
from .services.composer import PolicyComposer
from .services.signer import EnvelopeSigner
from .services.store import PolicyStore

DEFAULT_TENANT_ID = "default"

# Prefix used by earlier deployments of the service; kept as an alias
LEGACY_PREFIX = "/api"

logger = logging.getLogger("policy_server")


def run_migrations(database_url: str) -> None:
    from alembic import command
    from alembic.config import Config

    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")
    logger.info("Alembic auto-migrate: upgrade head OK", extra={"component": "db"})


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings: Settings = application.state.settings
    database: Database = application.state.database

    logger.info("Policy server starting up", extra={"component": "api", "version": __version__})

    if settings.auto_migrate:
        run_migrations(settings.database_url)
    database.init_schema()

    if settings.seed_default_tenant and application.state.store.ensure_tenant_exists(DEFAULT_TENANT_ID):
        logger.info("Seeded tenant %s", DEFAULT_TENANT_ID, extra={"component": "db"})

    if settings.uses_default_secrets:
        logger.warning("ADMIN_KEY or POLICY_HMAC_SECRET left at development default",
                       extra={"component": "api"})
    if not settings.admin_key:
        logger.warning("ADMIN_KEY is empty; admin endpoints will reject every request",
                       extra={"component": "api"})

    logger.info("Policy server ready", extra={
        "component": "api",
        "policy_ttl_seconds": settings.policy_ttl_seconds,
    })
    try:
        yield
    finally:
        logger.info("Policy server shutting down", extra={"component": "api"})
        database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)

    application = FastAPI(title="Tenant Policy Server", version=__version__, lifespan=lifespan)

    # Components are built once here and shared by reference; none hold request state
    database = Database(settings.database_url)
    store = PolicyStore(database)
    application.state.settings = settings
    application.state.database = database
    application.state.store = store
    application.state.composer = PolicyComposer(store)
    application.state.signer = EnvelopeSigner(settings.hmac_secret, settings.policy_ttl_seconds)
    application.state.admin = AdminService(store)

    if settings.cors_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type", "X-Admin-Key", "X-Request-ID"],
        )
    application.add_middleware(
        TracingMiddleware,
        exclude_paths=settings.log_exclude_paths,
        sample_rate=settings.log_sample_rate,
    )

    @application.exception_handler(PolicyServerError)
    async def handle_policy_server_error(request: Request, exc: PolicyServerError):
        return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

    @application.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        # Unusable bodies are a client error like a blank id: 400, not 422
        return JSONResponse({"detail": jsonable_encoder(exc.errors())}, status_code=400)

    for router in (health_router, policies_router, admin_router, prometheus_router):
        application.include_router(router)
    for router in (health_router, policies_router, admin_router):
        application.include_router(router, prefix=LEGACY_PREFIX, include_in_schema=False)

    return application


app = create_app()

# Server startup configuration
if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("APP_PORT", "8080"))
    logger.info(f"Starting policy server on port {port}")

    uvicorn.run(
        "policy_server.main:app",
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=port,
        reload=False,
        access_log=False,
    )
