"""PayProof API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PayProofError to structured JSON responses
    - CORS allow-list comes from settings (not hardcoded)
    - Services (stores, notifier, orchestrator) built once in the lifespan; a record store
      that stays unreachable after the startup retries aborts startup

Run with: uvicorn payproof.main:app --app-dir backend --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from payproof.api.error_handlers import register_error_handlers
from payproof.api.routes import health, payments
from payproof.config import get_settings
from payproof.infrastructure.observability import setup_logging
from payproof.infrastructure.wiring import build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.services = await build_services(settings)
    logger.info(
        f"PayProof API started; allowed CORS origins: {', '.join(settings.cors_origins)}",
    )
    yield
    logger.info("PayProof API shutting down")
    await app.state.services.close()


app = FastAPI(
    title="PayProof API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(payments.router)

# Local object store files are served from the same process
if settings.object_store_backend == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.local_upload_dir, check_dir=False),
        name="uploads",
    )
