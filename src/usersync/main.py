"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.usersync.config import settings
from src.usersync.database import get_user_schema
from src.usersync.logging_config import configure_logging
from src.usersync.services import ClerkClient, set_clerk_client
from src.usersync.webhooks import router as webhooks_router

logger = logging.getLogger(__name__)

# Global Clerk client instance for cleanup
_clerk_client = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    global _clerk_client

    # Startup
    configure_logging(settings.log_level)

    if not settings.webhook_secret:
        logger.warning("WEBHOOK_SECRET is not set; webhook deliveries will fail until it is")
    if not settings.clerk_secret_key:
        logger.warning("CLERK_SECRET_KEY is not set; Clerk metadata updates will fail")

    schema = get_user_schema()
    logger.info(
        "User schema registered",
        extra={"table": schema.name, "unique_fields": list(schema.unique_fields)},
    )

    _clerk_client = ClerkClient(
        api_url=settings.clerk_api_url,
        secret_key=settings.clerk_secret_key,
        timeout=settings.clerk_timeout_seconds,
        max_retries=settings.clerk_max_retries,
    )
    set_clerk_client(_clerk_client)

    yield

    # Shutdown
    if _clerk_client is not None:
        try:
            await _clerk_client.close()
        except Exception as e:
            logger.error(f"Error during Clerk client cleanup: {e}", exc_info=True)
        set_clerk_client(None)
        _clerk_client = None


app = FastAPI(
    title="User Sync API",
    description="Keeps the local users table in sync with Clerk via webhooks",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(webhooks_router)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
