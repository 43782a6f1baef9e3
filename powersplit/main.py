"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from powersplit.api.routes import bills, health, owners, properties, readings, stats
from powersplit.core.config import settings
from powersplit.core.database import Base, engine
from powersplit.core.logging import setup_logging

# Import models for Base.metadata.create_all - order matters for foreign keys
from powersplit.models import (
    property,  # noqa: F401
    owner,  # noqa: F401
    meter_reading,  # noqa: F401
    bill,  # noqa: F401
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    setup_logging()
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info(
        "%s %s started (unattributed cost policy: %s)",
        settings.PROJECT_NAME,
        settings.VERSION,
        settings.UNATTRIBUTED_COST_POLICY.value,
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Split shared electricity bills among the co-owners of a property",
    lifespan=lifespan,
)

# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(properties.router, prefix="/api")
app.include_router(owners.router, prefix="/api")
app.include_router(readings.router, prefix="/api")
app.include_router(bills.router, prefix="/api")
app.include_router(stats.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "powersplit.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
