import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request

from .core.database import close_db, init_db
from .core.logging_config import configure_logging
from .features.auth.router import router as auth_router
from .features.reports.exceptions import ReportError
from .features.reports.router import report_error_handler, router as reports_router

logger = logging.getLogger("home_inventory.main")  # This logger will inherit from 'home_inventory'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events, such as connecting to the database.
    """
    configure_logging()
    logger.info("Starting application...")
    await init_db()
    logger.info("Database tables are ready.")

    yield

    await close_db()
    logger.info("Database connections have been closed.")


app = FastAPI(
    title="Home Inventory API",
    description="API for access-scoped home inventory reports.",
    version="0.1.0",
    exception_handlers={ReportError: report_error_handler},
    lifespan=lifespan,
)


@app.get("/")
async def read_root(request: Request):
    """
    Root endpoint for the API.
    """
    client_host = request.client.host if request.client else "unknown client"
    logger.info(f"Root endpoint '/' accessed by {client_host}")
    return {"message": "Welcome to the Home Inventory API!"}


# Include your routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("home_inventory.main:app", host="0.0.0.0", port=8000, reload=True)
