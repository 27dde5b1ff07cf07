"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sling_ledger.config.settings import get_settings
from sling_ledger.config.logging_config import setup_logging
from sling_ledger.account_context import close_account_context
from sling_ledger.api.routers import (
    balance_router,
    rates_router,
    holdings_router,
    savings_router,
    split_router,
    activity_router,
    recurring_router,
)
from sling_ledger.core.exceptions import AppError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    yield
    # Shutdown
    close_account_context()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Ledger and currency conversion engine for the Sling wallet",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(balance_router)
app.include_router(rates_router)
app.include_router(holdings_router)
app.include_router(savings_router)
app.include_router(split_router)
app.include_router(activity_router)
app.include_router(recurring_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if isinstance(exc, NotFoundError) else 400
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
