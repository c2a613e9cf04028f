"""
Mollie Gateway — redirect checkout against the Mollie Payments API.

Creates payments at Mollie, sends customers to Mollie's hosted checkout and
completes the local payment record when Mollie reports it paid, with an
append-only audit trail of every provider interaction.

Start the server:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.gateways import router as gateways_router
from app.api.health import router as health_router
from app.api.payments import router as payments_router
from app.config import settings
from app.database import dispose_db, init_db
from app.gateways.errors import GatewayError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("mollie_gateway.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and the outbound HTTP client."""
    await init_db()
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        app.state.http_client = client
        yield
    await dispose_db()


app = FastAPI(
    title="Mollie Gateway",
    description=(
        "Payment gateway bridging local payment records to Mollie's hosted checkout, "
        "with idempotent status confirmation and an immutable audit trail."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


app.include_router(health_router)
app.include_router(payments_router, prefix="/api")
app.include_router(gateways_router, prefix="/api")
