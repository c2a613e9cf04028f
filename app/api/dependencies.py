"""FastAPI dependencies wiring gateways to their collaborators."""

import httpx
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.gateways.base import PaymentGateway
from app.gateways.registry import GATEWAYS, build_gateway
from app.stores.gateway_config import load_config
from app.stores.payment_store import SqlPaymentStore


def get_http_client(request: Request) -> httpx.AsyncClient:
    """The shared outbound client created in the app lifespan."""
    return request.app.state.http_client


async def gateway_for(
    identifier: str,
    session: AsyncSession,
    http_client: httpx.AsyncClient,
) -> PaymentGateway:
    if identifier not in GATEWAYS:
        raise HTTPException(status_code=404, detail=f"Gateway not found: {identifier}")
    config = await load_config(session, identifier)
    return build_gateway(identifier, http_client, SqlPaymentStore(session), config)


async def get_gateway(
    identifier: str,
    session: AsyncSession = Depends(get_session),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> PaymentGateway:
    return await gateway_for(identifier, session, http_client)
