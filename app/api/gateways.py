"""
Gateway endpoints.

GET  /gateways                         — Installed gateways and their config fields.
PUT  /gateways/{identifier}/config     — Store a gateway's configuration values.
GET  /gateways/{identifier}/callback   — Customer returns from checkout; confirm and redirect.
POST /gateways/{identifier}/webhook    — Provider status notification; confirm.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_gateway
from app.audit.logger import log_event
from app.database import get_session
from app.gateways.base import PaymentGateway, RedirectTarget
from app.gateways.errors import GatewayError, PaymentNotFoundError, UnexpectedStatusError
from app.gateways.registry import GATEWAYS
from app.stores.gateway_config import save_config

logger = logging.getLogger("mollie_gateway.api")

router = APIRouter(prefix="/gateways", tags=["gateways"])


class ConfigFieldInfo(BaseModel):
    name: str
    label: str
    description: str
    type: str
    required: bool


class GatewayInfo(BaseModel):
    identifier: str
    version: str
    currencies: list[str]
    config_fields: list[ConfigFieldInfo]


class GatewayConfigUpdate(BaseModel):
    values: dict[str, Any]


@router.get("", response_model=list[GatewayInfo])
async def list_gateways():
    """List installed gateways with the configuration they need."""
    return [
        GatewayInfo(
            identifier=identifier,
            version=gateway_cls.version,
            currencies=list(gateway_cls.currencies),
            config_fields=[
                ConfigFieldInfo(
                    name=name,
                    label=f.label,
                    description=f.description,
                    type=f.type,
                    required=f.required,
                )
                for name, f in gateway_cls.config_fields().items()
            ],
        )
        for identifier, gateway_cls in GATEWAYS.items()
    ]


@router.put("/{identifier}/config", status_code=204)
async def update_gateway_config(
    identifier: str,
    body: GatewayConfigUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Store configuration values. Required fields must be present and non-empty."""
    gateway_cls = GATEWAYS.get(identifier)
    if gateway_cls is None:
        raise HTTPException(status_code=404, detail=f"Gateway not found: {identifier}")

    missing = [
        name
        for name, f in gateway_cls.config_fields().items()
        if f.required and body.values.get(name) in (None, "")
    ]
    if missing:
        raise HTTPException(status_code=422, detail=f"Missing required fields: {', '.join(missing)}")

    await save_config(session, identifier, body.values)
    logger.info("Configuration updated for gateway %s", identifier)


async def _confirm(
    gateway: PaymentGateway,
    session: AsyncSession,
    params: dict[str, Any],
    source: str,
) -> RedirectTarget:
    try:
        return await gateway.confirm(params)
    except GatewayError as e:
        # Unknown ids have no payment row to attach the entry to.
        payment_id = None if isinstance(e, PaymentNotFoundError) else e.payment_id
        await log_event(session, "confirm_failed", payment_id=payment_id, details={
            "source": source,
            "requested_payment_id": params.get("payment_id"),
            "error": str(e),
            "type": type(e).__name__,
            "status": getattr(e, "status", None),
        })
        await session.commit()
        raise


@router.get("/{identifier}/callback")
async def callback(
    request: Request,
    gateway: PaymentGateway = Depends(get_gateway),
    session: AsyncSession = Depends(get_session),
):
    """Customer returns from the provider's checkout."""
    target = await _confirm(gateway, session, dict(request.query_params), "callback")
    return RedirectResponse(target.url, status_code=303)


@router.post("/{identifier}/webhook")
async def webhook(
    request: Request,
    gateway: PaymentGateway = Depends(get_gateway),
    session: AsyncSession = Depends(get_session),
):
    """
    Provider notifies a status change. The payment id travels in the query string.

    Statuses other than paid (open, canceled, expired, ...) are audited and
    acknowledged with 200; Mollie redelivers anything answered with non-2xx.
    """
    try:
        await _confirm(gateway, session, dict(request.query_params), "webhook")
    except UnexpectedStatusError as e:
        logger.info("Webhook for payment %s acknowledged with status %s", e.payment_id, e.status)
        return {"status": "acknowledged", "payment_status": e.status}
    return {"status": "ok"}
