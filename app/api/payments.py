"""
Payment endpoints.

POST /payments               — Create a pending payment record.
GET  /payments/{id}          — Get a single payment with full details.
GET  /payments/{id}/trace    — Full audit trail for a payment.
POST /payments/{id}/pay      — Create the payment at its gateway and redirect to checkout.
"""

import json
from decimal import Decimal
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import gateway_for, get_http_client
from app.audit.logger import log_event
from app.database import get_session
from app.gateways.errors import GatewayError
from app.gateways.registry import GATEWAYS
from app.models.enums import PaymentStatus
from app.models.payment import AuditLog, Payment

router = APIRouter(prefix="/payments", tags=["payments"])


class PaymentCreate(BaseModel):
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=4)
    currency: str = Field(pattern=r"^[A-Z]{3}$")
    description: str = Field(default="", max_length=255)
    success_url: str
    cancel_url: str
    gateway: str = "mollie"


class PaymentDetail(BaseModel):
    id: str
    gateway: str
    currency: str
    amount: str
    description: str
    status: str
    transaction_id: Optional[str]
    paid_at: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]

    model_config = {"from_attributes": True}


class AuditEntry(BaseModel):
    id: int
    action: str
    details: Optional[dict] = None
    timestamp: Optional[str]

    model_config = {"from_attributes": True}


class PaymentTrace(BaseModel):
    payment: PaymentDetail
    audit_trail: list[AuditEntry]


def _payment_to_detail(p: Payment) -> PaymentDetail:
    return PaymentDetail(
        id=p.id,
        gateway=p.gateway,
        currency=p.currency,
        amount=str(p.total()),
        description=p.description,
        status=p.status,
        transaction_id=p.transaction_id,
        paid_at=p.paid_at.isoformat() if p.paid_at else None,
        created_at=p.created_at.isoformat() if p.created_at else None,
        updated_at=p.updated_at.isoformat() if p.updated_at else None,
    )


async def _get_payment_or_404(session: AsyncSession, payment_id: str) -> Payment:
    payment = await session.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail=f"Payment not found: {payment_id}")
    return payment


@router.post("", response_model=PaymentDetail, status_code=201)
async def create_payment(body: PaymentCreate, session: AsyncSession = Depends(get_session)):
    """Create a pending payment record for a later checkout."""
    if body.gateway not in GATEWAYS:
        raise HTTPException(status_code=422, detail=f"Unknown gateway: {body.gateway}")

    payment = Payment(
        gateway=body.gateway,
        currency=body.currency,
        amount=body.amount,
        description=body.description,
        success_redirect=body.success_url,
        cancel_redirect=body.cancel_url,
        status=PaymentStatus.PENDING.value,
    )
    session.add(payment)
    await session.flush()
    await log_event(session, "payment_created", payment_id=payment.id, details={
        "gateway": payment.gateway,
        "currency": payment.currency,
        "amount": str(body.amount),
    })
    await session.commit()
    await session.refresh(payment)
    return _payment_to_detail(payment)


@router.get("/{payment_id}", response_model=PaymentDetail)
async def get_payment(payment_id: str, session: AsyncSession = Depends(get_session)):
    """Get a single payment with full details."""
    return _payment_to_detail(await _get_payment_or_404(session, payment_id))


@router.get("/{payment_id}/trace", response_model=PaymentTrace)
async def get_payment_trace(payment_id: str, session: AsyncSession = Depends(get_session)):
    """
    Full audit trail for a payment.

    Returns the payment details plus every audit log entry, ordered
    chronologically. Useful for checking what Mollie reported when a
    customer disputes a charge.
    """
    payment = await _get_payment_or_404(session, payment_id)

    result = await session.execute(
        select(AuditLog)
        .where(AuditLog.payment_id == payment_id)
        .order_by(AuditLog.timestamp.asc(), AuditLog.id.asc())
    )
    logs = result.scalars().all()

    audit_trail = []
    for log in logs:
        details = None
        if log.details:
            try:
                details = json.loads(log.details)
            except (json.JSONDecodeError, TypeError):
                details = {"raw": log.details}

        audit_trail.append(AuditEntry(
            id=log.id,
            action=log.action,
            details=details,
            timestamp=log.timestamp.isoformat() if log.timestamp else None,
        ))

    return PaymentTrace(
        payment=_payment_to_detail(payment),
        audit_trail=audit_trail,
    )


@router.post("/{payment_id}/pay")
async def pay(
    payment_id: str,
    session: AsyncSession = Depends(get_session),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """Create the payment at the provider and send the customer to its checkout."""
    payment = await _get_payment_or_404(session, payment_id)
    if payment.is_paid():
        raise HTTPException(status_code=409, detail=f"Payment already completed: {payment_id}")

    gateway = await gateway_for(payment.gateway, session, http_client)
    try:
        target = await gateway.initiate(payment)
    except GatewayError as e:
        await log_event(session, "initiate_failed", payment_id=payment_id, details={
            "error": str(e),
            "type": type(e).__name__,
        })
        await session.commit()
        raise

    return RedirectResponse(target.url, status_code=303)
