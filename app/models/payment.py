"""SQLAlchemy models for the payment gateway."""

import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import urlencode

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from app.config import settings
from app.models.enums import PaymentStatus


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class Payment(Base):
    """
    A purchase attempt owned by the host application.

    Created as pending before the customer is sent to the gateway. The
    gateway sets transaction_id once the provider has accepted the payment
    and flips the status to completed when the provider reports it paid.
    Records are never deleted.
    """

    __tablename__ = "payments"

    id = Column(String(12), primary_key=True, default=_new_id)
    gateway = Column(String(50), nullable=False, default="mollie")
    currency = Column(String(3), nullable=False)
    amount = Column(Numeric(14, 4, asdecimal=True), nullable=False)
    description = Column(String(255), nullable=False, default="")
    success_redirect = Column(String(500), nullable=False)
    cancel_redirect = Column(String(500), nullable=False)

    # Provider state
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    transaction_id = Column(String(100), nullable=True, unique=True)
    provider_payload = Column(Text, nullable=True)  # JSON of the provider's "paid" response
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    audit_logs = relationship("AuditLog", back_populates="payment", lazy="raise")

    def total(self) -> Decimal:
        return Decimal(self.amount)

    def is_paid(self) -> bool:
        return self.status == PaymentStatus.COMPLETED.value

    def success_url(self) -> str:
        return self.success_redirect

    def cancel_url(self) -> str:
        return self.cancel_redirect

    def redirect_url(self) -> str:
        """Where the customer lands after checkout; confirms the payment on arrival."""
        return self._gateway_url("callback")

    def webhook_url(self) -> str:
        """Server-to-server notification endpoint for status changes."""
        return self._gateway_url("webhook")

    def _gateway_url(self, action: str) -> str:
        base = settings.public_base_url.rstrip("/")
        query = urlencode({"payment_id": self.id})
        return f"{base}/api/gateways/{self.gateway}/{action}?{query}"


class GatewayConfigRecord(Base):
    """Stored configuration values for one installed gateway."""

    __tablename__ = "gateway_configs"

    identifier = Column(String(50), primary_key=True)
    values = Column(Text, nullable=False, default="{}")  # JSON object
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def config(self, key: str, default: Optional[Any] = None) -> Any:
        return json.loads(self.values or "{}").get(key, default)


class AuditLog(Base):
    """
    Immutable audit trail entry.

    Every gateway interaction (payment created at the provider, completion,
    failed confirmation) gets an entry. These are append-only and never
    modified.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_id = Column(String(12), ForeignKey("payments.id"), nullable=True, index=True)
    action = Column(String(50), nullable=False)
    details = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=_utcnow)

    payment = relationship("Payment", back_populates="audit_logs")
