"""
SQLAlchemy-backed payment record store.

Completion is a conditional UPDATE (only while the row is not yet
completed), so two near-simultaneous callbacks for the same payment
complete it at most once; the loser sees rowcount 0.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.audit.logger import log_event
from app.gateways.errors import DuplicateTransactionIdError
from app.models.enums import PaymentStatus
from app.models.payment import Payment

logger = logging.getLogger("mollie_gateway.store")


class SqlPaymentStore:
    """PaymentRecordStore over an async session. Each write commits."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find(self, payment_id: str) -> Optional[Payment]:
        return await self._session.get(Payment, payment_id)

    async def set_transaction_id(self, payment: Payment, transaction_id: str) -> None:
        payment_id = payment.id
        payment.transaction_id = transaction_id
        await log_event(self._session, "provider_payment_created", payment_id=payment_id, details={
            "gateway": payment.gateway,
            "transaction_id": transaction_id,
        })
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            await self._session.refresh(payment)
            logger.error("Transaction id %s already belongs to another payment", transaction_id)
            raise DuplicateTransactionIdError(
                f"Transaction id {transaction_id} is already stored on another payment",
                payment_id=payment_id,
            )

    async def mark_completed(
        self,
        payment: Payment,
        provider_id: str,
        payload: Mapping[str, Any],
    ) -> bool:
        now = datetime.now(timezone.utc)
        result = await self._session.execute(
            update(Payment)
            .where(Payment.id == payment.id)
            .where(Payment.status != PaymentStatus.COMPLETED.value)
            .values(
                status=PaymentStatus.COMPLETED.value,
                transaction_id=provider_id,
                provider_payload=json.dumps(dict(payload), default=str),
                paid_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        won = result.rowcount == 1

        if won:
            await log_event(self._session, "payment_completed", payment_id=payment.id, details={
                "transaction_id": provider_id,
                "status": payload.get("status"),
                "amount": payload.get("amount"),
            })
        else:
            logger.info("Payment %s already completed; completion skipped", payment.id)

        await self._session.commit()
        await self._session.refresh(payment)
        return won
