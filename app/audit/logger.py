"""
Immutable audit trail for gateway operations.

Every provider interaction gets an append-only audit log entry with:
  - Payment ID (which local payment record)
  - Action (what happened)
  - Details (provider ids, statuses, error messages)
  - Timestamp (UTC)

These records are never modified or deleted, so a disputed payment can
always be traced back to what the provider told us.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payment import AuditLog

logger = logging.getLogger("mollie_gateway.audit")


async def log_event(
    session: AsyncSession,
    action: str,
    payment_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> AuditLog:
    """
    Create an immutable audit log entry.

    Args:
        session: Database session.
        action: What happened (e.g. "provider_payment_created", "payment_completed").
        payment_id: The local payment this event relates to.
        details: Arbitrary context (serialized to JSON).

    Returns:
        The created AuditLog record (added to the session, not committed).
    """
    entry = AuditLog(
        payment_id=payment_id,
        action=action,
        details=json.dumps(details, default=str) if details else None,
        timestamp=datetime.now(timezone.utc),
    )
    session.add(entry)
    logger.info(
        "AUDIT | payment=%s action=%s | %s",
        payment_id or "-",
        action,
        json.dumps(details, default=str)[:200] if details else "",
    )
    return entry
