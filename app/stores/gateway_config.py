"""Loading and saving gateway configuration."""

import json
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.gateways.base import GatewayConfig, StaticGatewayConfig
from app.models.payment import GatewayConfigRecord


def default_config(identifier: str) -> GatewayConfig:
    """Configuration taken from the environment when nothing is stored."""
    if identifier == "mollie":
        return StaticGatewayConfig({
            "api_key": settings.mollie_api_key,
            "webhook_enabled": settings.mollie_webhook_enabled,
        })
    return StaticGatewayConfig()


async def load_config(session: AsyncSession, identifier: str) -> GatewayConfig:
    record = await session.get(GatewayConfigRecord, identifier)
    if record is None:
        return default_config(identifier)
    return record


async def save_config(
    session: AsyncSession,
    identifier: str,
    values: Mapping[str, Any],
) -> GatewayConfigRecord:
    record = await session.get(GatewayConfigRecord, identifier)
    if record is None:
        record = GatewayConfigRecord(identifier=identifier)
        session.add(record)
    record.values = json.dumps(dict(values))
    await session.commit()
    return record
