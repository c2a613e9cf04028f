"""Installed gateways, keyed by identifier."""

import httpx

from app.gateways.base import GatewayConfig, PaymentGateway, PaymentRecordStore
from app.gateways.mollie import MollieGateway

GATEWAYS: dict[str, type[PaymentGateway]] = {
    MollieGateway.identifier: MollieGateway,
}


def build_gateway(
    identifier: str,
    http_client: httpx.AsyncClient,
    store: PaymentRecordStore,
    config: GatewayConfig,
) -> PaymentGateway:
    """Instantiate the gateway registered under ``identifier``. Raises KeyError if unknown."""
    gateway_cls = GATEWAYS[identifier]
    return gateway_cls(http_client, store, config)
