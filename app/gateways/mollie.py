"""
Mollie payment gateway.

Redirect-based checkout against the Mollie Payments API (v2):

  1. ``initiate`` POSTs /payments, stores Mollie's payment id on the local
     record and sends the customer to Mollie's hosted checkout.
  2. ``confirm`` runs when the customer returns (or Mollie calls the
     webhook), GETs /payments/{id} and completes the record once Mollie
     reports it paid.

No call is retried; every failure surfaces to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from app.config import settings
from app.gateways.amounts import format_amount, validate_currency
from app.gateways.base import (
    ConfigField,
    GatewayConfig,
    PaymentGateway,
    PaymentRecord,
    PaymentRecordStore,
    RedirectTarget,
    require_config,
)
from app.gateways.errors import (
    MissingCheckoutUrlError,
    MissingTransactionIdError,
    PaymentNotFoundError,
    ProviderRequestError,
    UnexpectedStatusError,
)
from app.models.enums import ProviderStatus

logger = logging.getLogger("mollie_gateway.mollie")


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body; anything else reads as an empty resource."""
    try:
        payload = response.json()
    except ValueError:
        logger.warning("Mollie returned a non-JSON body (HTTP %d)", response.status_code)
        return {}
    return payload if isinstance(payload, dict) else {}


@dataclass
class ProviderPayment:
    """A Mollie payment resource as returned by one API call. Never cached."""

    id: Optional[str]
    status: ProviderStatus
    raw_status: Optional[str]
    checkout_url: Optional[str]
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ProviderPayment":
        links = payload.get("_links")
        checkout = links.get("checkout") if isinstance(links, dict) else None
        href = checkout.get("href") if isinstance(checkout, dict) else None
        raw_status = payload.get("status")
        return cls(
            id=payload.get("id"),
            status=ProviderStatus.parse(raw_status),
            raw_status=raw_status,
            checkout_url=href if isinstance(href, str) and href else None,
            payload=dict(payload),
        )

    @property
    def is_paid(self) -> bool:
        return self.status == ProviderStatus.PAID


class MollieGateway(PaymentGateway):
    """Mollie checkout gateway. All collaborators are injected."""

    identifier = "mollie"
    version = "1.0.0"
    currencies: list[str] = []

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        store: PaymentRecordStore,
        config: GatewayConfig,
        api_base: Optional[str] = None,
    ):
        self._http = http_client
        self._store = store
        self._config = config
        self._api_base = (api_base or settings.mollie_api_base).rstrip("/")

    @classmethod
    def config_fields(cls) -> dict[str, ConfigField]:
        return {
            "api_key": ConfigField(
                label="Mollie API Key",
                description="Enter your Mollie API Key here.",
                type="text",
                rules=["required", "string"],
            ),
            "webhook_enabled": ConfigField(
                label="Send webhook URL",
                description="Let Mollie notify the webhook endpoint on status changes.",
                type="checkbox",
                rules=["boolean"],
            ),
        }

    async def initiate(self, payment: PaymentRecord) -> RedirectTarget:
        body = self._creation_body(payment)
        api_key = require_config(self._config, "api_key")

        response = await self._request("POST", "/payments", api_key, json=body)
        if response is None or not response.is_success:
            raise ProviderRequestError(
                "Failed to create the payment using Mollie API",
                payment_id=payment.id,
                upstream_status=response.status_code if response is not None else None,
            )

        mollie_payment = ProviderPayment.from_response(_json_body(response))
        logger.info(
            "Created Mollie payment %s for payment %s (%s %s)",
            mollie_payment.id,
            payment.id,
            body["amount"]["currency"],
            body["amount"]["value"],
        )

        # The id is kept even when the checkout link is missing, so a later
        # callback can still resolve the payment.
        if mollie_payment.id:
            await self._store.set_transaction_id(payment, mollie_payment.id)

        if not mollie_payment.checkout_url:
            raise MissingCheckoutUrlError(
                "Mollie checkout URL not found in the response", payment_id=payment.id
            )

        return RedirectTarget(url=mollie_payment.checkout_url, external=True)

    async def confirm(self, request_params: Mapping[str, Any]) -> RedirectTarget:
        payment_id = request_params.get("payment_id")
        payment = await self._store.find(payment_id) if payment_id else None
        if payment is None:
            raise PaymentNotFoundError("Payment record not found", payment_id=payment_id)

        if payment.is_paid():
            logger.info("Payment %s already completed, skipping Mollie lookup", payment.id)
            return RedirectTarget(url=payment.success_url())

        transaction_id = payment.transaction_id
        if not transaction_id:
            raise MissingTransactionIdError(
                "Missing Mollie transaction ID on payment record", payment_id=payment.id
            )

        api_key = require_config(self._config, "api_key")
        response = await self._request("GET", f"/payments/{transaction_id}", api_key)
        if response is None or not response.is_success:
            raise ProviderRequestError(
                "Failed to retrieve the payment from Mollie",
                payment_id=payment.id,
                upstream_status=response.status_code if response is not None else None,
            )

        mollie_payment = ProviderPayment.from_response(_json_body(response))
        if not mollie_payment.is_paid:
            logger.warning(
                "Mollie payment %s for payment %s has status %s",
                transaction_id,
                payment.id,
                mollie_payment.raw_status,
            )
            raise UnexpectedStatusError(mollie_payment.raw_status, payment_id=payment.id)

        won = await self._store.mark_completed(
            payment, mollie_payment.id or transaction_id, mollie_payment.payload
        )
        if won:
            logger.info("Payment %s completed (Mollie %s)", payment.id, transaction_id)
        else:
            logger.info("Payment %s was completed by a concurrent callback", payment.id)

        return RedirectTarget(url=payment.success_url())

    def _creation_body(self, payment: PaymentRecord) -> dict[str, Any]:
        body: dict[str, Any] = {
            "amount": {
                "currency": validate_currency(payment.currency),
                "value": format_amount(payment.total()),
            },
            "description": payment.description,
            "cancelUrl": payment.cancel_url(),
            "redirectUrl": payment.redirect_url(),
            "metadata": {"payment_id": payment.id},
        }
        if self._webhook_enabled():
            body["webhookUrl"] = payment.webhook_url()
        return body

    def _webhook_enabled(self) -> bool:
        value = self._config.config("webhook_enabled", settings.mollie_webhook_enabled)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    async def _request(
        self, method: str, path: str, api_key: str, **kwargs: Any
    ) -> Optional[httpx.Response]:
        """Send one authenticated request. Returns None on transport failure."""
        try:
            return await self._http.request(
                method,
                f"{self._api_base}{path}",
                headers={"Authorization": f"Bearer {api_key}"},
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error("Mollie %s %s failed: %s", method, path, e)
            return None
