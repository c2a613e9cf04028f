"""In-memory stand-ins for the payment store and the Mollie API."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional

import httpx


MOLLIE_API = "https://api.mollie.com/v2"


@dataclass
class FakePayment:
    """In-memory payment record."""

    id: str = "PAY-001"
    currency: str = "EUR"
    amount: Decimal = Decimal("10.00")
    description: str = "Order #1001"
    transaction_id: Optional[str] = None
    paid: bool = False
    provider_payload: Optional[dict] = None

    def total(self) -> Decimal:
        return self.amount

    def cancel_url(self) -> str:
        return "https://shop.test/cancel"

    def success_url(self) -> str:
        return "https://shop.test/success"

    def redirect_url(self) -> str:
        return f"https://shop.test/api/gateways/mollie/callback?payment_id={self.id}"

    def webhook_url(self) -> str:
        return f"https://shop.test/api/gateways/mollie/webhook?payment_id={self.id}"

    def is_paid(self) -> bool:
        return self.paid


@dataclass
class InMemoryPaymentStore:
    """PaymentRecordStore keeping records in a dict and counting writes."""

    payments: dict[str, FakePayment] = field(default_factory=dict)
    writes: list[tuple[str, str]] = field(default_factory=list)

    def add(self, payment: FakePayment) -> FakePayment:
        self.payments[payment.id] = payment
        return payment

    async def find(self, payment_id: str) -> Optional[FakePayment]:
        return self.payments.get(payment_id)

    async def set_transaction_id(self, payment: FakePayment, transaction_id: str) -> None:
        payment.transaction_id = transaction_id
        self.writes.append(("set_transaction_id", payment.id))

    async def mark_completed(
        self,
        payment: FakePayment,
        provider_id: str,
        payload: Mapping[str, Any],
    ) -> bool:
        if payment.paid:
            return False
        payment.paid = True
        payment.transaction_id = provider_id
        payment.provider_payload = dict(payload)
        self.writes.append(("mark_completed", payment.id))
        return True


class FakeMollie:
    """
    Stand-in for the Mollie Payments API, served through httpx.MockTransport.

    Creation answers with ``create_status``/``create_json``; lookups answer
    from ``payments`` (404 for unknown ids) unless ``fetch_status`` is set.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.create_status = 201
        self.create_json: Any = {
            "resource": "payment",
            "id": "tr_test123",
            "status": "open",
            "_links": {"checkout": {"href": "https://www.mollie.com/checkout/select-method/tr_test123"}},
        }
        self.payments: dict[str, dict] = {}
        self.fetch_status: Optional[int] = None
        self.fail_with: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        path = request.url.path
        if request.method == "POST" and path == "/v2/payments":
            return httpx.Response(self.create_status, json=self.create_json)

        if request.method == "GET" and path.startswith("/v2/payments/"):
            if self.fetch_status is not None:
                return httpx.Response(self.fetch_status, json={"status": self.fetch_status, "title": "Error"})
            transaction_id = path.rsplit("/", 1)[-1]
            if transaction_id in self.payments:
                return httpx.Response(200, json=self.payments[transaction_id])
            return httpx.Response(404, json={"status": 404, "title": "Not Found"})

        return httpx.Response(404, json={"status": 404, "title": "Not Found"})

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


