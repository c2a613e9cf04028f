"""
Abstract payment gateway interface.

A gateway takes the customer through a redirect-based checkout in two
steps: ``initiate`` creates the payment at the provider and returns the
hosted checkout URL, ``confirm`` handles the provider's status callback and
completes the local record. The payment record, its store and the gateway
configuration are described as protocols so gateways can be exercised with
plain fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol

from app.gateways.errors import GatewayConfigError


class PaymentRecord(Protocol):
    """The host's view of a purchase attempt."""

    id: str
    currency: str
    description: str
    transaction_id: Optional[str]

    def total(self) -> Decimal: ...

    def cancel_url(self) -> str: ...

    def success_url(self) -> str: ...

    def redirect_url(self) -> str: ...

    def webhook_url(self) -> str: ...

    def is_paid(self) -> bool: ...


class PaymentRecordStore(Protocol):
    """Persistence for payment records. All writes go through here."""

    async def find(self, payment_id: str) -> Optional[PaymentRecord]: ...

    async def set_transaction_id(self, payment: PaymentRecord, transaction_id: str) -> None: ...

    async def mark_completed(
        self,
        payment: PaymentRecord,
        provider_id: str,
        payload: Mapping[str, Any],
    ) -> bool:
        """Complete the payment unless already completed. Returns True if this call did it."""
        ...


class GatewayConfig(Protocol):
    """Read-only key-value configuration of one gateway instance."""

    def config(self, key: str, default: Optional[Any] = None) -> Any: ...


class StaticGatewayConfig:
    """GatewayConfig backed by a plain mapping (environment, tests)."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = dict(values or {})

    def config(self, key: str, default: Optional[Any] = None) -> Any:
        return self._values.get(key, default)


def require_config(config: GatewayConfig, key: str) -> str:
    value = config.config(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise GatewayConfigError(f"Gateway configuration '{key}' is required")
    return value


@dataclass
class RedirectTarget:
    """Where the customer's browser should be sent next."""

    url: str
    external: bool = False  # True when leaving our site (provider checkout)


@dataclass
class ConfigField:
    """A gateway setting the installer has to fill in."""

    label: str
    description: str = ""
    type: str = "text"
    rules: list[str] = field(default_factory=list)

    @property
    def required(self) -> bool:
        return "required" in self.rules


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    identifier: str = "base"
    version: str = "1.0.0"
    currencies: list[str] = []  # empty means every currency the provider accepts

    @classmethod
    @abstractmethod
    def config_fields(cls) -> dict[str, ConfigField]:
        """Configuration fields keyed by name."""
        ...

    @abstractmethod
    async def initiate(self, payment: PaymentRecord) -> RedirectTarget:
        """
        Create the payment at the provider and return its checkout URL.

        Raises:
            ProviderRequestError: The provider rejected the request.
            MissingCheckoutUrlError: The response had no checkout link.
        """
        ...

    @abstractmethod
    async def confirm(self, request_params: Mapping[str, Any]) -> RedirectTarget:
        """
        Process a status callback and complete the payment if it was paid.

        Raises:
            PaymentNotFoundError, MissingTransactionIdError,
            ProviderRequestError, UnexpectedStatusError
        """
        ...
