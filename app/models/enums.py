"""Enumerations for the payment gateway domain model."""

from enum import Enum


class PaymentStatus(str, Enum):
    """Lifecycle states for a local payment record."""

    PENDING = "pending"
    COMPLETED = "completed"


class ProviderStatus(str, Enum):
    """Payment statuses reported by Mollie."""

    OPEN = "open"  # created, awaiting the customer
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    CANCELED = "canceled"
    EXPIRED = "expired"
    FAILED = "failed"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "ProviderStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER
