"""
Gateway error taxonomy.

Every failure is terminal for the current operation: nothing here is
retried. Each error carries the HTTP status the API layer answers with.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for payment gateway failures."""

    status_code = 500

    def __init__(self, message: str, payment_id: Optional[str] = None):
        super().__init__(message)
        self.payment_id = payment_id


class ProviderRequestError(GatewayError):
    """The provider answered with a non-2xx status or could not be reached."""

    status_code = 502

    def __init__(
        self,
        message: str,
        payment_id: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, payment_id=payment_id)
        self.upstream_status = upstream_status


class MissingCheckoutUrlError(GatewayError):
    """The creation response carried no checkout link."""

    status_code = 502


class PaymentNotFoundError(GatewayError):
    """A callback referenced a payment id we do not know."""

    status_code = 404


class MissingTransactionIdError(GatewayError):
    """A callback arrived for a payment that was never created at the provider."""

    status_code = 409


class UnexpectedStatusError(GatewayError):
    """The provider reports a status other than paid."""

    status_code = 409

    def __init__(self, status: Optional[str], payment_id: Optional[str] = None):
        super().__init__(f"Unexpected payment status: {status or 'missing'}", payment_id=payment_id)
        self.status = status


class InvalidPaymentError(GatewayError):
    """The local payment record cannot be sent to the provider as-is."""

    status_code = 422


class GatewayConfigError(GatewayError):
    """A required gateway configuration value is missing."""

    status_code = 500


class DuplicateTransactionIdError(GatewayError):
    """The provider returned a payment id already stored on another record."""

    status_code = 409
