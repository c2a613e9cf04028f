from app.models.enums import PaymentStatus, ProviderStatus
from app.models.payment import AuditLog, Base, GatewayConfigRecord, Payment

__all__ = [
    "Base",
    "Payment",
    "GatewayConfigRecord",
    "AuditLog",
    "PaymentStatus",
    "ProviderStatus",
]
