"""
Seed the database with sample data.

Creates:
  - The Mollie gateway configuration, taken from MOLLIE_API_KEY
  - A few pending payments ready to be sent to checkout
  - Edge cases: zero-amount payment, amount needing rounding (19.999 EUR)

Run:
    python -m seed.seed_data
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import settings
from app.database import async_session, init_db
from app.models.payment import Payment
from app.stores.gateway_config import save_config

SHOP_URL = "http://localhost:3000"

PAYMENTS = [
    {"id": "PAY-001", "currency": "EUR", "amount": Decimal("12.99"), "description": "Order #1001"},
    {"id": "PAY-002", "currency": "EUR", "amount": Decimal("249.00"), "description": "Order #1002"},
    {"id": "PAY-003", "currency": "GBP", "amount": Decimal("75.50"), "description": "Order #1003"},
    {"id": "PAY-004", "currency": "USD", "amount": Decimal("1000"), "description": "Order #1004"},

    # ─── Edge cases ────────────────────────────────────────────────────

    # Rounds up to "20.00" in the provider request
    {"id": "PAY-010", "currency": "EUR", "amount": Decimal("19.999"), "description": "Order #1010"},

    # Zero amount (card verification style)
    {"id": "PAY-011", "currency": "EUR", "amount": Decimal("0"), "description": "Order #1011"},
]


async def seed():
    """Seed the database with sample data."""
    await init_db()

    async with async_session() as session:
        # Check if already seeded
        existing = await session.get(Payment, "PAY-001")
        if existing:
            print("Database already seeded. Skipping.")
            return

        for data in PAYMENTS:
            session.add(Payment(
                gateway="mollie",
                success_redirect=f"{SHOP_URL}/orders/{data['id']}/thanks",
                cancel_redirect=f"{SHOP_URL}/orders/{data['id']}/cancelled",
                **data,
            ))

        await save_config(session, "mollie", {
            "api_key": settings.mollie_api_key,
            "webhook_enabled": settings.mollie_webhook_enabled,
        })
        print(f"Seeded {len(PAYMENTS)} payments and the mollie gateway config.")


if __name__ == "__main__":
    asyncio.run(seed())
