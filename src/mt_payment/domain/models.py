"""Domain models for mt_payment: pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Payment:
    id: str
    buyer_email: str
    coins: int
    price_cents: int
    transaction_id: str          # gateway reference, unique
    created_at: datetime | None = None

    def same_purchase(self, other: "Payment") -> bool:
        """True when `other` describes the same purchase under the same transaction id."""
        return (
            self.transaction_id == other.transaction_id
            and self.buyer_email == other.buyer_email
            and self.coins == other.coins
            and self.price_cents == other.price_cents
        )
