"""Pydantic request/response schemas for mt_payment."""

from pydantic import BaseModel, Field

from src.mt_common.datetime_utils import to_iso
from src.mt_payment.domain.models import Payment


class RecordPaymentRequest(BaseModel):
    coins: int = Field(..., gt=0, le=10_000_000)
    price_cents: int = Field(..., ge=0)
    transaction_id: str = Field(..., min_length=1, max_length=128)


class PaymentResponse(BaseModel):
    id: str
    buyer_email: str
    coins: int
    price_cents: int
    transaction_id: str
    created_at: str | None

    @classmethod
    def from_domain(cls, p: Payment) -> "PaymentResponse":
        return cls(
            id=p.id,
            buyer_email=p.buyer_email,
            coins=p.coins,
            price_cents=p.price_cents,
            transaction_id=p.transaction_id,
            created_at=to_iso(p.created_at),
        )


class RecordPaymentResponse(BaseModel):
    payment: PaymentResponse
    buyer_balance: int
    replayed: bool = False
