"""Pydantic request/response schemas for mt_withdrawal."""

from pydantic import BaseModel, Field

from src.mt_common.datetime_utils import to_iso
from src.mt_common.enums import SettleDecision
from src.mt_withdrawal.domain.models import Withdrawal


class WithdrawalRequest(BaseModel):
    withdrawal_coin: int = Field(..., gt=0, le=10_000_000)
    payment_system: str = Field(..., min_length=1, max_length=64)
    account_number: str = Field(..., min_length=1, max_length=128)


class SettleWithdrawalRequest(BaseModel):
    status: SettleDecision


class WithdrawalResponse(BaseModel):
    id: str
    worker_email: str
    worker_name: str
    withdrawal_coin: int
    withdrawal_amount_cents: int
    payment_system: str
    account_number: str
    status: str
    requested_at: str | None
    settled_at: str | None

    @classmethod
    def from_domain(cls, w: Withdrawal) -> "WithdrawalResponse":
        return cls(
            id=w.id,
            worker_email=w.worker_email,
            worker_name=w.worker_name,
            withdrawal_coin=w.withdrawal_coin,
            withdrawal_amount_cents=w.withdrawal_amount_cents,
            payment_system=w.payment_system,
            account_number=w.account_number,
            status=w.status,
            requested_at=to_iso(w.requested_at),
            settled_at=to_iso(w.settled_at),
        )


class SettleWithdrawalResponse(BaseModel):
    withdrawal: WithdrawalResponse
    worker_balance: int | None  # set when approved
