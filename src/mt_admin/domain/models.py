"""Read models for dashboards and the ledger invariant check."""

from dataclasses import dataclass


@dataclass
class PlatformStats:
    total_workers: int
    total_buyers: int
    total_available_coins: int
    total_withdrawn_coins: int    # approved withdrawals
    total_purchased_coins: int    # recorded payments
    total_payout_cents: int       # real money owed on approved withdrawals


@dataclass
class BuyerStats:
    total_task_count: int
    pending_task_count: int       # open worker slots across the buyer's tasks
    total_payment_paid: int       # coins paid out on approved submissions


@dataclass
class WorkerStats:
    total_submission: int
    pending_submission: int
    total_earning: int


@dataclass
class LedgerTotals:
    """Inputs to the conservation identity, all in coins."""
    user_balances: int
    reserved_coins: int           # (open slots + pending submissions) x payable
    external_credits: int         # SIGNUP_BONUS + PAYMENT entries
    external_debits: int          # WITHDRAWAL + ACCOUNT_CLOSURE entries, positive


@dataclass
class BalanceDrift:
    email: str
    coins: int
    ledger_sum: int
