"""Ledger invariant checks. Pure functions over repository read models.

Conservation: every coin is either on a user balance or reserved in a task,
and the total only moves through external credits and debits:

    balances + reserved == external_credits - external_debits
"""

import logging

from src.mt_admin.domain.models import BalanceDrift, LedgerTotals

logger = logging.getLogger(__name__)


def check_conservation(totals: LedgerTotals) -> list[str]:
    violations: list[str] = []
    held = totals.user_balances + totals.reserved_coins
    net_external = totals.external_credits - totals.external_debits
    if held != net_external:
        msg = (
            f"Conservation violated: balances({totals.user_balances}) + "
            f"reserved({totals.reserved_coins}) = {held} != "
            f"credits({totals.external_credits}) - debits({totals.external_debits}) "
            f"= {net_external}"
        )
        violations.append(msg)
        logger.error(msg)
    return violations


def check_balance_drift(drift: list[BalanceDrift]) -> list[str]:
    violations: list[str] = []
    for d in drift:
        msg = f"Balance drift for {d.email}: coins={d.coins} ledger_sum={d.ledger_sum}"
        violations.append(msg)
        logger.error(msg)
    return violations


def check_non_negative(negative_count: int) -> list[str]:
    if negative_count == 0:
        return []
    msg = f"{negative_count} user(s) hold a negative balance"
    logger.error(msg)
    return [msg]
