"""Canonical form of the email address that keys users and ledger rows."""


def normalize_email(value: str) -> str:
    """Lowercase the whole address so one mailbox maps to one user."""
    return value.strip().lower()
