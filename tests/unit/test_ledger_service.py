"""Unit tests for the ledger read side: balance and cursor pagination."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

from src.mt_ledger.application.schemas import cursor_decode, cursor_encode
from src.mt_ledger.application.service import LedgerApplicationService
from src.mt_ledger.domain.models import LedgerEntry


def _entry(entry_id: int) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        user_email="bea@example.com",
        entry_type="PAYMENT",
        amount=10,
        balance_after=10 * entry_id,
        created_at=datetime.now(UTC),
    )


class TestCursor:
    def test_round_trip(self) -> None:
        assert cursor_decode(cursor_encode(42)) == 42

    def test_garbage_is_ignored(self) -> None:
        assert cursor_decode("%%%not-base64") is None
        assert cursor_decode(None) is None


class TestListLedger:
    async def test_has_more_sets_next_cursor(self) -> None:
        repo = AsyncMock()
        repo.list_entries.return_value = [_entry(5), _entry(4), _entry(3)]
        svc = LedgerApplicationService(repo=repo)

        result = await svc.list_ledger(MagicMock(), "bea@example.com", None, 2, None)

        assert [i.id for i in result.items] == [5, 4]
        assert result.has_more is True
        assert cursor_decode(result.next_cursor) == 4
        repo.list_entries.assert_awaited_once()
        assert repo.list_entries.await_args.args[3] == 3  # limit + 1

    async def test_last_page(self) -> None:
        repo = AsyncMock()
        repo.list_entries.return_value = [_entry(1)]
        svc = LedgerApplicationService(repo=repo)

        result = await svc.list_ledger(
            MagicMock(), "bea@example.com", cursor_encode(2), 20, "PAYMENT"
        )

        assert result.has_more is False
        assert result.next_cursor is None
        _, email, cursor_id, _, entry_type = repo.list_entries.await_args.args
        assert (email, cursor_id, entry_type) == ("bea@example.com", 2, "PAYMENT")

    async def test_balance(self) -> None:
        repo = AsyncMock()
        repo.get_balance.return_value = 70
        service = LedgerApplicationService(repo=repo)
        result = await service.get_balance(MagicMock(), "bea@example.com")
        assert result.coins == 70
