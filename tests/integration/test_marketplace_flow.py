"""Integration tests for the coin flows over real PostgreSQL.

Pre-condition: alembic upgrade head, RUN_INTEGRATION=1.
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]

TASK = {
    "title": "Integration task",
    "detail": "Write one sentence",
    "submission_info": "Paste it",
    "payable_amount": 10,
    "completion_date": "2030-01-01",
}


async def sign_in(client: AsyncClient, role: str) -> tuple[str, dict[str, str]]:
    """Register a fresh user and return (email, auth headers)."""
    email = f"{role}_{uuid.uuid4().hex[:8]}@example.com"
    await client.post("/api/v1/users", json={"email": email, "name": role.title(), "role": role})
    resp = await client.post("/api/v1/jwt", json={"email": email})
    return email, {"Authorization": f"Bearer {resp.json()['data']['token']}"}


async def _balance(client: AsyncClient, headers: dict[str, str]) -> int:
    resp = await client.get("/api/v1/ledger/balance", headers=headers)
    return int(resp.json()["data"]["coins"])


class TestSignIn:
    async def test_bonus_is_granted_once(self, client: AsyncClient) -> None:
        email, headers = await sign_in(client, "buyer")
        assert await _balance(client, headers) == 50

        again = await client.post(
            "/api/v1/users", json={"email": email, "name": "Other", "role": "worker"}
        )
        assert again.json()["data"]["created"] is False
        assert again.json()["data"]["user"]["role"] == "buyer"
        assert await _balance(client, headers) == 50

    async def test_unauthenticated_returns_401(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/ledger/balance")
        assert resp.status_code == 401


class TestTaskLifecycle:
    async def test_reserve_review_and_refund(self, client: AsyncClient) -> None:
        buyer, hb = await sign_in(client, "buyer")
        worker, hw = await sign_in(client, "worker")

        created = await client.post(
            "/api/v1/tasks", json={**TASK, "required_workers": 3}, headers=hb
        )
        assert created.status_code == 201
        task_id = created.json()["data"]["task"]["id"]
        assert await _balance(client, hb) == 20

        sub = await client.post(
            "/api/v1/submissions", json={"task_id": task_id, "submission_details": "done"},
            headers=hw,
        )
        sub_id = sub.json()["data"]["submission"]["id"]

        approved = await client.patch(
            f"/api/v1/submissions/{sub_id}", json={"status": "approved"}, headers=hb
        )
        assert approved.json()["data"]["worker_balance"] == 20
        again = await client.patch(
            f"/api/v1/submissions/{sub_id}", json={"status": "approved"}, headers=hb
        )
        assert again.status_code == 409
        assert await _balance(client, hw) == 20

        deleted = await client.delete(f"/api/v1/tasks/{task_id}", headers=hb)
        assert deleted.json()["data"]["refunded_coins"] == 20
        assert await _balance(client, hb) == 40

    async def test_concurrent_submissions_never_oversubscribe(self, client: AsyncClient) -> None:
        _, hb = await sign_in(client, "buyer")
        created = await client.post(
            "/api/v1/tasks", json={**TASK, "required_workers": 2}, headers=hb
        )
        task_id = created.json()["data"]["task"]["id"]
        workers = [await sign_in(client, "worker") for _ in range(5)]

        results = await asyncio.gather(*[
            client.post(
                "/api/v1/submissions", json={"task_id": task_id, "submission_details": "x"},
                headers=hw,
            )
            for _, hw in workers
        ])

        assert sum(1 for r in results if r.status_code == 201) == 2
        task = await client.get(f"/api/v1/tasks/{task_id}", headers=hb)
        assert task.json()["data"]["required_workers"] == 0


class TestPayments:
    async def test_replay_credits_once(self, client: AsyncClient) -> None:
        _, hb = await sign_in(client, "buyer")
        body = {"coins": 30, "price_cents": 300, "transaction_id": f"txn_{uuid.uuid4().hex}"}

        first = await client.post("/api/v1/payments", json=body, headers=hb)
        replay = await client.post("/api/v1/payments", json=body, headers=hb)
        conflict = await client.post(
            "/api/v1/payments", json={**body, "coins": 99}, headers=hb
        )

        assert first.json()["data"]["replayed"] is False
        assert replay.json()["data"]["replayed"] is True
        assert conflict.status_code == 409
        assert await _balance(client, hb) == 80
