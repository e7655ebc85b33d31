"""Integration tests: Dashboard overview counters."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from tests.conftest import requires_db

pytestmark = requires_db


async def _stats(async_client: AsyncClient, api_base: str, headers: dict) -> dict:
    resp = await async_client.get(f"{api_base}/dashboard/stats", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_new_unpaid_school_counts_as_pending(
    async_client: AsyncClient, api_base: str, admin_headers: dict, unique_suffix: str
):
    before = await _stats(async_client, api_base, admin_headers)

    resp = await async_client.post(
        f"{api_base}/schools",
        headers=admin_headers,
        json={"name": f"Stats School {unique_suffix}", "student_count": 40},
    )
    assert resp.status_code == 201, resp.text

    after = await _stats(async_client, api_base, admin_headers)
    assert after["total_schools"] == before["total_schools"] + 1
    assert after["total_students"] == before["total_students"] + 40
    assert after["pending_schools"] == before["pending_schools"] + 1
    assert after["near_expiration"] == before["near_expiration"] + 1


@pytest.mark.asyncio
async def test_well_paid_school_is_not_pending(
    async_client: AsyncClient, api_base: str, admin_headers: dict, unique_suffix: str
):
    before = await _stats(async_client, api_base, admin_headers)

    resp = await async_client.post(
        f"{api_base}/schools",
        headers=admin_headers,
        json={
            "name": f"Paid School {unique_suffix}",
            "student_count": 10,
            "quoted_price": "365",
            "advance_paid": "3650",
        },
    )
    assert resp.status_code == 201, resp.text

    after = await _stats(async_client, api_base, admin_headers)
    assert after["pending_schools"] == before["pending_schools"]
    assert after["near_expiration"] == before["near_expiration"]
    assert Decimal(after["total_outstanding"]) == Decimal(before["total_outstanding"])
