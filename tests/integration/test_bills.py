"""Integration tests: Bill summary, creation, lookup and close/reopen."""

import uuid

import pytest
from httpx import AsyncClient


def _draft(books: list, **overrides) -> dict:
    draft = {
        "billNumber": "2001",
        "date": "2026-10-05",
        "mobile": "0771234567",
        "bookEntries": [
            {"bookId": books[0]["id"], "quantity": 10, "freeIssue": 1},
            {"bookId": books[1]["id"], "price": "240.00", "quantity": 2},
        ],
    }
    draft.update(overrides)
    return draft


@pytest.mark.asyncio
async def test_created_bill(async_client: AsyncClient, api_base: str, bill: dict, teacher: dict):
    assert bill["billNumber"] == "BILL-1001"
    assert bill["totalAmount"] == 2500.0
    assert bill["remainPayment"] == 2500.0
    assert bill["status"] == "pending"
    assert bill["isClosed"] is False
    assert bill["teacher"]["id"] == teacher["id"]
    item = bill["items"][0]
    assert item["bookName"] == "Grade 5 Maths"
    assert item["freeIssue"] == 2
    assert item["total"] == 2500.0


@pytest.mark.asyncio
async def test_summary_resolves_teacher_and_prices(
    async_client: AsyncClient, api_base: str, teacher: dict, books: list
):
    resp = await async_client.post(f"{api_base}/bills/summary", json=_draft(books))
    assert resp.status_code == 200, resp.text
    summary = resp.json()["data"]
    assert summary["displayNumber"] == "BILL-2001"
    assert summary["teacher"]["teacherName"] == "Anjali Perera"
    # catalog price copied for the first entry, explicit price kept for the second
    assert [i["price"] for i in summary["items"]] == [100.0, 240.0]
    assert summary["totalAmount"] == 1480.0

    # nothing is saved by the summary
    resp = await async_client.get(f"{api_base}/bills")
    assert resp.json()["meta"]["total"] == 0


@pytest.mark.asyncio
async def test_summary_unknown_mobile(async_client: AsyncClient, api_base: str, teacher: dict, books: list):
    resp = await async_client.post(f"{api_base}/bills/summary", json=_draft(books, mobile="0700000000"))
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "No teacher found with mobile number 0700000000"


@pytest.mark.asyncio
async def test_summary_reports_every_problem(
    async_client: AsyncClient, api_base: str, teacher: dict, books: list
):
    draft = _draft(books, billNumber="20a1")
    draft["bookEntries"][0]["quantity"] = 0
    resp = await async_client.post(f"{api_base}/bills/summary", json=draft)
    assert resp.status_code == 400
    details = resp.json()["error"]["details"]
    assert "Bill number must contain only digits" in details
    assert "Item 1: quantity must be greater than 0" in details


@pytest.mark.asyncio
async def test_summary_without_books(async_client: AsyncClient, api_base: str, teacher: dict, books: list):
    resp = await async_client.post(f"{api_base}/bills/summary", json=_draft(books, bookEntries=[]))
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "At least one book is required"


@pytest.mark.asyncio
async def test_create_requires_items(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.post(
        f"{api_base}/bills",
        json={"billNumber": "3001", "date": "2026-10-05", "teacherId": teacher["id"], "bookEntries": []},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [("quantity", 0), ("price", "0")])
async def test_create_rejects_non_positive_items(
    async_client: AsyncClient, api_base: str, teacher: dict, books: list, field: str, value
):
    entry = {"bookId": books[0]["id"], "price": "100", "quantity": 1}
    entry[field] = value
    resp = await async_client.post(
        f"{api_base}/bills",
        json={"billNumber": "3002", "date": "2026-10-05", "teacherId": teacher["id"], "bookEntries": [entry]},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_bill_number(async_client: AsyncClient, api_base: str, bill: dict, teacher: dict, books: list):
    resp = await async_client.post(
        f"{api_base}/bills",
        json={
            "billNumber": "1001",
            "date": "2026-10-05",
            "teacherId": teacher["id"],
            "bookEntries": [{"bookId": books[1]["id"], "price": "250", "quantity": 1}],
        },
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_unknown_teacher(async_client: AsyncClient, api_base: str, books: list):
    resp = await async_client.post(
        f"{api_base}/bills",
        json={
            "billNumber": "3003",
            "date": "2026-10-05",
            "teacherId": str(uuid.uuid4()),
            "bookEntries": [{"bookId": books[0]["id"], "price": "100", "quantity": 1}],
        },
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_inactive_book_rejected(async_client: AsyncClient, api_base: str, teacher: dict, books: list):
    await async_client.delete(f"{api_base}/books/{books[0]['id']}")
    resp = await async_client.post(
        f"{api_base}/bills",
        json={
            "billNumber": "3004",
            "date": "2026-10-05",
            "teacherId": teacher["id"],
            "bookEntries": [{"bookId": books[0]["id"], "price": "100", "quantity": 1}],
        },
    )
    assert resp.status_code == 400
    assert "no longer available" in resp.json()["error"]["message"]


@pytest.mark.asyncio
async def test_catalog_edits_do_not_touch_bills(async_client: AsyncClient, api_base: str, bill: dict, books: list):
    await async_client.put(f"{api_base}/books/{books[0]['id']}", json={"name": "Maths G5", "defaultPrice": "999"})
    await async_client.delete(f"{api_base}/books/{books[0]['id']}")

    resp = await async_client.get(f"{api_base}/bills/{bill['id']}")
    item = resp.json()["data"]["items"][0]
    assert item["bookName"] == "Grade 5 Maths"
    assert item["price"] == 100.0
    assert resp.json()["data"]["totalAmount"] == 2500.0


@pytest.mark.asyncio
@pytest.mark.parametrize("number", ["1001", "BILL-1001", "bill-1001"])
async def test_get_by_number(async_client: AsyncClient, api_base: str, bill: dict, number: str):
    resp = await async_client.get(f"{api_base}/bills/number/{number}")
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == bill["id"]


@pytest.mark.asyncio
async def test_get_unknown_bill(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/bills/number/9999")
    assert resp.status_code == 404
    resp = await async_client.get(f"{api_base}/bills/{uuid.uuid4()}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_and_search(async_client: AsyncClient, api_base: str, bill: dict):
    resp = await async_client.get(f"{api_base}/bills")
    body = resp.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["billNumber"] == "BILL-1001"

    for q in ("1001", "0771234567", "anjali"):
        resp = await async_client.get(f"{api_base}/bills", params={"q": q})
        assert resp.json()["meta"]["total"] == 1, q

    resp = await async_client.get(f"{api_base}/bills", params={"q": "nobody"})
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_close_and_reopen(async_client: AsyncClient, api_base: str, bill: dict):
    resp = await async_client.post(f"{api_base}/bills/{bill['id']}/close")
    assert resp.status_code == 200
    closed = resp.json()["data"]
    assert closed["status"] == "closed"
    assert closed["isClosed"] is True
    assert closed["closedAt"] is not None

    resp = await async_client.post(f"{api_base}/bills/{bill['id']}/reopen")
    reopened = resp.json()["data"]
    assert reopened["status"] == "pending"
    assert reopened["closedAt"] is None


@pytest.mark.asyncio
async def test_reconciliation_of_new_bill(async_client: AsyncClient, api_base: str, bill: dict):
    resp = await async_client.get(f"{api_base}/bills/{bill['id']}/reconciliation")
    assert resp.status_code == 200
    report = resp.json()["data"]
    assert report["consistent"] is True
    assert report["itemsTotal"] == 2500.0
    assert report["paidAmount"] == 0.0
    assert report["paymentCount"] == 0
