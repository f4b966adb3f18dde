"""Integration tests: Teachers endpoints."""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_list_teachers(async_client: AsyncClient, api_base: str, teacher: dict):
    assert teacher["teacherName"] == "Anjali Perera"
    assert teacher["mobile"] == "0771234567"

    resp = await async_client.get(f"{api_base}/teachers")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert [t["id"] for t in data["data"]] == [teacher["id"]]


@pytest.mark.asyncio
async def test_lookup_by_mobile(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.get(f"{api_base}/teachers/mobile/0771234567")
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == teacher["id"]


@pytest.mark.asyncio
async def test_lookup_unknown_mobile(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.get(f"{api_base}/teachers/mobile/0700000000")
    assert resp.status_code == 404
    error = resp.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["message"] == "No teacher found with mobile number 0700000000"


@pytest.mark.asyncio
async def test_lookup_rejects_partial_mobile(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.get(f"{api_base}/teachers/mobile/077123")
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Mobile number must be exactly 10 digits"


@pytest.mark.asyncio
@pytest.mark.parametrize("mobile", ["077123456", "07712345678", "07712345ab"])
async def test_create_rejects_bad_mobile(async_client: AsyncClient, api_base: str, mobile: str):
    resp = await async_client.post(
        f"{api_base}/teachers",
        json={"teacherName": "X", "mobile": mobile, "schoolName": "Y"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_duplicate_mobile_conflict(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.post(
        f"{api_base}/teachers",
        json={"teacherName": "Other", "mobile": teacher["mobile"], "schoolName": "Other School"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_update_teacher(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.put(
        f"{api_base}/teachers/{teacher['id']}",
        json={"schoolName": "  Ananda College "},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["schoolName"] == "Ananda College"
    assert data["teacherName"] == "Anjali Perera"


@pytest.mark.asyncio
async def test_delete_teacher_frees_mobile(async_client: AsyncClient, api_base: str, teacher: dict):
    resp = await async_client.delete(f"{api_base}/teachers/{teacher['id']}")
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/teachers/mobile/{teacher['mobile']}")
    assert resp.status_code == 404

    resp = await async_client.post(
        f"{api_base}/teachers",
        json={"teacherName": "New", "mobile": teacher["mobile"], "schoolName": "S"},
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_get_unknown_teacher(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/teachers/{uuid.uuid4()}")
    assert resp.status_code == 404
