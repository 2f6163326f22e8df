"""
Tests for the /api/grants endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from tests.conftest import grant_payload, past
from vacancies.models import Grant

pytestmark = pytest.mark.asyncio

UNKNOWN_ID = "00000000-0000-0000-0000-000000000001"


class TestCatalogScenario:
    """End-to-end walk through categories and grants."""

    async def test_category_lifecycle_with_grant(self, client):
        created = await client.post("/api/categories", json={"name": "Education", "description": "Edu grants"})
        assert created.status_code == 201
        edu_id = created.json()["id"]

        duplicate = await client.post("/api/categories", json={"name": "education"})
        assert duplicate.status_code == 400
        assert duplicate.json()["code"] == "duplicate_name"

        grant = await client.post("/api/grants", json=grant_payload(title="T", categoryIds=[edu_id]))
        assert grant.status_code == 201
        grant_id = grant.json()["id"]

        listing = await client.get(
            "/api/grants",
            params={"categoryId": edu_id, "activeOnly": "false", "page": 1, "pageSize": 10},
        )
        assert listing.status_code == 200
        assert [g["id"] for g in listing.json()["items"]] == [grant_id]

        blocked = await client.delete(f"/api/categories/{edu_id}")
        assert blocked.status_code == 400
        assert blocked.json()["code"] == "has_dependents"

        assert (await client.delete(f"/api/grants/{grant_id}")).status_code == 204
        assert (await client.delete(f"/api/categories/{edu_id}")).status_code == 204


class TestCreateGrant:
    """Tests for POST /api/grants."""

    async def test_create(self, client, education):
        response = await client.post("/api/grants", json=grant_payload(categoryIds=[education["id"]]))

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Research Fellowship"
        assert data["fundingAmount"] == "50 000 EUR"
        assert data["isActive"] is True
        assert data["updatedAt"] is None
        assert data["version"] == 1
        assert [c["name"] for c in data["categories"]] == ["Education"]
        assert response.headers["Location"] == f"/api/grants/{data['id']}"

    async def test_unknown_category_creates_nothing(self, client, education, session_maker):
        response = await client.post(
            "/api/grants",
            json=grant_payload(categoryIds=[education["id"], UNKNOWN_ID]),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "unknown_category_reference"
        assert body["missing_ids"] == [UNKNOWN_ID]

        async with session_maker() as session:
            assert await session.scalar(select(func.count()).select_from(Grant)) == 0

    async def test_past_deadline(self, client):
        response = await client.post("/api/grants", json=grant_payload(deadline=past().isoformat()))

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["deadline"]

    async def test_field_errors(self, client):
        response = await client.post(
            "/api/grants",
            json=grant_payload(title="", country="x" * 101),
        )

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["title", "country"]

    async def test_malformed_category_id(self, client):
        response = await client.post("/api/grants", json=grant_payload(categoryIds=["nope"]))

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"

    async def test_inactive_on_create(self, client):
        response = await client.post("/api/grants", json=grant_payload(isActive=False))

        assert response.status_code == 201
        assert response.json()["isActive"] is False


class TestListGrants:
    """Tests for GET /api/grants."""

    async def test_defaults_to_active_only(self, client, make_grant):
        await make_grant(title="Open")
        await make_grant(title="Withdrawn", is_active=False)
        await make_grant(title="Expired", deadline=past())

        data = (await client.get("/api/grants")).json()

        assert [g["title"] for g in data["items"]] == ["Open"]
        assert data["totalCount"] == 1

    async def test_active_only_false_lists_everything_newest_first(self, client, make_grant):
        base = datetime(2030, 1, 1, tzinfo=timezone.utc)
        await make_grant(title="Old", created_at=base)
        await make_grant(title="New", created_at=base + timedelta(days=1), is_active=False)

        data = (await client.get("/api/grants", params={"activeOnly": "false"})).json()

        assert [g["title"] for g in data["items"]] == ["New", "Old"]

    async def test_country_filter(self, client, make_grant):
        await make_grant(title="UK", country="United Kingdom")
        await make_grant(title="DE", country="Germany")

        data = (await client.get("/api/grants", params={"country": "kingdom"})).json()

        assert [g["title"] for g in data["items"]] == ["UK"]

    async def test_paging(self, client, make_grant):
        base = datetime(2030, 1, 1, tzinfo=timezone.utc)
        for i in range(5):
            await make_grant(title=f"Grant {i}", created_at=base + timedelta(hours=i))

        data = (await client.get("/api/grants", params={"page": 2, "pageSize": 2})).json()

        assert [g["title"] for g in data["items"]] == ["Grant 2", "Grant 1"]
        assert data["totalPages"] == 3
        assert data["hasNextPage"] is True
        assert data["hasPreviousPage"] is True

    async def test_malformed_category_filter(self, client):
        response = await client.get("/api/grants", params={"categoryId": "abc"})

        assert response.status_code == 400


class TestGetGrant:
    """Tests for GET /api/grants/{id}."""

    async def test_get(self, client):
        created = (await client.post("/api/grants", json=grant_payload())).json()

        response = await client.get(f"/api/grants/{created['id']}")

        assert response.status_code == 200
        assert response.json()["title"] == "Research Fellowship"

    async def test_unknown(self, client):
        response = await client.get(f"/api/grants/{UNKNOWN_ID}")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestUpdateGrant:
    """Tests for PUT /api/grants/{id}."""

    async def test_update_clears_categories(self, client, education):
        created = (await client.post("/api/grants", json=grant_payload(categoryIds=[education["id"]]))).json()

        response = await client.put(
            f"/api/grants/{created['id']}",
            json=grant_payload(title="Renamed", categoryIds=[]),
        )

        assert response.status_code == 204
        data = (await client.get(f"/api/grants/{created['id']}")).json()
        assert data["title"] == "Renamed"
        assert data["categories"] == []
        assert data["updatedAt"] is not None
        assert data["version"] == 2

    async def test_unknown_category(self, client):
        created = (await client.post("/api/grants", json=grant_payload())).json()

        response = await client.put(
            f"/api/grants/{created['id']}",
            json=grant_payload(categoryIds=[UNKNOWN_ID]),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "unknown_category_reference"

    async def test_unknown(self, client):
        response = await client.put(f"/api/grants/{UNKNOWN_ID}", json=grant_payload())

        assert response.status_code == 404

    async def test_stale_version(self, client):
        created = (await client.post("/api/grants", json=grant_payload())).json()

        response = await client.put(
            f"/api/grants/{created['id']}",
            json=grant_payload(version=created["version"] + 1),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "conflict"

    async def test_withdraw(self, client):
        created = (await client.post("/api/grants", json=grant_payload())).json()

        await client.put(f"/api/grants/{created['id']}", json=grant_payload(isActive=False))

        assert (await client.get("/api/grants")).json()["totalCount"] == 0
        assert (await client.get(f"/api/grants/{created['id']}")).json()["isActive"] is False


class TestDeleteGrant:
    """Tests for DELETE /api/grants/{id}."""

    async def test_delete(self, client):
        created = (await client.post("/api/grants", json=grant_payload())).json()

        assert (await client.delete(f"/api/grants/{created['id']}")).status_code == 204
        assert (await client.get(f"/api/grants/{created['id']}")).status_code == 404

    async def test_unknown(self, client):
        response = await client.delete(f"/api/grants/{UNKNOWN_ID}")

        assert response.status_code == 404
