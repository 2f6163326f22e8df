"""
Tests for the /api/categories endpoints.
"""
import pytest

from tests.conftest import grant_payload

pytestmark = pytest.mark.asyncio

UNKNOWN_ID = "00000000-0000-0000-0000-000000000001"


class TestCreateCategory:
    """Tests for POST /api/categories."""

    async def test_create(self, client):
        response = await client.post("/api/categories", json={"name": "Education", "description": "Edu grants"})

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Education"
        assert data["description"] == "Edu grants"
        assert data["version"] == 1
        assert response.headers["Location"] == f"/api/categories/{data['id']}"

    async def test_duplicate_name_in_other_case(self, client, education):
        response = await client.post("/api/categories", json={"name": "education"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] is True
        assert body["code"] == "duplicate_name"
        assert body["status_code"] == 400

    async def test_blank_name(self, client):
        response = await client.post("/api/categories", json={"name": "   "})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "invalid_argument"
        assert body["errors"] == [{"field": "name", "message": "name is required"}]

    async def test_missing_name(self, client):
        response = await client.post("/api/categories", json={"description": "No name"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "invalid_argument"
        assert [e["field"] for e in body["errors"]] == ["name"]

    async def test_request_id_is_echoed(self, client):
        response = await client.post(
            "/api/categories",
            json={"name": ""},
            headers={"X-Request-ID": "abc123"},
        )

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"


class TestListCategories:
    """Tests for GET /api/categories."""

    async def test_paged_envelope(self, client):
        for name in ["Research", "Arts", "Education"]:
            await client.post("/api/categories", json={"name": name})

        response = await client.get("/api/categories", params={"page": 1, "pageSize": 2})

        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data["items"]] == ["Arts", "Education"]
        assert data["totalCount"] == 3
        assert data["page"] == 1
        assert data["pageSize"] == 2
        assert data["totalPages"] == 2
        assert data["hasNextPage"] is True
        assert data["hasPreviousPage"] is False

    async def test_page_past_end(self, client):
        for i in range(5):
            await client.post("/api/categories", json={"name": f"Category {i}"})

        response = await client.get("/api/categories", params={"page": 3, "pageSize": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["totalCount"] == 5
        assert data["totalPages"] == 1
        assert data["hasNextPage"] is False

    async def test_out_of_range_paging_is_clamped(self, client, education):
        response = await client.get("/api/categories", params={"page": -2, "pageSize": 500})

        data = response.json()
        assert data["page"] == 1
        assert data["pageSize"] == 10
        assert len(data["items"]) == 1

    async def test_search(self, client):
        await client.post("/api/categories", json={"name": "Education", "description": "Schools"})
        await client.post("/api/categories", json={"name": "Research", "description": "University labs"})

        response = await client.get("/api/categories", params={"search": "UNIVERSITY"})

        assert [c["name"] for c in response.json()["items"]] == ["Research"]

    async def test_empty(self, client):
        data = (await client.get("/api/categories")).json()

        assert data["items"] == []
        assert data["totalCount"] == 0
        assert data["totalPages"] == 0


class TestGetCategory:
    """Tests for GET /api/categories/{id}."""

    async def test_detail_with_grants(self, client, education):
        created = await client.post(
            "/api/grants",
            json=grant_payload(title="Tagged", country="Norway", categoryIds=[education["id"]]),
        )

        response = await client.get(f"/api/categories/{education['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Education"
        assert data["grantCount"] == 1
        assert data["grants"][0]["id"] == created.json()["id"]
        assert data["grants"][0]["title"] == "Tagged"
        assert data["grants"][0]["country"] == "Norway"

    async def test_unknown(self, client):
        response = await client.get(f"/api/categories/{UNKNOWN_ID}")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_malformed_id(self, client):
        response = await client.get("/api/categories/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"


class TestUpdateCategory:
    """Tests for PUT /api/categories/{id}."""

    async def test_update(self, client, education):
        response = await client.put(
            f"/api/categories/{education['id']}",
            json={"name": "Schooling", "description": "Updated"},
        )

        assert response.status_code == 204
        data = (await client.get(f"/api/categories/{education['id']}")).json()
        assert data["name"] == "Schooling"
        assert data["description"] == "Updated"
        assert data["version"] == 2

    async def test_duplicate_name(self, client, education):
        research = (await client.post("/api/categories", json={"name": "Research"})).json()

        response = await client.put(f"/api/categories/{research['id']}", json={"name": "EDUCATION"})

        assert response.status_code == 400
        assert response.json()["code"] == "duplicate_name"

    async def test_unknown(self, client):
        response = await client.put(f"/api/categories/{UNKNOWN_ID}", json={"name": "X"})

        assert response.status_code == 404

    async def test_stale_version(self, client, education):
        await client.put(f"/api/categories/{education['id']}", json={"name": "Edu", "version": 1})

        response = await client.put(
            f"/api/categories/{education['id']}",
            json={"name": "Edu again", "version": 1},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "conflict"


class TestDeleteCategory:
    """Tests for DELETE /api/categories/{id}."""

    async def test_delete(self, client, education):
        response = await client.delete(f"/api/categories/{education['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/categories/{education['id']}")).status_code == 404

    async def test_unknown(self, client):
        response = await client.delete(f"/api/categories/{UNKNOWN_ID}")

        assert response.status_code == 404

    async def test_with_dependents(self, client, education):
        await client.post("/api/grants", json=grant_payload(categoryIds=[education["id"]]))

        response = await client.delete(f"/api/categories/{education['id']}")

        assert response.status_code == 400
        assert response.json()["code"] == "has_dependents"
        assert (await client.get(f"/api/categories/{education['id']}")).status_code == 200
