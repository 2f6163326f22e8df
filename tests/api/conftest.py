"""
API test fixtures.
"""
import pytest_asyncio


@pytest_asyncio.fixture
async def education(client):
    """The "Education" category, created through the API."""
    response = await client.post(
        "/api/categories",
        json={"name": "Education", "description": "Edu grants"},
    )
    assert response.status_code == 201
    return response.json()
