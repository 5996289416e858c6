import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.api.deps import get_products_collection
from app.main import app


@pytest.fixture
def collection():
    return AsyncMongoMockClient()["productHandle"]["addProducts"]


@pytest.fixture
def client(collection):
    app.dependency_overrides[get_products_collection] = lambda: collection
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def product_payload():
    return {
        "title": "Desk Lamp",
        "image": "https://example.com/lamp.png",
        "description": "Adjustable LED lamp",
        "price": "19.99",
        "userEmail": "alice@example.com",
    }


@pytest.fixture
def created(client, product_payload):
    r = client.post("/api/products", json=product_payload)
    assert r.status_code == 201
    return r.json()["product"]
