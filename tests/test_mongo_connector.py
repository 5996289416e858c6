# tests/test_mongo_connector.py
import asyncio

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.api import deps
from app.database.mongo import MongoConnector
from app.services.errors import DatabaseUnavailableError


class FakeAdmin:
    def __init__(self, fail):
        self.fail = fail

    async def command(self, name):
        if self.fail:
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


class FakeClient:
    def __init__(self, uri, fail=False, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.admin = FakeAdmin(fail)
        self.closed = False

    def __getitem__(self, name):
        return {"database": name}

    async def close(self):
        self.closed = True


def make_factory(outcomes):
    """Each call builds a FakeClient; `outcomes` says whether its ping fails."""
    built = []

    def factory(uri, **kwargs):
        client = FakeClient(uri, fail=outcomes.pop(0) if outcomes else False, **kwargs)
        built.append(client)
        return client

    return factory, built


def test_connect_is_idempotent():
    factory, built = make_factory([False])
    connector = MongoConnector("mongodb://db:27017", "productHandle", client_factory=factory)

    async def run():
        first = await connector.connect()
        second = await connector.connect()
        return first, second

    first, second = asyncio.run(run())
    assert first is second
    assert first == {"database": "productHandle"}
    assert len(built) == 1
    assert connector.is_connected
    server_api = built[0].kwargs["server_api"]
    assert server_api.version == "1"
    assert server_api.strict is True


def test_concurrent_connects_build_one_client():
    factory, built = make_factory([False])
    connector = MongoConnector("mongodb://db:27017", "productHandle", client_factory=factory)

    async def run():
        return await asyncio.gather(*(connector.connect() for _ in range(5)))

    results = asyncio.run(run())
    assert len(built) == 1
    assert all(r is results[0] for r in results)


def test_failed_connect_is_retried():
    factory, built = make_factory([True, False])
    connector = MongoConnector("mongodb://db:27017", "productHandle", client_factory=factory)

    with pytest.raises(DatabaseUnavailableError):
        asyncio.run(connector.connect())
    assert not connector.is_connected
    assert built[0].closed

    asyncio.run(connector.connect())
    assert connector.is_connected
    assert len(built) == 2


def test_collection_before_connect():
    connector = MongoConnector("mongodb://db:27017", "productHandle", client_factory=FakeClient)
    with pytest.raises(DatabaseUnavailableError):
        connector.collection("addProducts")


def test_close_resets_connector():
    factory, built = make_factory([False, False])
    connector = MongoConnector("mongodb://db:27017", "productHandle", client_factory=factory)

    async def run():
        await connector.connect()
        await connector.close()

    asyncio.run(run())
    assert built[0].closed
    assert not connector.is_connected


def test_data_routes_fail_when_database_unreachable(monkeypatch):
    from fastapi.testclient import TestClient
    from app.main import app

    factory, _ = make_factory([True, True])
    monkeypatch.setattr(deps, "connector", MongoConnector("mongodb://db:27017", "productHandle", client_factory=factory))

    with TestClient(app) as client:
        r = client.get("/api/products")
        assert r.status_code == 500
        assert r.json() == {"error": "Database connection failed"}

        # routes without data access stay up
        assert client.get("/").status_code == 200
        assert client.get("/health").json()["status"] == "healthy"
