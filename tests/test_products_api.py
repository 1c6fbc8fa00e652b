"""
HTTP-level tests for the product endpoints.

Runs the full FastAPI app (lifespan included) on the in-memory backend.
"""

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from core.errors import StorageUnavailableError
from core.storage.memory import InMemoryProductRepository
from manager.storage_manager import StorageManager


WIDGET = {"name": "Widget", "price": 1000, "stock": 5}


def test_list_empty_is_array(client):
    response = client.get("/api/produk")

    assert response.status_code == 200
    assert response.json() == []


def test_create_get_delete_scenario(client):
    """POST -> GET -> DELETE -> GET 404."""
    created = client.post("/api/produk", json=WIDGET)
    assert created.status_code == 201
    body = created.json()
    assert body["id"] == 1
    assert body["name"] == "Widget"
    assert body["price"] == 1000
    assert body["stock"] == 5
    assert isinstance(body["created_at"], str)

    fetched = client.get("/api/produk/1")
    assert fetched.status_code == 200
    assert fetched.json() == body

    deleted = client.delete("/api/produk/1")
    assert deleted.status_code == 200
    assert deleted.json() == {"id": 1, "message": "Product deleted successfully"}

    missing = client.get("/api/produk/1")
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Product 1 not found"}


def test_delete_twice(client):
    client.post("/api/produk", json=WIDGET)

    assert client.delete("/api/produk/1").status_code == 200
    assert client.delete("/api/produk/1").status_code == 404


def test_list_after_creates(client):
    client.post("/api/produk", json=WIDGET)
    client.post("/api/produk", json={"name": "Gadget", "price": 2500, "stock": 1})

    products = client.get("/api/produk").json()

    assert [p["name"] for p in products] == ["Gadget", "Widget"]


def test_update_replaces_whole_record(client):
    original = client.post("/api/produk", json=WIDGET).json()

    response = client.put(
        "/api/produk/1",
        json={"name": "Widget Pro", "price": 1500, "stock": 0},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["id"] == 1
    assert updated["created_at"] == original["created_at"]
    assert (updated["name"], updated["price"], updated["stock"]) == ("Widget Pro", 1500, 0)
    assert client.get("/api/produk/1").json() == updated


def test_update_missing_returns_404(client):
    response = client.put("/api/produk/7", json=WIDGET)

    assert response.status_code == 404
    assert client.get("/api/produk").json() == []


def test_update_requires_every_field(client):
    """Partial bodies are rejected; nothing is merged."""
    original = client.post("/api/produk", json=WIDGET).json()

    response = client.put("/api/produk/1", json={"price": 9})

    assert response.status_code == 400
    assert client.get("/api/produk/1").json() == original


def test_non_numeric_id(client):
    response = client.get("/api/produk/abc")

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid ID"}


def test_non_numeric_id_wins_over_invalid_body(client):
    response = client.put("/api/produk/abc", json={"price": 9})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid ID"}


def test_extra_path_segments_are_invalid_id(client):
    client.post("/api/produk", json=WIDGET)

    response = client.get("/api/produk/1/extra")

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid ID"}


def test_id_checked_before_method(client):
    """A bad id is a 400 even when the method is unsupported too."""
    response = client.patch("/api/produk/abc", json=WIDGET)

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid ID"}


def test_numeric_id_with_unsupported_method(client):
    client.post("/api/produk", json=WIDGET)

    response = client.patch("/api/produk/1", json=WIDGET)

    assert response.status_code == 405
    assert response.content == b""
    assert response.headers["allow"] == "GET, PUT, DELETE"


@pytest.mark.parametrize("product_id", ["99999999999", "-99999999999"])
def test_id_outside_integer_column_range(client, product_id):
    for method in ("get", "delete"):
        response = getattr(client, method)(f"/api/produk/{product_id}")

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid ID"}


def test_missing_id(client):
    response = client.get("/api/produk/")

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid ID"}


@pytest.mark.parametrize("method", ["post", "put"])
def test_malformed_json_changes_nothing(client, method):
    client.post("/api/produk", json=WIDGET)
    before = client.get("/api/produk").json()

    path = "/api/produk" if method == "post" else "/api/produk/1"
    response = getattr(client, method)(
        path,
        content=b'{"name": "Broken", "price": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid JSON"}
    assert client.get("/api/produk").json() == before


@pytest.mark.parametrize(
    "body",
    [
        {"name": "W", "price": "1000", "stock": 5},
        {"name": "W", "price": 1000, "stock": True},
        {"name": "W", "price": 10.5, "stock": 5},
        {"name": 5, "price": 1000, "stock": 5},
        {"name": "W", "price": 2**31, "stock": 5},
    ],
)
def test_wrong_types_rejected_without_coercion(client, body):
    original = client.post("/api/produk", json=WIDGET).json()

    created = client.post("/api/produk", json=body)
    replaced = client.put("/api/produk/1", json=body)

    assert created.status_code == 400
    assert replaced.status_code == 400
    assert created.json() == {"detail": "Invalid JSON"}
    assert client.get("/api/produk").json() == [original]


def test_empty_name_rejected(client):
    response = client.post("/api/produk", json={"name": "", "price": 1, "stock": 1})

    assert response.status_code == 400
    assert client.get("/api/produk").json() == []


def test_legacy_field_names_accepted(client):
    """nama/harga/stok are read as name/price/stock."""
    response = client.post("/api/produk", json={"nama": "Sabun", "harga": 5000, "stok": 3})

    assert response.status_code == 201
    body = response.json()
    assert (body["name"], body["price"], body["stock"]) == ("Sabun", 5000, 3)
    assert "nama" not in body


def test_collection_method_not_allowed(client):
    response = client.patch("/api/produk", json=WIDGET)

    assert response.status_code == 405
    assert response.content == b""


def test_item_method_not_allowed(client):
    client.post("/api/produk", json=WIDGET)

    response = client.post("/api/produk/1", json=WIDGET)

    assert response.status_code == 405
    assert response.content == b""


class BrokenRepository(InMemoryProductRepository):
    """Connects fine, then fails every call once `broken` is set."""

    def __init__(self):
        super().__init__()
        self.broken = False

    async def ping(self) -> None:
        if self.broken:
            raise StorageUnavailableError("connection reset")

    async def list_all(self):
        if self.broken:
            raise StorageUnavailableError("connection reset")
        return await super().list_all()


@pytest.fixture
def broken_client(memory_settings):
    repository = BrokenRepository()
    manager = StorageManager(repository=repository, app_settings=memory_settings)
    app = create_app(app_settings=memory_settings, storage_manager=manager)
    with TestClient(app) as test_client:
        yield test_client, repository


def test_storage_failure_is_internal_error(broken_client):
    client, repository = broken_client
    repository.broken = True

    response = client.get("/api/produk")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_health_ignores_storage_state(broken_client):
    client, repository = broken_client

    assert client.get("/health").status_code == 200
    repository.broken = True
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_reflects_storage_state(broken_client):
    client, repository = broken_client

    assert client.get("/ready").status_code == 200
    repository.broken = True
    assert client.get("/ready").status_code == 503


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
