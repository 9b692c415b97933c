# =============================================================================
# tests/test_items_api.py - Item Endpoint Tests
# =============================================================================
# End-to-end tests through the full middleware stack with a TestClient.
# =============================================================================

import inspect
import re

ITEMS = "/api/v1/items"
MISSING_ID = "A" * 16
ID_RE = re.compile(r"^[A-Za-z0-9]{16}$")


class TestCreateItem:
    """POST /api/v1/items"""

    def test_create_returns_201(self, client, sample_item):
        # Act
        response = client.post(ITEMS, json=sample_item)

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert ID_RE.match(body["id"])
        assert body["name"] == "Iron Sword"
        assert body["price"] == 49.99
        assert body["description"] == "A finely crafted steel blade."
        assert body["created_at"]
        assert body["updated_at"]

    def test_invalid_price_returns_400(self, client):
        response = client.post(ITEMS, json={"name": "Shield", "price": 0})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"].startswith("Validation failed - body.price")

    def test_sub_cent_price_returns_400(self, client):
        """A price the decimal(10, 2) column cannot hold is never stored."""
        # Act
        response = client.post(ITEMS, json={"name": "Pin", "price": 0.001})

        # Assert: rejected up front, and the list is unaffected
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert "body.price" in response.json()["message"]

        listing = client.get(ITEMS)
        assert listing.status_code == 200
        assert listing.json()["total"] == 0

    def test_fractional_cent_is_not_rounded(self, client):
        response = client.post(ITEMS, json={"name": "Pin", "price": 49.999})

        assert response.status_code == 400

    def test_oversize_price_returns_400(self, client):
        response = client.post(ITEMS, json={"name": "Crown", "price": 1e12})

        assert response.status_code == 400

    def test_two_decimal_price_round_trips(self, client):
        response = client.post(ITEMS, json={"name": "Crown", "price": 99999999.99})

        assert response.status_code == 201
        assert response.json()["price"] == 99999999.99

    def test_patch_sub_cent_price_returns_400(self, client, created_item):
        response = client.patch(f"{ITEMS}/{created_item['id']}", json={"price": 0.001})

        assert response.status_code == 400

    def test_missing_name_returns_400(self, client):
        response = client.post(ITEMS, json={"price": 10})

        assert response.status_code == 400
        assert "body.name" in response.json()["message"]

    def test_unknown_field_returns_400(self, client):
        response = client.post(ITEMS, json={"name": "Shield", "price": 10, "color": "red"})

        assert response.status_code == 400

    def test_malformed_json_returns_400(self, client):
        response = client.post(
            ITEMS,
            content=b'{"name": "Shield",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_text_body_returns_415(self, client):
        response = client.post(
            ITEMS,
            content=b"name=Shield",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415


class TestListItems:
    """GET /api/v1/items"""

    def test_empty_list(self, client):
        response = client.get(ITEMS)

        assert response.status_code == 200
        assert response.json() == {"data": [], "total": 0, "page": 1, "limit": 25}

    def test_list_with_filters(self, client):
        for name, price in [("Iron Sword", 49.99), ("Great Sword", 120), ("Shield", 15)]:
            client.post(ITEMS, json={"name": name, "price": price})

        response = client.get(
            ITEMS,
            params={"search": "sword", "sort": "price", "order": "desc", "limit": 1},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["limit"] == 1
        assert [item["name"] for item in body["data"]] == ["Great Sword"]

    def test_inverted_price_range_returns_400(self, client):
        response = client.get(ITEMS, params={"min_price": 50, "max_price": 10})

        assert response.status_code == 400
        assert "min_price cannot be greater than max_price" in response.json()["message"]

    def test_limit_above_max_returns_400(self, client):
        response = client.get(ITEMS, params={"limit": 101})

        assert response.status_code == 400


class TestGetItem:
    """GET /api/v1/items/{id}"""

    def test_get_existing(self, client, created_item):
        response = client.get(f"{ITEMS}/{created_item['id']}")

        assert response.status_code == 200
        assert response.json() == created_item

    def test_get_missing_returns_404(self, client):
        response = client.get(f"{ITEMS}/{MISSING_ID}")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["message"] == "No item exists with the provided identifier."
        assert body["status"] == 404
        assert isinstance(body["timestamp"], int)
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_malformed_id_returns_400(self, client):
        response = client.get(f"{ITEMS}/not-an-id")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestUpdateItem:
    """PATCH and PUT /api/v1/items/{id}"""

    def test_patch_changes_only_sent_fields(self, client, created_item):
        response = client.patch(f"{ITEMS}/{created_item['id']}", json={"price": 39.99})

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 39.99
        assert body["name"] == created_item["name"]
        assert body["description"] == created_item["description"]

    def test_patch_empty_body_returns_400(self, client, created_item):
        response = client.patch(f"{ITEMS}/{created_item['id']}", json={})

        assert response.status_code == 400
        assert "At least one field" in response.json()["message"]

    def test_patch_missing_returns_404(self, client):
        response = client.patch(f"{ITEMS}/{MISSING_ID}", json={"price": 1})

        assert response.status_code == 404

    def test_put_replaces_writable_fields(self, client, created_item):
        response = client.put(
            f"{ITEMS}/{created_item['id']}",
            json={"name": "Steel Sword", "price": 59.5},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created_item["id"]
        assert body["name"] == "Steel Sword"
        assert body["price"] == 59.5
        assert body["description"] is None

    def test_put_requires_full_body(self, client, created_item):
        response = client.put(f"{ITEMS}/{created_item['id']}", json={"price": 5})

        assert response.status_code == 400


class TestDeleteItem:
    """DELETE /api/v1/items/{id}"""

    def test_delete_returns_removed_item(self, client, created_item):
        response = client.delete(f"{ITEMS}/{created_item['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created_item["id"]
        assert client.get(f"{ITEMS}/{created_item['id']}").status_code == 404

    def test_delete_missing_returns_404(self, client):
        response = client.delete(f"{ITEMS}/{MISSING_ID}")

        assert response.status_code == 404


class TestHandlers:
    """Item handlers call the blocking SQLAlchemy service."""

    def test_handlers_run_in_threadpool(self, client):
        endpoints = [
            route.endpoint
            for route in client.app.routes
            if getattr(route, "path", "").startswith(ITEMS)
        ]

        assert len(endpoints) == 6
        assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
