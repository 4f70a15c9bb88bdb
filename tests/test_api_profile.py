from storefront.services.supabase_client import BackendError, get_supabase_client
from storefront.main import app


def test_profile_requires_authentication(client):
    assert client.get("/api/profile").status_code == 401
    assert client.get("/api/profile", headers={"Authorization": "Bearer stale"}).status_code == 401
    assert client.get("/api/profile", headers={"Authorization": "Basic abc"}).status_code == 401


def test_get_profile(client, backend, auth_headers):
    backend.select_one.return_value = {
        "id": "user-123",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "phone": None,
    }

    response = client.get("/api/profile", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["profile"] == {
        "id": "user-123",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "shopper@example.com",
        "phone": "",
    }
    backend.select_one.assert_awaited_once_with(
        "profiles", {"id": "user-123"}, access_token="good-token"
    )


def test_profile_fetch_failure_returns_blank_profile(client, backend, auth_headers):
    backend.select_one.side_effect = BackendError("boom", status_code=500)

    response = client.get("/api/profile", headers=auth_headers)

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["first_name"] == ""
    assert profile["email"] == "shopper@example.com"


def test_update_profile(client, backend, auth_headers):
    response = client.put(
        "/api/profile",
        json={"first_name": "Ada", "last_name": "Lovelace", "phone": "+39 081 555"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Profile updated successfully!"
    assert response.json()["profile"]["phone"] == "+39 081 555"
    backend.update.assert_awaited_once_with(
        "profiles",
        {"first_name": "Ada", "last_name": "Lovelace", "phone": "+39 081 555"},
        {"id": "user-123"},
        access_token="good-token",
    )


def test_update_profile_failure_is_bad_gateway(client, backend, auth_headers):
    backend.update.side_effect = BackendError("row level security", status_code=403)

    response = client.put("/api/profile", json={"first_name": "Ada"}, headers=auth_headers)

    assert response.status_code == 502
    assert response.json()["detail"] == "row level security"


def test_order_history(client, backend, auth_headers):
    backend.select.return_value = [
        {
            "id": "ORD-2",
            "user_id": "user-123",
            "total_amount": 18.0,
            "items": [{"title": "Family Tub", "quantity": 1, "price": "18.00", "total": "18.000"}],
            "status": "pending",
            "delivery_address": None,
            "special_instructions": "",
            "created_at": "2026-10-18T12:00:00+00:00",
        }
    ]

    response = client.get("/api/profile/orders", headers=auth_headers)

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == ["ORD-2"]
    backend.select.assert_awaited_once_with(
        "orders",
        {"user_id": "user-123"},
        access_token="good-token",
        order="created_at.desc",
    )


def test_order_history_failure_is_bad_gateway(client, backend, auth_headers):
    backend.select.side_effect = BackendError("timeout")

    response = client.get("/api/profile/orders", headers=auth_headers)

    assert response.status_code == 502


def test_profile_unavailable_without_backend(client, auth_headers):
    app.dependency_overrides[get_supabase_client] = lambda: None

    response = client.get("/api/profile", headers=auth_headers)

    assert response.status_code == 503
