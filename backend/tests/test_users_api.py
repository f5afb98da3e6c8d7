"""
Users API — Endpoint Tests
============================

What:  The HTTP surface end to end: routes → UserService → SQLite.
Why:   Checks the wire format clients depend on: JSON {message, data} on
       success, bare text/plain messages on failure.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).
"""

import pytest

from users_api.services.credentials import PasswordHasher

BASE = "/api/v1/users"

NEW_USER = {
    "name": "A",
    "email": "a@x.com",
    "age": 30,
    "dob": "1990-01-01",
    "password": "p1",
}


async def _create(client, **overrides):
    payload = {**NEW_USER, **overrides}
    response = await client.post(BASE, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _assert_plain_text(response, status, message):
    assert response.status_code == status
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == message


class TestCreateAndRead:

    @pytest.mark.asyncio
    async def test_create_on_empty_store(self, test_client):
        response = await test_client.post(BASE, json=NEW_USER)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        data = body["data"]
        assert data["id"] == 1
        assert data["name"] == "A"
        assert data["email"] == "a@x.com"
        assert data["age"] == 30
        assert data["dob"] == "1990-01-01T00:00:00.000Z"
        # The stored hash is returned, never the plaintext
        assert data["password"] != "p1"
        assert PasswordHasher("pbkdf2_sha256").verify("p1", data["password"])

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client):
        await _create(test_client)

        response = await test_client.post(BASE, json={**NEW_USER, "name": "B"})

        _assert_plain_text(response, 400, "Email already exists")
        listing = (await test_client.get(BASE)).json()["data"]
        assert len(listing) == 1

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client):
        response = await test_client.post(BASE, json={"name": "A"})
        _assert_plain_text(response, 401, "All fields are required")

    @pytest.mark.asyncio
    async def test_no_body(self, test_client):
        response = await test_client.post(BASE)
        _assert_plain_text(response, 401, "All fields are required")

    @pytest.mark.asyncio
    async def test_wrongly_typed_field_reaches_service(self, test_client):
        response = await test_client.post(BASE, json={**NEW_USER, "age": "old"})
        _assert_plain_text(
            response, 401, "Age is required and must be a positive number greater than 0"
        )

    @pytest.mark.asyncio
    async def test_unparseable_body(self, test_client):
        response = await test_client.post(
            BASE, content="{not json", headers={"content-type": "application/json"}
        )
        _assert_plain_text(response, 400, "Invalid request body")

    @pytest.mark.asyncio
    async def test_collection_paths_accept_trailing_slash(self, test_client):
        empty = await test_client.get(f"{BASE}/")
        _assert_plain_text(empty, 404, "No users found")

        created = await test_client.post(f"{BASE}/", json=NEW_USER)
        assert created.status_code == 201
        assert created.json()["data"]["email"] == "a@x.com"

        listing = await test_client.get(f"{BASE}/")
        assert listing.status_code == 200
        assert [u["email"] for u in listing.json()["data"]] == ["a@x.com"]

        rejected = await test_client.post(f"{BASE}/", json={"name": "A"})
        _assert_plain_text(rejected, 401, "All fields are required")

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get(BASE)
        _assert_plain_text(response, 404, "No users found")

    @pytest.mark.asyncio
    async def test_list_and_get(self, test_client):
        first = await _create(test_client)
        await _create(test_client, email="b@x.com", name="B")

        listing = await test_client.get(BASE)
        assert listing.status_code == 200
        assert listing.json()["message"] == "User Data Found"
        assert [u["email"] for u in listing.json()["data"]] == ["a@x.com", "b@x.com"]

        single = await test_client.get(f"{BASE}/{first['id']}")
        assert single.status_code == 200
        assert single.json() == {"message": f"User Found for {first['id']}", "data": first}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["abd", "0", "-1"])
    async def test_get_invalid_id(self, test_client, raw_id):
        response = await test_client.get(f"{BASE}/{raw_id}")
        _assert_plain_text(response, 401, "User ID Required & Required as a number")

    @pytest.mark.asyncio
    async def test_get_missing(self, test_client):
        response = await test_client.get(f"{BASE}/2")
        _assert_plain_text(response, 404, "User not found")


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_full_update(self, test_client):
        user = await _create(test_client)

        response = await test_client.put(
            f"{BASE}/{user['id']}",
            json={"name": "B", "email": "b@x.com", "age": 41, "dob": "1985-06-15T12:30:00Z"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert response.json()["message"] == "User updated successfully"
        assert (data["name"], data["email"], data["age"]) == ("B", "b@x.com", 41)
        assert data["dob"] == "1985-06-15T12:30:00.000Z"
        assert data["password"] == user["password"]

    @pytest.mark.asyncio
    async def test_full_update_bad_email(self, test_client):
        user = await _create(test_client)
        response = await test_client.put(
            f"{BASE}/{user['id']}",
            json={"name": "B", "email": "bad", "age": 41, "dob": "1985-06-15"},
        )
        _assert_plain_text(response, 400, "Invalid email format")

    @pytest.mark.asyncio
    async def test_full_update_missing_user(self, test_client):
        response = await test_client.put(
            f"{BASE}/7",
            json={"name": "B", "email": "b@x.com", "age": 41, "dob": "1985-06-15"},
        )
        _assert_plain_text(response, 404, "User not found")

    @pytest.mark.asyncio
    async def test_delete(self, test_client):
        user = await _create(test_client)

        response = await test_client.delete(f"{BASE}/{user['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "message": f"User with ID {user['id']} deleted successfully",
            "data": user,
        }
        missing = await test_client.get(f"{BASE}/{user['id']}")
        _assert_plain_text(missing, 404, "User not found")

    @pytest.mark.asyncio
    async def test_delete_missing(self, test_client):
        response = await test_client.delete(f"{BASE}/3")
        _assert_plain_text(response, 404, "User not found")


class TestFieldPatches:

    @pytest.mark.asyncio
    async def test_rename(self, test_client):
        user = await _create(test_client)

        response = await test_client.patch(f"{BASE}/{user['id']}/name", json={"name": "Z"})

        assert response.status_code == 200
        assert response.json()["message"] == "User name updated successfully"
        assert response.json()["data"]["name"] == "Z"

    @pytest.mark.asyncio
    async def test_rename_empty_name(self, test_client):
        response = await test_client.patch(f"{BASE}/1/name", json={"name": ""})
        _assert_plain_text(response, 401, "Name is required")

    @pytest.mark.asyncio
    async def test_change_email(self, test_client):
        user = await _create(test_client)

        response = await test_client.patch(
            f"{BASE}/{user['id']}/email", json={"email": "new@x.com"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User Email updated successfully"
        assert response.json()["data"]["email"] == "new@x.com"

    @pytest.mark.asyncio
    async def test_change_email_taken(self, test_client):
        user = await _create(test_client)
        await _create(test_client, email="b@x.com", name="B")

        response = await test_client.patch(
            f"{BASE}/{user['id']}/email", json={"email": "b@x.com"}
        )

        _assert_plain_text(response, 400, "Email already exists")

    @pytest.mark.asyncio
    async def test_change_email_bad_format(self, test_client):
        response = await test_client.patch(f"{BASE}/1/email", json={"email": "bad"})
        _assert_plain_text(response, 400, "Invalid email format")

    @pytest.mark.asyncio
    async def test_change_password(self, test_client):
        user = await _create(test_client)

        response = await test_client.patch(
            f"{BASE}/{user['id']}/password",
            json={"newPassword": "p2", "oldPassword": "p1"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User Password updated successfully"
        stored = response.json()["data"]["password"]
        hasher = PasswordHasher("pbkdf2_sha256")
        assert hasher.verify("p2", stored)
        assert not hasher.verify("p1", stored)

    @pytest.mark.asyncio
    async def test_change_password_wrong_old(self, test_client):
        user = await _create(test_client)

        response = await test_client.patch(
            f"{BASE}/{user['id']}/password",
            json={"newPassword": "p2", "oldPassword": "nope"},
        )

        _assert_plain_text(response, 400, "Old password, entered is incorrect")
        unchanged = (await test_client.get(f"{BASE}/{user['id']}")).json()["data"]
        assert unchanged["password"] == user["password"]

    @pytest.mark.asyncio
    async def test_change_password_missing_fields(self, test_client):
        response = await test_client.patch(f"{BASE}/1/password", json={"newPassword": "p2"})
        _assert_plain_text(response, 401, "New & Old Passwords Required")


class TestServiceSurface:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get(BASE, headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
