"""Tests for voter registration, login and lookup."""

import uuid

import pytest

from conftest import ADMIN_EMAIL, API, PASSWORD, VOTER_EMAIL


@pytest.mark.asyncio
class TestRegister:

    async def test_register_returns_confirmation_message(self, register):
        response = await register(full_name="Ada Voter")

        assert response.status_code == 201
        assert response.json() == {"message": "New voter Ada Voter registered successfully!"}

    async def test_register_accepts_confirm_password_alias(self, client):
        response = await client.post(f"{API}/voters/register", json={
            "fullName": "Ada Voter",
            "email": VOTER_EMAIL,
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        })

        assert response.status_code == 201

    async def test_register_with_missing_field_fails(self, client):
        response = await client.post(f"{API}/voters/register", json={
            "email": VOTER_EMAIL,
            "password": PASSWORD,
            "password2": PASSWORD,
        })

        assert response.status_code == 422
        assert "message" in response.json()

    async def test_register_with_short_password_fails(self, register):
        response = await register(password="abc", password2="abc")

        assert response.status_code == 422
        assert response.json()["message"] == "Password must be at least 6 characters"

    async def test_register_with_whitespace_padded_short_password_fails(self, register):
        response = await register(password="  ab  ", password2="  ab  ")

        assert response.status_code == 422

    async def test_register_with_mismatched_passwords_fails(self, register):
        response = await register(password="secret1", password2="secret2")

        assert response.status_code == 422
        assert response.json()["message"] == "Passwords do not match"

    async def test_register_duplicate_email_is_case_insensitive(self, register):
        first = await register(email="a@x.com")
        second = await register(email="A@X.COM")

        assert first.status_code == 201
        assert second.status_code == 422
        assert second.json()["message"] == "Email already exists, please use a different email"

    async def test_register_with_malformed_email_fails(self, register):
        response = await register(email="not-an-email")

        assert response.status_code == 422

    async def test_register_accepts_long_password(self, register, login):
        long_password = "correct horse battery staple " * 4

        response = await register(password=long_password)

        assert response.status_code == 201
        assert (await login(password=long_password)).status_code == 200


@pytest.mark.asyncio
class TestLogin:

    async def test_login_returns_token_and_profile(self, register, login):
        await register()

        response = await login()

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert uuid.UUID(data["id"])
        assert data["isAdmin"] is False
        assert data["votedElections"] == []

    async def test_login_is_case_insensitive_on_email(self, register, login):
        await register(email="a@x.com")

        response = await login(email="A@x.Com")

        assert response.status_code == 200

    async def test_login_with_wrong_password_fails(self, register, login):
        await register()

        response = await login(password="wrong-password")

        assert response.status_code == 403
        assert response.json() == {"message": "Invalid credentials."}

    async def test_login_with_unknown_email_gives_same_message(self, login):
        response = await login(email="nobody@x.com")

        assert response.status_code == 403
        assert response.json() == {"message": "Invalid credentials."}

    async def test_configured_admin_email_gets_admin_role(self, register, login):
        await register(full_name="Grace Admin", email=ADMIN_EMAIL.upper())

        response = await login(email=ADMIN_EMAIL)

        assert response.status_code == 200
        assert response.json()["isAdmin"] is True


@pytest.mark.asyncio
class TestGetVoter:

    async def test_get_voter_excludes_password(self, client, voter_auth):
        response = await client.get(f"{API}/voters/{voter_auth['id']}", headers=voter_auth["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == voter_auth["id"]
        assert data["fullName"] == "Ada Voter"
        assert data["email"] == VOTER_EMAIL
        assert data["votedElections"] == []
        assert "password" not in data
        assert "hashedPassword" not in data
        assert "hashed_password" not in data

    async def test_get_unknown_voter_returns_404(self, client, voter_auth):
        response = await client.get(f"{API}/voters/{uuid.uuid4()}", headers=voter_auth["headers"])

        assert response.status_code == 404
        assert response.json() == {"message": "Voter not found"}

    async def test_get_voter_with_malformed_id_returns_404(self, client, voter_auth):
        response = await client.get(f"{API}/voters/not-a-voter-id", headers=voter_auth["headers"])

        assert response.status_code == 404
        assert response.json() == {"message": "Voter not found"}

    async def test_get_voter_requires_token(self, client, voter_auth):
        response = await client.get(f"{API}/voters/{voter_auth['id']}")

        assert response.status_code == 403
