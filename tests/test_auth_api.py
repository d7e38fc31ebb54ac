"""
Component tests for sign-up / sign-in against a fake Supabase auth client.
"""
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import select
from supabase import AuthError

from app.core.supabase_client import get_auth_client
from app.main import app
from app.models.profile import Profile
from app.models.vendor import VendorApplication
from app.repositories.vendor_repo import VendorApplicationRepository

AUTH = "/api/v1/auth"


class FakeAuthError(AuthError):
    def __init__(self, message: str):
        Exception.__init__(self, message)
        self.message = message


class FakeAuth:
    """Stands in for `client.auth` of supabase-py."""

    def __init__(self):
        self.users: dict[str, tuple[str, str]] = {}
        self.sign_up_calls: list[dict] = []

    def _response(self, user_id: str, email: str):
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=email),
            session=SimpleNamespace(
                access_token=f"access-{user_id}",
                refresh_token=f"refresh-{user_id}",
                expires_in=3600,
            ),
        )

    def sign_up(self, credentials):
        self.sign_up_calls.append(credentials)
        email = credentials["email"]
        if email in self.users:
            raise FakeAuthError("User already registered")
        user_id = str(uuid.uuid4())
        self.users[email] = (user_id, credentials["password"])
        return self._response(user_id, email)

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if user is None or user[1] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        return self._response(user[0], credentials["email"])

    def refresh_session(self, refresh_token):
        for email, (user_id, _) in self.users.items():
            if refresh_token == f"refresh-{user_id}":
                return self._response(user_id, email)
        raise FakeAuthError("Invalid Refresh Token")


@pytest.fixture
def fake_auth(client):
    fake = FakeAuth()
    app.dependency_overrides[get_auth_client] = lambda: SimpleNamespace(auth=fake)
    return fake


VENDOR_SIGNUP = {
    "email": "owner@farmasi.my",
    "password": "secret123",
    "full_name": "Tan Mei Ling",
    "role": "vendor",
    "business_info": {
        "business_name": "Farmasi Tan",
        "business_license": "ph54321",
        "business_address": "8 Jalan Bukit Bintang, Kuala Lumpur",
        "contact_person": "Tan Mei Ling",
    },
}


class TestSignUp:
    def test_consumer_sign_up(self, client: TestClient, session, fake_auth):
        response = client.post(
            f"{AUTH}/signup",
            json={"email": "ali@example.com", "password": "secret123", "full_name": "Ali"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["access_token"].startswith("access-")
        assert data["notices"] == []

        profile = session.get(Profile, uuid.UUID(data["user_id"]))
        assert profile.role == "consumer"
        assert profile.is_approved is True
        assert fake_auth.sign_up_calls[0]["options"]["data"] == {
            "full_name": "Ali",
            "role": "consumer",
        }

    def test_vendor_sign_up_files_application(self, client: TestClient, session, fake_auth):
        response = client.post(f"{AUTH}/signup", json=VENDOR_SIGNUP)

        assert response.status_code == 201
        data = response.json()
        user_id = uuid.UUID(data["user_id"])
        assert session.get(Profile, user_id).is_approved is False

        applications = VendorApplicationRepository().list(session)
        assert len(applications) == 1
        assert applications[0].user_id == user_id
        assert applications[0].business_license == "PH54321"
        assert applications[0].status == "pending"
        assert data["notices"][0]["level"] == "info"

    def test_vendor_requires_business_info(self, client: TestClient, fake_auth):
        payload = {k: v for k, v in VENDOR_SIGNUP.items() if k != "business_info"}

        response = client.post(f"{AUTH}/signup", json=payload)

        assert response.status_code == 422

    def test_admin_role_cannot_be_requested(self, client: TestClient, fake_auth):
        response = client.post(
            f"{AUTH}/signup",
            json={"email": "x@example.com", "password": "secret123", "full_name": "X", "role": "admin"},
        )

        assert response.status_code == 422

    def test_invalid_license(self, client: TestClient, fake_auth):
        payload = {**VENDOR_SIGNUP, "business_info": {**VENDOR_SIGNUP["business_info"], "business_license": "12345"}}

        response = client.post(f"{AUTH}/signup", json=payload)

        assert response.status_code == 422

    def test_failed_application_becomes_notice(
        self, client: TestClient, session, fake_auth, monkeypatch
    ):
        def fail(self, session, application):
            raise OperationalError("INSERT", {}, Exception("connection lost"))

        monkeypatch.setattr(VendorApplicationRepository, "create", fail)

        response = client.post(f"{AUTH}/signup", json=VENDOR_SIGNUP)

        assert response.status_code == 201
        notice = response.json()["notices"][0]
        assert notice["level"] == "warning"
        assert "vendor application" in notice["message"]
        assert session.exec(select(VendorApplication)).all() == []

    def test_duplicate_email(self, client: TestClient, fake_auth):
        body = {"email": "ali@example.com", "password": "secret123", "full_name": "Ali"}
        client.post(f"{AUTH}/signup", json=body)

        response = client.post(f"{AUTH}/signup", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "User already registered"


class TestSignIn:
    def test_sign_in_and_refresh(self, client: TestClient, fake_auth):
        body = {"email": "ali@example.com", "password": "secret123", "full_name": "Ali"}
        client.post(f"{AUTH}/signup", json=body)

        signed_in = client.post(
            f"{AUTH}/signin", json={"email": "ali@example.com", "password": "secret123"}
        )
        assert signed_in.status_code == 200

        refreshed = client.post(
            f"{AUTH}/refresh", json={"refresh_token": signed_in.json()["refresh_token"]}
        )
        assert refreshed.status_code == 200
        assert refreshed.json()["user_id"] == signed_in.json()["user_id"]

    def test_wrong_password(self, client: TestClient, fake_auth):
        client.post(
            f"{AUTH}/signup",
            json={"email": "ali@example.com", "password": "secret123", "full_name": "Ali"},
        )

        response = client.post(
            f"{AUTH}/signin", json={"email": "ali@example.com", "password": "wrong"}
        )

        assert response.status_code == 401

    def test_bad_refresh_token(self, client: TestClient, fake_auth):
        response = client.post(f"{AUTH}/refresh", json={"refresh_token": "nope"})

        assert response.status_code == 401
