"""Tests for bearer tokens, the auth dependency and development mode."""

from website_editor.core.config import settings
from website_editor.core.token_factory import create_token, decode_token
from tests.conftest import make_ui, make_user

BASE = "/api/website-editor"


class TestTokenFactory:

    def test_create_and_decode(self):
        token = create_token("user-1", "test-secret", role="user")
        payload = decode_token(token, "test-secret")
        assert payload is not None
        assert payload.sub == "user-1"
        assert payload.role == "user"

    def test_wrong_secret_returns_none(self):
        token = create_token("user-1", "correct-secret")
        assert decode_token(token, "wrong-secret") is None

    def test_expired_token_returns_none(self):
        token = create_token("user-1", "secret", expires_hours=-1)
        assert decode_token(token, "secret") is None

    def test_malformed_token_returns_none(self):
        assert decode_token("not.a.token", "secret") is None
        assert decode_token("", "secret") is None

    def test_tampered_payload_returns_none(self):
        header, payload, signature = create_token("user-1", "secret").split(".")
        forged = create_token("admin", "other-secret").split(".")[1]
        assert decode_token(f"{header}.{forged}.{signature}", "secret") is None


class TestAuthDisabledMode:
    """With AUTH_ENABLED=false every request acts as the seeded development user."""

    def test_dev_user_seeded(self, client):
        resp = client.get(f"{BASE}/users/{settings.dev_user_id}/uis")
        assert resp.status_code == 200

    def test_like_without_token(self, client, db):
        make_user(db, "owner")
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/like")
        assert resp.status_code == 200
        assert resp.json() == {"liked": True}


class TestAuthEnabledMode:

    def test_missing_token_rejected(self, client, db, auth_headers_for):
        make_user(db, "owner")
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/like")
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"

    def test_invalid_token_rejected(self, client, db, auth_headers_for):
        make_user(db, "owner")
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/fork", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_unknown_user_rejected(self, client, db, auth_headers_for):
        make_user(db, "owner")
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/like", headers=auth_headers_for("ghost"))
        assert resp.status_code == 401

    def test_inactive_user_rejected(self, client, db, auth_headers_for):
        make_user(db, "owner")
        make_user(db, "banned", is_active=False)
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/like", headers=auth_headers_for("banned"))
        assert resp.status_code == 401

    def test_token_identifies_caller(self, client, db, auth_headers_for):
        make_user(db, "owner")
        make_user(db, "fan")
        ui = make_ui(db, owner_id="owner")
        resp = client.post(f"{BASE}/uis/{ui.id}/fork", headers=auth_headers_for("fan"))
        assert resp.status_code == 201
        assert resp.json()["owner_id"] == "fan"

    def test_owner_checks_use_token_identity(self, client, db, auth_headers_for):
        make_user(db, "owner")
        make_user(db, "fan")
        ui = make_ui(db, owner_id="owner")
        assert client.delete(f"{BASE}/uis/{ui.id}", headers=auth_headers_for("fan")).status_code == 403
        assert client.delete(f"{BASE}/uis/{ui.id}", headers=auth_headers_for("owner")).status_code == 200

    def test_reads_stay_public(self, client, db, auth_headers_for):
        make_user(db, "owner")
        ui = make_ui(db, owner_id="owner")
        assert client.get(f"{BASE}/uis/{ui.id}").status_code == 200
        assert client.get(f"{BASE}/uis").status_code == 200
