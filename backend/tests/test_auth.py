"""
Authentication tests.

Verifies:
- Login returns a token plus the resolved access block
- Refused logins are audited with their reason
- Deactivated accounts get 403 only after a correct password
- Repeated failures lock the account under any alias (429)
- Sessions end after idle or absolute timeouts
- Logout and password change
"""

from datetime import timedelta

from harierp.models import SecurityEvent, SessionToken
from harierp.services import login_throttle_service
from harierp.time_utils import utcnow

from conftest import PASSWORD, auth_headers, get_auth_token


# =============================================================================
# LOGIN
# =============================================================================


class TestLogin:

    def test_login_returns_token_and_access(self, client, users):
        resp = client.post("/api/auth/login", json={"username": "sales", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.json
        assert len(body["token"]) == 64
        assert body["role"] == "SalesManager"
        assert body["permission_roles"] == ["SalesCoordinator"]
        assert "CREATE_SALE" in body["permissions"]
        assert "Sales" in body["modules"]
        assert "Admin" not in body["modules"]

    def test_login_by_numeric_id(self, client, users):
        resp = client.post("/api/auth/login", json={"username": str(users["lab"].id), "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json["user"]["username"] == "lab"

    def test_token_is_stored_hashed(self, client, users, db_session):
        token = get_auth_token(client, "admin", PASSWORD)
        stored = db_session.query(SessionToken).filter_by(user_id=users["admin"].id).one()
        assert stored.token_hash != token
        assert len(stored.token_hash) == 64

    def test_missing_fields_is_400(self, client, users):
        resp = client.post("/api/auth/login", json={"username": "admin"})
        assert resp.status_code == 400

    def test_unknown_user_is_401_and_audited(self, client, users, db_session):
        resp = client.post("/api/auth/login", json={"username": "ghost", "password": PASSWORD})
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid credentials"
        event = db_session.query(SecurityEvent).filter_by(event_type="LOGIN_FAILED").one()
        assert event.reason == "User not found"
        assert event.action == "ghost"

    def test_wrong_password_is_401_and_audited(self, client, users, db_session):
        resp = client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})
        assert resp.status_code == 401
        event = db_session.query(SecurityEvent).filter_by(event_type="LOGIN_FAILED").one()
        assert event.reason == "Incorrect password"
        assert event.user_id == users["admin"].id

    def test_deactivated_user_is_403(self, client, users, db_session):
        users["sales"].is_active = False
        db_session.commit()
        resp = client.post("/api/auth/login", json={"username": "sales", "password": PASSWORD})
        assert resp.status_code == 403
        assert "deactivated" in resp.json["error"]

    def test_deactivated_user_with_wrong_password_is_401(self, client, users, db_session):
        users["sales"].is_active = False
        db_session.commit()
        resp = client.post("/api/auth/login", json={"username": "sales", "password": "Wrong123!"})
        assert resp.status_code == 401

    def test_success_is_audited(self, client, users, db_session):
        get_auth_token(client, "finance", PASSWORD)
        event = db_session.query(SecurityEvent).filter_by(event_type="LOGIN_SUCCESS").one()
        assert event.user_id == users["finance"].id


# =============================================================================
# LOCKOUT
# =============================================================================


class TestLockout:

    def test_warning_when_few_attempts_remain(self, client, users):
        resp = None
        for _ in range(login_throttle_service.MAX_FAILED_ATTEMPTS - 2):
            resp = client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})
        assert resp.status_code == 401
        assert resp.json["warning"] == "2 attempts remaining before account lockout"

    def test_locked_after_max_failures(self, client, users):
        for _ in range(login_throttle_service.MAX_FAILED_ATTEMPTS):
            client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})

        resp = client.post("/api/auth/login", json={"username": "admin", "password": PASSWORD})
        assert resp.status_code == 429
        assert resp.json["locked"] is True
        assert resp.json["retry_after_seconds"] > 0

    def test_lockout_is_per_identifier(self, client, users):
        for _ in range(login_throttle_service.MAX_FAILED_ATTEMPTS):
            client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})

        resp = client.post("/api/auth/login", json={"username": "finance", "password": PASSWORD})
        assert resp.status_code == 200

    def test_failures_by_name_lock_the_numeric_id(self, client, users):
        for _ in range(login_throttle_service.MAX_FAILED_ATTEMPTS):
            client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})

        resp = client.post("/api/auth/login", json={"username": str(users["admin"].id), "password": PASSWORD})
        assert resp.status_code == 429

    def test_failures_by_id_and_name_share_one_counter(self, client, users):
        half = login_throttle_service.MAX_FAILED_ATTEMPTS // 2
        for _ in range(half):
            client.post("/api/auth/login", json={"username": str(users["admin"].id), "password": "Wrong123!"})
        for _ in range(login_throttle_service.MAX_FAILED_ATTEMPTS - half):
            client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})

        resp = client.post("/api/auth/login", json={"username": "admin", "password": PASSWORD})
        assert resp.status_code == 429


# =============================================================================
# SESSIONS
# =============================================================================


class TestSessions:

    def test_me_requires_token(self, client, users):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json["error"] == "Authentication required"

    def test_me_with_bad_token(self, client, users):
        resp = client.get("/api/auth/me", headers=auth_headers("not-a-token"))
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid or expired token"

    def test_me_returns_user(self, client, production_headers):
        resp = client.get("/api/auth/me", headers=production_headers)
        assert resp.status_code == 200
        assert resp.json["user"]["username"] == "production"
        assert set(resp.json["permission_roles"]) == {"Production", "Store", "Inventory", "Purchases"}
        assert resp.json["session"]["is_revoked"] is False

    def test_logout_revokes_token(self, client, admin_headers):
        resp = client.post("/api/auth/logout", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get("/api/auth/me", headers=admin_headers).status_code == 401

    def test_deactivation_ends_existing_sessions(self, client, users, db_session, sales_headers):
        users["sales"].is_active = False
        db_session.commit()
        assert client.get("/api/auth/me", headers=sales_headers).status_code == 401

    def test_idle_session_is_revoked(self, client, users, db_session, sales_headers):
        session = db_session.query(SessionToken).filter_by(user_id=users["sales"].id).one()
        session.last_used_at = utcnow() - timedelta(minutes=6)
        db_session.commit()

        assert client.get("/api/auth/me", headers=sales_headers).status_code == 401
        db_session.refresh(session)
        assert session.is_revoked is True
        assert session.revoked_reason == "Idle timeout"

    def test_recent_activity_keeps_session_alive(self, client, users, db_session, sales_headers):
        session = db_session.query(SessionToken).filter_by(user_id=users["sales"].id).one()
        session.last_used_at = utcnow() - timedelta(minutes=4)
        db_session.commit()

        assert client.get("/api/auth/me", headers=sales_headers).status_code == 200

    def test_expired_session_is_revoked(self, client, users, db_session, sales_headers):
        session = db_session.query(SessionToken).filter_by(user_id=users["sales"].id).one()
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert client.get("/api/auth/me", headers=sales_headers).status_code == 401
        db_session.refresh(session)
        assert session.is_revoked is True
        assert session.revoked_reason == "Expired"


# =============================================================================
# PASSWORD CHANGE
# =============================================================================


class TestChangePassword:

    def test_change_password(self, client, finance_headers):
        resp = client.post("/api/auth/change-password", headers=finance_headers, json={
            "old_password": PASSWORD,
            "new_password": "NewPassword456!",
        })
        assert resp.status_code == 200
        assert get_auth_token(client, "finance", "NewPassword456!")

    def test_wrong_current_password_is_401(self, client, finance_headers):
        resp = client.post("/api/auth/change-password", headers=finance_headers, json={
            "old_password": "Wrong123!",
            "new_password": "NewPassword456!",
        })
        assert resp.status_code == 401

    def test_weak_new_password_is_400(self, client, finance_headers):
        resp = client.post("/api/auth/change-password", headers=finance_headers, json={
            "old_password": PASSWORD,
            "new_password": "short",
        })
        assert resp.status_code == 400
        assert "at least 8 characters" in resp.json["error"]
