from coursehub.core.config import settings
from coursehub.crud.student import student as crud_student
from tests.helpers import factories
from tests.helpers.asserts import api_call, assert_error

SUPERSEDED = "Session expired. You have been logged in from another device."


def _me(client, token):
    return client.get("/student/auth/me", headers={"Authorization": f"Bearer {token}"})


class TestRegistration:
    def test_register_signs_the_student_in(self, client, db_session):
        response = client.post("/student/auth/register", json={
            "email": "New.Student@Example.com",
            "password": "supersecret",
            "first_name": "Ada",
            "last_name": "Lovelace",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "new.student@example.com"
        assert body["data"]["user"]["has_password"] is True
        assert settings.STUDENT_COOKIE_NAME in response.cookies

        token = body["data"]["token"]["access_token"]
        client.cookies.clear()
        assert _me(client, token).status_code == 200

        student = crud_student.get_by_email(db_session, email="new.student@example.com")
        assert student.active_session_token
        assert student.session_version == 1

    def test_duplicate_email_is_rejected(self, client, student_factory):
        student = student_factory()
        response = client.post("/student/auth/register", json={
            "email": student.email,
            "password": "supersecret",
            "first_name": "Again",
            "last_name": "Student",
        })
        assert_error(response, 409)

    def test_short_password_fails_validation(self, client):
        response = client.post("/student/auth/register", json={
            "email": "short@example.com",
            "password": "abc",
            "first_name": "Short",
            "last_name": "Password",
        })
        body = assert_error(response, 422)
        assert body["error"]["code"] == "VALIDATION_ERROR"


class TestLogin:
    def test_wrong_password(self, client, student_factory):
        student = student_factory()
        response = client.post("/student/auth/login", json={"email": student.email, "password": "not-the-one"})
        assert_error(response, 401, "Invalid email or password")

    def test_unknown_email(self, client):
        response = client.post("/student/auth/login", json={"email": "nobody@example.com", "password": "whatever1"})
        assert_error(response, 401, "Invalid email or password")

    def test_social_account_cannot_use_password(self, client, student_factory):
        student = student_factory(password=None)
        response = client.post("/student/auth/login", json={"email": student.email, "password": "testpass123"})
        assert_error(response, 401)

    def test_blocked_student_cannot_sign_in(self, client, student_factory):
        student = student_factory(blocked=True)
        response = client.post("/student/auth/login", json={"email": student.email, "password": "testpass123"})
        assert_error(response, 403, "Your account has been blocked. Please contact support.")

    def test_login_records_address(self, client, db_session, student_factory):
        student = student_factory()
        client.post(
            "/student/auth/login",
            json={"email": student.email, "password": "testpass123"},
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
        )
        db_session.refresh(student)
        assert student.last_login_ip == "203.0.113.9"
        assert student.last_login_at is not None


class TestSingleSession:
    def test_second_login_supersedes_first(self, client, student_factory):
        student = student_factory()
        first = factories.login_student(client, student.email)
        second = factories.login_student(client, student.email)

        assert_error(_me(client, first), 401, SUPERSEDED)
        assert _me(client, second).status_code == 200

    def test_logout_ends_the_session(self, client, student_factory):
        student = student_factory()
        token = factories.login_student(client, student.email)

        api_call(client, "POST", "/student/auth/logout", headers={"Authorization": f"Bearer {token}"})

        assert_error(_me(client, token), 401)

    def test_stale_logout_leaves_new_session_alone(self, client, student_factory):
        student = student_factory()
        old = factories.login_student(client, student.email)
        new = factories.login_student(client, student.email)

        response = client.post("/student/auth/logout", headers={"Authorization": f"Bearer {old}"})

        assert response.status_code == 200
        assert _me(client, new).status_code == 200

    def test_logout_without_credential_is_harmless(self, client):
        response = client.post("/student/auth/logout")
        assert response.status_code == 200

    def test_cookie_authenticates(self, client, student_factory):
        student = student_factory()
        response = client.post("/student/auth/login", json={"email": student.email, "password": "testpass123"})
        assert response.status_code == 200

        me = client.get("/student/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["id"] == student.id
        client.cookies.clear()

    def test_change_password_rotates_session(self, client, student_factory):
        student = student_factory()
        old = factories.login_student(client, student.email)

        response = client.put(
            "/student/auth/change-password",
            headers={"Authorization": f"Bearer {old}"},
            json={"current_password": "testpass123", "new_password": "brand-new-pass"},
        )
        assert response.status_code == 200
        new = response.json()["data"]["token"]["access_token"]
        client.cookies.clear()

        assert_error(_me(client, old), 401, SUPERSEDED)
        assert _me(client, new).status_code == 200
        assert factories.login_student(client, student.email, "brand-new-pass")

    def test_change_password_checks_current(self, client, student_login):
        _, headers = student_login()
        response = client.put(
            "/student/auth/change-password",
            headers=headers,
            json={"current_password": "wrong-one", "new_password": "brand-new-pass"},
        )
        assert_error(response, 400, "Current password is incorrect.")


class TestGuardResponses:
    def test_missing_credential(self, client):
        assert_error(client.get("/student/auth/me"), 401, "Access denied. No token provided.")

    def test_garbage_credential(self, client):
        response = client.get("/student/auth/me", headers={"Authorization": "Bearer nonsense"})
        assert_error(response, 401, "Invalid token.")

    def test_staff_credential_is_not_accepted(self, client, admin_headers):
        assert_error(client.get("/student/auth/me", headers=admin_headers), 401, "Invalid token.")

    def test_deactivated_account(self, client, db_session, student_login):
        student, headers = student_login()
        crud_student.update(db_session, db_obj=student, obj_in={"is_active": False})
        assert_error(client.get("/student/auth/me", headers=headers), 403, "Account is deactivated.")


def test_update_profile(client, student_login):
    _, headers = student_login()
    response = api_call(client, "PUT", "/student/auth/profile", headers=headers, json={"city": "Lagos", "occupation": "Engineer"})
    data = response.json()["data"]
    assert data["city"] == "Lagos"
    assert data["occupation"] == "Engineer"


def test_empty_profile_update_is_rejected(client, student_login):
    _, headers = student_login()
    response = client.put("/student/auth/profile", headers=headers, json={})
    assert_error(response, 422)
