from __future__ import annotations

from datetime import timedelta

import pytest

from license_tracker.core.constants import DEFAULT_SESSION_DAYS
from license_tracker.core.enums import LicenseStatus, Role
from license_tracker.main import create_app

from fakes import driver_form


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, s_user):
    with client.session_transaction() as sess:
        sess.update(s_user.to_session())


def test_landing_and_signin_pages_render(client):
    assert client.get("/").status_code == 200
    assert client.get("/signin").status_code == 200


def test_dashboard_requires_login(client):
    resp = client.get("/dashboard")

    assert resp.status_code == 302
    assert "/signin" in resp.headers["Location"]


def test_signin_stores_user_in_session(client):
    resp = client.post("/signin", data={"email": "manager@example.com", "password": "password"})

    assert resp.status_code == 302
    assert "/dashboard" in resp.headers["Location"]
    with client.session_transaction() as sess:
        assert sess["user_id"] == 2
        assert sess["role"] == "manager"
        assert "password" not in sess


def test_signin_with_bad_password_stays_on_form(client):
    resp = client.post("/signin", data={"email": "manager@example.com", "password": "nope"})

    assert resp.status_code == 200
    assert b"Invalid email or password" in resp.data


def test_logout_clears_session(client, driver_user):
    _login(client, driver_user)

    client.get("/logout")

    with client.session_transaction() as sess:
        assert "user_id" not in sess


def test_wrong_role_gets_403(client, driver_user):
    _login(client, driver_user)

    assert client.get("/admin/drivers").status_code == 403
    assert client.get("/manager-approval").status_code == 403


def test_dashboard_renders_for_each_role(client, driver_user, manager_user, admin_user):
    for user in (driver_user, manager_user, admin_user):
        _login(client, user)
        assert client.get("/dashboard").status_code == 200


def test_admin_adds_and_lists_drivers(client, container, admin_user):
    _login(client, admin_user)

    resp = client.post("/admin/drivers/new", data=driver_form())
    assert resp.status_code == 302

    page = client.get("/admin/drivers?search=john")
    assert page.status_code == 200
    assert b"John Smith" in page.data
    assert container.driver_service.list_drivers().total == 1


def test_unknown_driver_details_is_404(client, admin_user):
    _login(client, admin_user)

    assert client.get("/admin/drivers/99").status_code == 404


def test_driver_submits_license_and_manager_approves(client, container, licenses_repo, driver_user, manager_user):
    _login(client, driver_user)
    resp = client.post(
        "/license-upload",
        data={"license_type": "Car", "license_number": "D1", "expiry_date": "2030-01-01", "penalty_points": "1"},
    )
    assert resp.status_code == 302
    [lic] = licenses_repo.list_licenses()
    assert lic.status == LicenseStatus.PENDING

    _login(client, manager_user)
    assert b"John Driver" in client.get("/manager-approval").data
    client.post(f"/manager-approval/{lic.license_id}/approve")

    assert licenses_repo.get_by_id(lic.license_id).status == LicenseStatus.APPROVED
    assert container.notification_service.unread_count(user_id=driver_user.user_id) == 1


def test_driver_reports_penalty_points(client, container, driver_user):
    container.driver_service.add_driver(
        current_role=Role.ADMIN, data=driver_form(email="driver@example.com", penalty_points="5")
    )
    _login(client, driver_user)

    resp = client.post("/penalty-points", data={"points": "3", "reason": "Speeding"}, follow_redirects=True)

    assert resp.status_code == 200
    assert b"high risk" in resp.data
    driver = container.drivers_repo.get_by_email("driver@example.com")
    assert driver.penalty_points == 8


def test_notifications_read_and_clear(client, container, driver_user):
    nid = container.notification_service.notify(user_id=driver_user.user_id, message="Hello there")
    _login(client, driver_user)

    assert b"Hello there" in client.get("/notifications").data
    client.post(f"/notifications/{nid}/read")
    assert container.notification_service.unread_count(user_id=driver_user.user_id) == 0

    client.post("/notifications/clear")
    assert container.notification_service.list_for_user(user_id=driver_user.user_id).total == 0


def _add_driver(container, **overrides) -> int:
    return container.driver_service.add_driver(current_role=Role.ADMIN, data=driver_form(**overrides))


def test_edit_form_is_prefilled_and_saves(client, container, admin_user):
    driver_id = _add_driver(container)
    _login(client, admin_user)

    form = client.get(f"/admin/drivers/{driver_id}/edit")
    assert form.status_code == 200
    assert b"john.smith@example.com" in form.data
    assert b"CK12345678" in form.data

    resp = client.post(f"/admin/drivers/{driver_id}/edit", data={"department": "Parks", "penalty_points": "4"})
    assert resp.status_code == 302
    assert f"/admin/drivers/{driver_id}" in resp.headers["Location"]
    driver = container.driver_service.get_driver(driver_id)
    assert driver.department == "Parks"
    assert driver.penalty_points == 4


def test_edit_with_invalid_data_keeps_record(client, container, admin_user):
    driver_id = _add_driver(container)
    _login(client, admin_user)

    resp = client.post(f"/admin/drivers/{driver_id}/edit", data={"email": "broken"})

    assert resp.status_code == 200
    assert b"valid email" in resp.data
    assert container.driver_service.get_driver(driver_id).email == "john.smith@example.com"


def test_driver_details_lists_submissions_and_expiry(client, container, licenses_repo, admin_user):
    driver_id = _add_driver(container, name="John Driver", email="driver@example.com", license_expiry_date="2020-01-01")
    licenses_repo.add(driver_id=1, driver_name="John Driver", license_number="D12345678")
    _login(client, admin_user)

    resp = client.get(f"/admin/drivers/{driver_id}")

    assert resp.status_code == 200
    assert b"D12345678" in resp.data
    assert b"This license expired" in resp.data


def test_roster_marks_expired_licenses(client, container, admin_user):
    _add_driver(container, license_expiry_date="2020-01-01")
    _login(client, admin_user)

    assert b"Expired" in client.get("/admin/drivers").data


def test_delete_driver_removes_record(client, container, admin_user):
    driver_id = _add_driver(container)
    _login(client, admin_user)

    resp = client.post(f"/admin/drivers/{driver_id}/delete", follow_redirects=True)

    assert resp.status_code == 200
    assert b"Driver John Smith has been deleted" in resp.data
    assert container.driver_service.list_drivers().total == 0


def test_penalty_points_without_roster_record(client, driver_user):
    _login(client, driver_user)

    resp = client.post("/penalty-points", data={"points": "2", "reason": "Speeding"}, follow_redirects=True)

    assert b"Driver record not found for your account" in resp.data


def test_penalty_points_over_the_limit_warns(client, container, driver_user):
    _add_driver(container, email="driver@example.com", penalty_points="11")
    _login(client, driver_user)

    resp = client.post("/penalty-points", data={"points": "3", "reason": "Speeding"}, follow_redirects=True)

    assert b"exceed the maximum penalty points" in resp.data
    assert container.drivers_repo.get_by_email("driver@example.com").penalty_points == 12


def test_session_lifetime_is_fixed_at_startup(app, client):
    assert app.permanent_session_lifetime == timedelta(days=DEFAULT_SESSION_DAYS)

    client.post("/signin", data={"email": "manager@example.com", "password": "password", "remember_me": "1"})

    assert app.permanent_session_lifetime == timedelta(days=DEFAULT_SESSION_DAYS)
    with client.session_transaction() as sess:
        assert sess.permanent
