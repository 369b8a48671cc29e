from tiffin.data.models.admin import AdminModel

from conftest import CHEF, auth

REGISTRATION = {
    "first_name": "Teeku",
    "last_name": "Masi",
    "email": CHEF.email,
    "security_code": "1511",
}


def test_register_admin(client, db):
    resp = client.post("/admins/register", json=REGISTRATION)

    assert resp.status_code == 201
    code = resp.json()["code"]
    assert len(code) == 5 and code.isdigit()
    assert db.query(AdminModel).filter_by(email=CHEF.email).count() == 1


def test_register_with_wrong_code(client, db):
    resp = client.post("/admins/register", json=dict(REGISTRATION, security_code="0000"))

    assert resp.status_code == 400
    assert resp.json()["detail"]["fields"] == {"security_code": "Invalid security code"}
    assert db.query(AdminModel).count() == 0


def test_register_requires_all_fields(client):
    resp = client.post("/admins/register", json=dict(REGISTRATION, last_name=""))

    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "All fields are required"


def test_register_twice(client):
    client.post("/admins/register", json=REGISTRATION)
    resp = client.post("/admins/register", json=REGISTRATION)

    assert resp.status_code == 400


def test_admin_me(client, admin):
    assert client.get("/admins/me", headers=auth("chef-token")).json()["email"] == CHEF.email
    assert client.get("/admins/me", headers=auth()).status_code == 403
