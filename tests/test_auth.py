from flask_jwt_extended import decode_token

from tests.conftest import make_user


def login(client, email, password="Secret@123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_issues_token_with_role(client):
    trainer = make_user("trainer", email="coach@example.com")

    resp = login(client, "Coach@Example.com")
    data = resp.get_json()

    assert resp.status_code == 200
    assert data["success"] is True
    assert data["user"] == {"id": trainer.id, "name": trainer.name, "role": "trainer"}

    claims = decode_token(data["accessToken"])
    assert claims["sub"] == trainer.id
    assert claims["role"] == "trainer"


def test_token_from_login_opens_trainer_endpoints(client):
    make_user("trainer", email="coach@example.com")
    token = login(client, "coach@example.com").get_json()["accessToken"]

    resp = client.get("/trainers/customers", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_wrong_password(client):
    make_user("trainer", email="coach@example.com")
    resp = login(client, "coach@example.com", "wrong")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_unknown_email(client):
    resp = login(client, "ghost@example.com")
    assert resp.status_code == 401


def test_pending_account(client):
    make_user("trainer", email="new@example.com", status="pending")
    resp = login(client, "new@example.com")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Account is pending approval"


def test_suspended_account(client):
    make_user("trainer", email="gone@example.com", status="suspended")
    assert login(client, "gone@example.com").status_code == 403


def test_missing_fields(client):
    resp = client.post("/api/auth/login", json={"email": "coach@example.com"})
    assert resp.status_code == 400


def test_non_json_body(client):
    resp = client.post("/api/auth/login", data="email=x", content_type="text/plain")
    assert resp.status_code == 400
