"""
Admin user signup, listing and login
"""
import pytest
from jose import jwt

from app.config import settings
from app.models import User


def _signup(client, **overrides):
    payload = {
        "username": "mariam01",
        "email": "Mariam@ProcureQA.example",
        "password": "Secret#123",
        "role": "Admin",
        "phone_number": "+974 55123456",
    }
    payload.update(overrides)
    return client.post("/api/admin/users", json=payload)


def test_signup_returns_token_and_hashes_password(client, db_session):
    resp = _signup(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "mariam@procureqa.example"
    assert "password" not in body["user"] and "password_hash" not in body["user"]
    claims = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == body["user"]["id"]
    assert claims["role"] == "Admin"
    stored = db_session.query(User).one()
    assert stored.password_hash != "Secret#123"
    assert stored.password_hash.startswith("$2")


@pytest.mark.parametrize(
    "field,value",
    [
        ("username", "ab"),
        ("username", "has space"),
        ("email", "not-an-email"),
        ("password", "Sh#1a"),
        ("password", "nouppercase#1"),
        ("password", "NoSpecial123"),
        ("password", "WayTooLong#123456"),
        ("role", "Manager"),
        ("phone_number", "55123456"),
    ],
)
def test_signup_field_rules(client, field, value):
    resp = _signup(client, **{field: value})

    assert resp.status_code == 400


def test_signup_rejects_taken_email_and_username(client):
    assert _signup(client).status_code == 201

    same_email = _signup(client, username="other01")
    same_username = _signup(client, email="other@procureqa.example")

    assert same_email.status_code == 400
    assert same_username.status_code == 400


def test_login(client):
    _signup(client)

    ok = client.post("/api/admin/login", json={"email": "mariam@procureqa.example", "password": "Secret#123"})
    wrong = client.post("/api/admin/login", json={"email": "mariam@procureqa.example", "password": "Wrong#1234"})
    unknown = client.post("/api/admin/login", json={"email": "nobody@procureqa.example", "password": "Secret#123"})

    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"
    assert wrong.status_code == 400
    assert unknown.status_code == 400


def test_list_users_filter_sort_paginate(client):
    _signup(client, username="zaid01", email="zaid@procureqa.example", role="Sales")
    _signup(client, username="amal01", email="amal@procureqa.example")
    _signup(client, username="huda01", email="huda@other.example")

    sorted_page = client.get("/api/admin/users", params={"sortBy": "username:asc", "perPage": 2}).json()
    filtered = client.get("/api/admin/users", params={"email": "procureqa"}).json()

    assert [u["username"] for u in sorted_page["data"]] == ["amal01", "huda01"]
    assert sorted_page["pagination"]["totalPages"] == 2
    assert sorted(u["username"] for u in filtered["data"]) == ["amal01", "zaid01"]
    assert client.get("/api/admin/users", params={"sortBy": "password_hash:asc"}).status_code == 400


def test_update_and_delete_user(client):
    user_id = _signup(client).json()["user"]["id"]

    updated = client.put(f"/api/admin/users/{user_id}", json={"role": "Sales", "password": "Newpass#99"})
    bad = client.put(f"/api/admin/users/{user_id}", json={"phone_number": "+974 123"})
    login = client.post("/api/admin/login", json={"email": "mariam@procureqa.example", "password": "Newpass#99"})

    assert updated.json()["role"] == "Sales"
    assert bad.status_code == 400
    assert login.status_code == 200
    assert client.delete(f"/api/admin/users/{user_id}").status_code == 200
    assert client.delete(f"/api/admin/users/{user_id}").status_code == 404
