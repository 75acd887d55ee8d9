from conftest import auth_headers


def test_signup_and_signin(client):
    response = client.post(
        "/auth/signup",
        json={"name": "New Guest", "email": "new@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["role"] == "user"
    assert body["data"]["token_type"] == "bearer"

    response = client.post(
        "/auth/signin", json={"email": "new@example.com", "password": "secret123"}
    )
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "new@example.com"


def test_duplicate_signup_conflicts(client, guest):
    response = client.post(
        "/auth/signup",
        json={"name": "Again", "email": guest.email, "password": "secret123"},
    )
    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User already exists"}


def test_admin_role_cannot_be_self_assigned(client):
    response = client.post(
        "/auth/signup",
        json={"name": "Sneaky", "email": "sneaky@example.com", "password": "secret123", "role": "admin"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["errors"][0]["field"] == "role"


def test_wrong_password_is_unauthorized(client, guest):
    response = client.post("/auth/signin", json={"email": guest.email, "password": "wrong-pass"})
    assert response.status_code == 401


def test_me_requires_token(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["message"] == "No token provided. Please login first."


def test_me_accepts_cookie(client, guest):
    token = auth_headers(guest)["Authorization"].split(" ", 1)[1]
    client.cookies.set("authToken", token)
    response = client.get("/auth/me")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == guest.id
