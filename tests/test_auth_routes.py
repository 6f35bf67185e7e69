from restaurant_api.models.user import User
from restaurant_api.routers.auth import router as auth_router
from restaurant_api.routers.categories import router as categories_router
from restaurant_api.services.auth import JwtTokenIssuer, hash_password, verify_password
from tests.catalog_db import build_client, build_session

REGISTER_PAYLOAD = {"name": "Chef", "email": "chef@restaurant.com", "password": "secret123"}


def _build_client():
    db = build_session()
    return build_client(db, auth_router, categories_router, authenticated=False), db


def _login(client, email="chef@restaurant.com", password="secret123"):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_register_returns_user_without_password_hash():
    client, db = _build_client()

    response = client.post("/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "chef@restaurant.com"
    assert user["active"] is True
    assert "password_hash" not in user
    assert db.query(User).count() == 1


def test_register_duplicate_email_is_refused():
    client, _db = _build_client()
    client.post("/auth/register", json=REGISTER_PAYLOAD)

    response = client.post("/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 422
    assert response.json() == {"error": "Duplicate entry: email is already taken", "reason": "duplicate"}


def test_register_rejects_invalid_email_and_short_password():
    client, _db = _build_client()

    bad_email = client.post("/auth/register", json={**REGISTER_PAYLOAD, "email": "not-an-email"})
    short_password = client.post("/auth/register", json={**REGISTER_PAYLOAD, "password": "123"})

    assert bad_email.status_code == 422
    assert short_password.status_code == 422
    assert "password" in short_password.json()["error"]


def test_login_returns_token_usable_on_me_and_writes():
    client, _db = _build_client()
    client.post("/auth/register", json=REGISTER_PAYLOAD)

    login = _login(client)
    token = login.json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    me = client.get("/auth/me", headers=headers)
    created = client.post("/categories", json={"name": "Food"}, headers=headers)

    assert login.status_code == 200
    assert login.json()["user"]["email"] == "chef@restaurant.com"
    assert me.status_code == 200
    assert me.json()["name"] == "Chef"
    assert created.status_code == 201


def test_login_with_wrong_password():
    client, _db = _build_client()
    client.post("/auth/register", json=REGISTER_PAYLOAD)

    response = _login(client, password="wrong-password")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password", "reason": "invalid_credentials"}
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_login_with_unknown_email():
    client, _db = _build_client()

    assert _login(client, email="ghost@restaurant.com").status_code == 401


def test_deactivated_account_is_forbidden():
    client, db = _build_client()
    client.post("/auth/register", json=REGISTER_PAYLOAD)
    token = _login(client).json()["token"]

    user = db.query(User).filter(User.email == "chef@restaurant.com").one()
    user.active = False
    db.commit()

    login = _login(client)
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert login.status_code == 403
    assert login.json()["error"] == "Account is deactivated"
    assert me.status_code == 403


def test_me_without_or_with_bad_token():
    client, _db = _build_client()

    missing = client.get("/auth/me")
    invalid = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert missing.status_code == 401
    assert missing.json()["error"] == "Missing authorization token"
    assert invalid.status_code == 401
    assert invalid.json()["error"] == "Invalid token"


def test_token_for_deleted_user_is_invalid():
    client, db = _build_client()
    ghost = User(id=99, email="ghost@restaurant.com", name="Ghost", password_hash="x")
    token = JwtTokenIssuer().issue(ghost)

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert db.get(User, 99) is None


def test_token_signed_with_other_secret_is_rejected():
    token = JwtTokenIssuer(secret="other-secret").issue(User(id=1))

    assert JwtTokenIssuer().verify(token) is None
    assert JwtTokenIssuer(secret="other-secret").verify(token) == 1


def test_password_hashing_round_trip():
    password_hash = hash_password("secret123")

    assert password_hash.startswith("$2")
    assert verify_password("secret123", password_hash) is True
    assert verify_password("wrong", password_hash) is False
    assert verify_password("secret123", "not-a-bcrypt-hash") is False
