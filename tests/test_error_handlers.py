import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from restaurant_api.core.error_handlers import register_error_handlers
from restaurant_api.core.errors import AuthError, ConflictError, InternalServiceError
from restaurant_api.core.logging_setup import JsonFormatter


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/conflict")
    def conflict():
        raise ConflictError("Cannot delete category with products", reason="category_has_products")

    @app.get("/forbidden")
    def forbidden():
        raise AuthError("Account is deactivated", reason="account_deactivated", status_code=403)

    @app.get("/internal")
    def internal():
        raise InternalServiceError("connection pool exhausted on db-1")

    @app.get("/database")
    def database():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    return TestClient(app)


def test_catalog_errors_keep_status_and_reason():
    client = _build_client()

    conflict = client.get("/conflict")
    forbidden = client.get("/forbidden")

    assert conflict.status_code == 422
    assert conflict.json() == {"error": "Cannot delete category with products", "reason": "category_has_products"}
    assert forbidden.status_code == 403
    assert "WWW-Authenticate" not in forbidden.headers


def test_internal_errors_hide_their_cause():
    client = _build_client()

    internal = client.get("/internal")
    database = client.get("/database")

    assert internal.status_code == 500
    assert internal.json() == {"error": "Internal server error", "reason": "internal_error"}
    assert database.status_code == 500
    assert database.json() == {"error": "Internal server error", "reason": "internal_error"}


def test_json_formatter_masks_secrets():
    record = logging.LogRecord(
        name="restaurant_api.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="login password=%s token=%s",
        args=("hunter22", "abc.def"),
        exc_info=None,
    )
    record.status_code = 200

    output = JsonFormatter("%(message)s").format(record)

    assert "hunter22" not in output
    assert "abc.def" not in output
    assert '"status_code": 200' in output
    assert '"module": "restaurant_api.test"' in output
