from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_api.core.database import get_db
from restaurant_api.core.errors import AuthError
from restaurant_api.deps import get_catalog_store, get_current_user
from restaurant_api.models.user import User
from restaurant_api.schemas.catalog import LoginPayload, RegisterPayload
from restaurant_api.services.auth import TokenIssuer, get_token_issuer, hash_password, verify_password
from restaurant_api.services.catalog_store import CatalogStore
from restaurant_api.services.presenters import user_to_dict

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)
AUTH_PREFIX = "[AUTH]"


@router.post("/register", status_code=201)
def register(payload: RegisterPayload, store: CatalogStore = Depends(get_catalog_store)):
    user = store.create(
        User,
        {
            "name": payload.name,
            "email": payload.email.lower(),
            "password_hash": hash_password(payload.password),
        },
    )
    logger.info("%s registered user_id=%s", AUTH_PREFIX, user.id)
    return {"user": user_to_dict(user)}


@router.post("/login")
def login(
    payload: LoginPayload,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("%s login failed email=%s", AUTH_PREFIX, email)
        raise AuthError("Invalid email or password", reason="invalid_credentials")
    if not user.active:
        raise AuthError("Account is deactivated", reason="account_deactivated", status_code=403)

    logger.info("%s login ok user_id=%s", AUTH_PREFIX, user.id)
    return {"user": user_to_dict(user), "token": issuer.issue(user)}


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return user_to_dict(current_user)
