# restaurant_api/deps.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from restaurant_api.core.database import get_db
from restaurant_api.core.errors import AuthError
from restaurant_api.core.request_context import set_request_context
from restaurant_api.models.user import User
from restaurant_api.services.auth import TokenIssuer, get_token_issuer
from restaurant_api.services.catalog_store import CatalogStore
from restaurant_api.services.category_tree import TreeBuilder
from restaurant_api.services.integrity_guard import IntegrityGuard
from restaurant_api.services.menu_assembler import MenuAssembler

# auto_error=False: a ausência do header vira AuthError (401) com corpo padronizado
bearer_scheme = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)


def get_integrity_guard(db: Session = Depends(get_db)) -> IntegrityGuard:
    return IntegrityGuard(db)


def get_tree_builder(db: Session = Depends(get_db)) -> TreeBuilder:
    return TreeBuilder(db)


def get_menu_assembler(db: Session = Depends(get_db)) -> MenuAssembler:
    return MenuAssembler(db)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """Resolve o bearer token para um usuário ativo."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing authorization token", reason="missing_token")

    user_id = issuer.verify(credentials.credentials)
    if user_id is None:
        raise AuthError("Invalid token", reason="invalid_token")

    user = db.get(User, user_id)
    if user is None:
        logger.warning("[AUTH] token for unknown user_id=%s", user_id)
        raise AuthError("Invalid token", reason="invalid_token")
    if not user.active:
        raise AuthError("Account is deactivated", reason="account_deactivated", status_code=403)

    request.state.user = user
    set_request_context(user_id=str(user.id))
    return user
