from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

import bcrypt
from jose import JWTError, jwt

from restaurant_api.core.config import JWT_ALGORITHM, JWT_EXPIRE_MINUTES, JWT_SECRET_KEY
from restaurant_api.models.user import User

logger = logging.getLogger(__name__)
AUTH_PREFIX = "[AUTH]"


# =========================
# PASSWORD (bcrypt direto)
# =========================
def _normalize_password_for_bcrypt(password: str) -> bytes:
    """
    bcrypt só considera até 72 bytes.
    Se a senha passar disso, truncamos para não quebrar.
    """
    pw = (password or "").encode("utf-8")
    if len(pw) <= 72:
        return pw
    return pw[:72]


def hash_password(password: str) -> str:
    pw = _normalize_password_for_bcrypt(password)
    hashed = bcrypt.hashpw(pw, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        pw = _normalize_password_for_bcrypt(plain_password)
        ph = (password_hash or "").encode("utf-8")
        return bcrypt.checkpw(pw, ph)
    except ValueError:
        # hash malformado
        logger.warning("%s malformed password hash", AUTH_PREFIX)
        return False


# =========================
# TOKENS
# =========================
class TokenIssuer(Protocol):
    """Opaque bearer-token capability. The catalog never looks inside a token."""

    def issue(self, user: User) -> str: ...

    def verify(self, token: str) -> Optional[int]: ...


class JwtTokenIssuer:
    def __init__(
        self,
        secret: str = JWT_SECRET_KEY,
        algorithm: str = JWT_ALGORITHM,
        expire_minutes: int = JWT_EXPIRE_MINUTES,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: User) -> str:
        """
        IMPORTANTE:
        - "sub" precisa ser STRING (senão dá 'Subject must be a string')
        """
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self.expire_minutes)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[int]:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            logger.warning("%s invalid or expired token", AUTH_PREFIX)
            return None

        raw = str(payload.get("sub", "")).strip()
        if not raw.isdigit():
            return None
        return int(raw)


_default_issuer = JwtTokenIssuer()


def get_token_issuer() -> TokenIssuer:
    return _default_issuer
