from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from fastapi import Depends
from passlib.context import CryptContext
from pydantic import BaseModel

from taskdesk.board.core.exceptions import UnauthorizedError
from taskdesk.board.core.settings import get_taskboard_config
from taskdesk.board.models.enums import UserRole
from taskdesk.services.auth import verify_token

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenData(BaseModel):
    """Decoded JWT payload."""

    sub: str
    email: str
    role: UserRole
    iat: int
    exp: int


class AuthenticatedUser(BaseModel):
    """Identity attached to the request once its token has been verified."""

    id: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def hash_password(password: str) -> str:
    """Hash a plain-text password with salted bcrypt."""
    return _pwd_context.hash(password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a plain password against the stored bcrypt hash."""
    try:
        return _pwd_context.verify(plain_password, stored_hash)
    except (ValueError, TypeError):
        return False


def _jwt_secret() -> str:
    config = get_taskboard_config()
    secret = config.get_secret("TASKBOARD", "JWT_SECRET")
    if not secret:
        raise RuntimeError("TASKBOARD__JWT_SECRET must not be empty")
    return secret


def create_access_token(subject: str, email: str, role: UserRole | str) -> str:
    """Create a signed JWT carrying the user id (``sub``), email and role."""
    cfg = get_taskboard_config().TASKBOARD
    now = datetime.now(timezone.utc)
    expires_in = int(cfg.JWT_EXPIRES_IN)

    payload: Dict[str, Any] = {
        "sub": subject,
        "email": email,
        "role": getattr(role, "value", role),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=cfg.JWT_ALGORITHM)


def decode_token(token: str) -> TokenData:
    """Decode and validate a JWT, returning a typed payload."""
    cfg = get_taskboard_config().TASKBOARD
    try:
        payload = jwt.decode(token, _jwt_secret(), algorithms=[cfg.JWT_ALGORITHM])
        return TokenData(**payload)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise UnauthorizedError("Invalid token")


def authenticate_token(token: str) -> AuthenticatedUser:
    """Token verifier for the service auth layer: JWT claims to request identity."""
    data = decode_token(token)
    return AuthenticatedUser(id=data.sub, email=data.email, role=data.role)


async def get_current_user(user: AuthenticatedUser = Depends(verify_token)) -> AuthenticatedUser:
    """FastAPI dependency returning the verified caller."""
    return user
