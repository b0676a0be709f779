"""Authentication module for Taskdesk services.

Provides stateless OAuth2 Bearer token authentication and role checks. Applications plug in their own token
verifier (e.g. JWT decoding) while using this module to guard endpoints.
"""

import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer


class Scope(str, Enum):
    """Who may call an endpoint."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


class _TokenVerifierState:
    """Module-level state for token verifier."""

    verifier: Optional[Union[Callable[[str], Any], Callable[[str], Awaitable[Any]]]] = None


_state = _TokenVerifierState()


def set_token_verifier(verifier: Optional[Union[Callable[[str], Any], Callable[[str], Awaitable[Any]]]]):
    """Set the token verification function.

    The verifier can be synchronous or asynchronous. It receives the raw bearer token and returns the caller's
    identity (a dict or an object with a ``role`` attribute), raising ``HTTPException`` for invalid tokens.

    Example:
        def verify(token: str) -> dict:
            claims = jwt.decode(token, secret, algorithms=["HS256"])
            return {"id": claims["sub"], "role": claims["role"]}

        set_token_verifier(verify)
    """
    _state.verifier = verifier


def get_token_verifier() -> Optional[Callable[[str], Any]]:
    """Get the current token verification function."""
    return _state.verifier


bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="Bearer",
    description="JWT Bearer token authentication. Format: Bearer <token>",
)


async def verify_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Any:
    """Verify the Bearer token and return the caller's identity.

    The identity is also attached to ``request.state.user`` so middleware and handlers can read it.

    Raises:
        HTTPException: 401 if the token is missing or fails verification.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials
    verifier = get_token_verifier()

    if verifier is None:
        user_info: Any = {"token": token, "authenticated": True}
    else:
        try:
            if inspect.iscoroutinefunction(verifier):
                user_info = await verifier(token)
            else:
                user_info = verifier(token)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Token verification failed: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

    request.state.user = user_info
    return user_info


def _role_of(user: Any) -> Optional[str]:
    role = user.get("role") if isinstance(user, dict) else getattr(user, "role", None)
    return getattr(role, "value", role)


def require_roles(*roles: Union[str, Enum]) -> Callable[..., Awaitable[Any]]:
    """Build a dependency that admits only callers whose role is one of ``roles``.

    Example:
        @app.get("/admin", dependencies=[Depends(require_roles(UserRole.ADMIN))])
        async def admin_only(): ...
    """
    allowed = {getattr(r, "value", r) for r in roles}

    async def _check_role(user: Any = Depends(verify_token)) -> Any:
        if _role_of(user) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check_role


def get_auth_dependencies(scope: Scope, roles: Optional[Iterable[Union[str, Enum]]] = None) -> List[Any]:
    """Get the route dependencies for an endpoint's scope and required roles.

    Declaring roles implies an authenticated scope.
    """
    roles = list(roles or [])
    if roles:
        return [Depends(require_roles(*roles))]
    if scope == Scope.AUTHENTICATED:
        return [Security(verify_token)]
    return []
