"""
FastAPI Dependencies
Shared dependencies for database access, request context and authorization.
"""
from datetime import datetime, timedelta, timezone
from typing import Annotated, Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.core.config import settings
from vacancies.core.context import RequestContext, new_request_id
from vacancies.core.exceptions import AuthenticationError, AuthorizationError
from vacancies.database import get_db

# =============================================================================
# Database Dependency
# =============================================================================

AsyncSessionDep = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# Request Context
# =============================================================================


def get_request_context(request: Request) -> RequestContext:
    """Context for the current request, keyed by the middleware-assigned id."""
    request_id = getattr(request.state, "request_id", None) or new_request_id()
    return RequestContext(request_id=request_id)


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]


# =============================================================================
# JWT Token Handling
# =============================================================================

ACCESS_TOKEN_EXPIRE_MINUTES = 30

security = HTTPBearer(auto_error=False)


def create_access_token(
    subject: str,
    roles: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token carrying `roles`."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "roles": list(roles), "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and validate a token; raises JWTError if invalid or expired."""
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("sub") is None:
        raise JWTError("Token missing subject")
    return payload


def _token_roles(payload: dict) -> set[str]:
    roles = payload.get("roles") or payload.get("role") or []
    if isinstance(roles, str):
        roles = [roles]
    return set(roles)


async def require_admin(
    ctx: RequestContextDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> RequestContext:
    """
    Gate category mutations behind the admin role.

    A pass-through when authorization is disabled in settings.
    """
    if not settings.auth_enabled:
        return ctx

    if credentials is None:
        raise AuthenticationError()

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise AuthenticationError()

    if settings.admin_role not in _token_roles(payload):
        raise AuthorizationError()

    return RequestContext(request_id=ctx.request_id, principal=str(payload["sub"]))


AdminContextDep = Annotated[RequestContext, Depends(require_admin)]
