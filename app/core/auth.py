# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.route_guard import ALL_ROLES, GuardState, Role, evaluate
from app.core.session import AuthSession
from app.database import get_session

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support anonymous visitors.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_auth_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
):
    """
    Build the AuthSession for this request.

    Flow:
      1. No Authorization header => anonymous AuthSession.
      2. Decode JWT => 'sub' (auth user id), 'email', 'user_metadata'.
      3. init() resolves (or provisions) the profile.
      4. dispose() runs once the response has been produced.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        auth = AuthSession(session)
    else:
        payload = decode_access_token(credentials.credentials)
        sub = payload.get("sub")
        if not sub:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token missing sub",
            )
        # Supabase provides sub as a string; enforce UUID
        try:
            user_id = uuid.UUID(sub)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid sub in token",
            )
        auth = AuthSession(
            session,
            user_id=user_id,
            email=payload.get("email"),
            metadata=payload.get("user_metadata") or {},
        )

    auth.init()
    try:
        yield auth
    finally:
        auth.dispose()


def require_auth(auth: AuthSession = Depends(get_auth_session)) -> AuthSession:
    """
    Enforce authentication (any role).

    Raises:
        HTTPException(401): anonymous visitor.
    """
    return _enforce(auth, ALL_ROLES)


def require_roles(*roles: Role):
    """
    Dependency factory enforcing that the caller holds one of `roles`.

    Guard states map to:
      - UNAUTHENTICATED -> 401
      - PENDING_PROFILE -> 503 with Retry-After
      - WRONG_ROLE      -> 403 naming the required role(s)
      - UNAPPROVED      -> 403 (vendor awaiting approval)

    Usage:

        @router.get("/x", dependencies=[Depends(require_roles("admin"))])
    """

    def dependency(auth: AuthSession = Depends(get_auth_session)) -> AuthSession:
        return _enforce(auth, roles)

    return dependency


require_admin = require_roles("admin")
require_vendor = require_roles("vendor")


def _enforce(auth: AuthSession, roles) -> AuthSession:
    decision = evaluate(auth.user_id, auth.profile, roles)

    if decision.state is GuardState.AUTHORIZED:
        return auth

    if decision.state is GuardState.UNAUTHENTICATED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    if decision.state is GuardState.PENDING_PROFILE:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Profile is still loading",
            headers={"Retry-After": "1"},
        )
    if decision.state is GuardState.UNAPPROVED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Vendor account is pending approval",
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Requires role: {' or '.join(decision.required_roles)}",
    )
