"""
Bearer-token authentication.

Identity is owned by an external provider. The API never stores
credentials: each request presents a bearer token, the configured
IdentityProvider resolves it to a UserIdentity, and the route receives an
AuthContext holding that identity and a request-scoped database session.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional

import requests
from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from workout_logger.config import Settings, get_settings
from workout_logger.database import get_db

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """The provider rejected the token or resolved no user."""


class IdentityServiceError(Exception):
    """The provider could not be reached or answered unexpectedly."""


@dataclass
class UserIdentity:
    """The caller as resolved by the identity provider."""
    id: str
    email: Optional[str] = None
    role: str = "authenticated"
    claims: Dict[str, Any] = field(default_factory=dict)


class IdentityProvider:
    """Resolves a bearer token to a user. Implementations must be thread-safe."""

    def verify(self, token: str) -> UserIdentity:
        raise NotImplementedError


class SupabaseIdentityProvider(IdentityProvider):
    """Asks the hosted auth service who owns the token (GET /auth/v1/user)."""

    def __init__(self, url: str, anon_key: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        if not url:
            raise ValueError("SUPABASE_URL is not configured")
        self.user_endpoint = f"{url.rstrip('/')}/auth/v1/user"
        self.anon_key = anon_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def verify(self, token: str) -> UserIdentity:
        try:
            response = self.session.get(
                self.user_endpoint,
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code in (401, 403):
            raise InvalidTokenError("Token rejected by identity service")
        if response.status_code != 200:
            raise IdentityServiceError(
                f"Identity service returned HTTP {response.status_code}"
            )

        try:
            user = response.json()
        except ValueError as e:
            raise IdentityServiceError("Identity service returned a non-JSON body") from e

        if not isinstance(user, dict) or not user.get("id"):
            raise InvalidTokenError("No user for token")

        return UserIdentity(
            id=user["id"],
            email=user.get("email"),
            role=user.get("role") or "authenticated",
            claims={"sub": user["id"], "email": user.get("email"), "role": user.get("role")},
        )


class JWTIdentityProvider(IdentityProvider):
    """Verifies tokens locally against the project's JWT secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", audience: Optional[str] = None):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    def verify(self, token: str) -> UserIdentity:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        subject = claims.get("sub")
        if not subject:
            raise InvalidTokenError("Token has no subject")

        return UserIdentity(
            id=subject,
            email=claims.get("email"),
            role=claims.get("role") or "authenticated",
            claims=claims,
        )


def build_identity_provider(settings: Settings) -> IdentityProvider:
    """Create the provider named by IDENTITY_PROVIDER."""
    if settings.identity_provider == "supabase":
        return SupabaseIdentityProvider(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.identity_timeout_seconds,
        )
    if settings.identity_provider == "jwt":
        return JWTIdentityProvider(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            audience=settings.jwt_audience or None,
        )
    raise ValueError(f"Unknown identity provider: {settings.identity_provider}")


@lru_cache
def _cached_identity_provider() -> IdentityProvider:
    return build_identity_provider(get_settings())


def get_identity_provider() -> IdentityProvider:
    """Dependency returning the process-wide identity provider."""
    return _cached_identity_provider()


@dataclass
class AuthContext:
    """What an authenticated route works with: the caller and a session scoped to them."""
    user: UserIdentity
    db: AsyncSession

    @property
    def user_id(self) -> str:
        return self.user.id


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided"
        )

    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization format"
        )
    return parts[1]


async def apply_rls_claims(db: AsyncSession, user: UserIdentity, role: str) -> None:
    """
    Present the caller to Postgres row-level policies for the rest of the
    transaction, the same way the hosted REST layer does for its requests.
    """
    claims = dict(user.claims)
    claims.setdefault("sub", user.id)
    claims.setdefault("role", role)
    await db.execute(
        text("SELECT set_config('request.jwt.claims', :claims, true)"),
        {"claims": json.dumps(claims, default=str)}
    )
    await db.execute(text(f'SET LOCAL ROLE "{role}"'))


async def get_current_user(
    authorization: Optional[str] = Header(None),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> UserIdentity:
    """Resolve the bearer token on the request to a user."""
    token = extract_bearer_token(authorization)

    try:
        return await run_in_threadpool(provider.verify, token)
    except InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    except Exception as e:
        logger.error(f"Authentication failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication failed"
        )


async def get_auth_context(
    user: UserIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Dependency for routes that need the caller and their data handle."""
    settings = get_settings()
    if settings.apply_rls_claims and db.bind.dialect.name == "postgresql":
        await apply_rls_claims(db, user, settings.rls_role)
    return AuthContext(user=user, db=db)
