"""Sign-in against the hosted identity provider's REST API."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Sign-up, sign-in or refresh was refused."""


@dataclass
class Session:
    """Tokens for a signed-in user. Held in memory only."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[float] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def email(self) -> Optional[str]:
        return self.user.get("email")

    def is_expired(self, leeway: float = 30.0) -> bool:
        return self.expires_at is not None and time.time() + leeway >= self.expires_at

    @classmethod
    def from_token_response(cls, body: Dict[str, Any]) -> "Session":
        expires_at = body.get("expires_at")
        if expires_at is None and body.get("expires_in") is not None:
            expires_at = time.time() + float(body["expires_in"])
        return cls(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            expires_at=expires_at,
            user=body.get("user") or {},
        )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class AuthClient:
    """Email/password auth against ``{url}/auth/v1``."""

    def __init__(self, url: str, anon_key: str, timeout: float = 10.0,
                 http: Optional[requests.Session] = None):
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.anon_key = anon_key
        self.timeout = timeout
        self.http = http or requests.Session()

    def _post(self, path: str, payload: Optional[dict] = None,
              params: Optional[dict] = None, token: Optional[str] = None) -> requests.Response:
        headers = {"apikey": self.anon_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            return self.http.post(
                f"{self.base_url}{path}",
                json=payload,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"Could not reach the identity service: {e}") from e

    @staticmethod
    def _require_credentials(email: str, password: str) -> None:
        if not email or not password:
            raise AuthError("Please fill in all fields")

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        """Register a user. The provider emails a confirmation link before sign-in works."""
        self._require_credentials(email, password)
        response = self._post("/signup", {"email": email, "password": password})
        if response.status_code >= 400:
            raise AuthError(_error_message(response))
        return response.json()

    def sign_in_with_password(self, email: str, password: str) -> Session:
        self._require_credentials(email, password)
        response = self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        if response.status_code >= 400:
            raise AuthError(_error_message(response))
        session = Session.from_token_response(response.json())
        logger.debug(f"Signed in as {session.email}")
        return session

    def refresh_session(self, session: Session) -> Session:
        if not session.refresh_token:
            raise AuthError("Session cannot be refreshed")
        response = self._post(
            "/token",
            {"refresh_token": session.refresh_token},
            params={"grant_type": "refresh_token"},
        )
        if response.status_code >= 400:
            raise AuthError(_error_message(response))
        return Session.from_token_response(response.json())

    def sign_out(self, session: Session) -> None:
        """Revoke the session. A failed logout call leaves nothing to clean up locally."""
        try:
            response = self._post("/logout", token=session.access_token)
        except AuthError as e:
            logger.warning(f"Sign out failed: {e}")
            return
        if response.status_code >= 400:
            logger.warning(f"Sign out failed: {_error_message(response)}")
