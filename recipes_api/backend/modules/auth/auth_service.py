"""
Authentication for mutating recipe routes.

Supports a static API key header or HS256 bearer tokens, selected by
Settings.auth_mode.
"""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from recipes_api.backend.config.settings import Settings

SIGNIN_TTL = timedelta(minutes=10)
REFRESH_TTL = timedelta(minutes=5)
REFRESH_WINDOW = timedelta(seconds=30)
ALGORITHM = "HS256"


class AuthError(Exception):
    """Missing, malformed or expired credentials."""


class RefreshTooEarly(Exception):
    """The token is still valid for longer than the refresh window."""


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    if header_value.lower().startswith("bearer "):
        return header_value[7:].strip() or None
    return header_value.strip() or None


class AuthService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def is_authorized(self, headers) -> bool:
        """
        Decide whether a request may reach a mutating operation.

        Args:
            headers: Mapping of request headers
        """
        mode = self.settings.auth_mode
        if mode == "none":
            return True
        if mode == "api_key":
            supplied = headers.get("X-API-KEY")
            expected = self.settings.api_key
            return bool(supplied and expected) and _same(supplied, expected)
        if mode == "jwt":
            try:
                self.decode(bearer_token(headers.get("Authorization")))
            except AuthError:
                return False
            return True
        return False

    def check_credentials(self, username: str, password: str) -> bool:
        return _same(username, self.settings.admin_username) and _same(
            password, self.settings.admin_password
        )

    def issue(self, username: str, ttl: timedelta = SIGNIN_TTL) -> Tuple[str, datetime]:
        expires = datetime.now(timezone.utc) + ttl
        token = jwt.encode(
            {"username": username, "exp": expires}, self._secret(), algorithm=ALGORITHM
        )
        return token, expires

    def decode(self, token: Optional[str]) -> dict:
        if not token:
            raise AuthError("Missing token")
        try:
            return jwt.decode(
                token, self._secret(), algorithms=[ALGORITHM], options={"require": ["exp"]}
            )
        except jwt.PyJWTError as e:
            raise AuthError(f"Invalid token: {e}") from e

    def refresh(self, token: Optional[str]) -> Tuple[str, datetime]:
        """
        Reissue a token that is about to expire.
        Raises RefreshTooEarly if more than REFRESH_WINDOW remains.
        """
        claims = self.decode(token)
        expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        if expires_at - datetime.now(timezone.utc) > REFRESH_WINDOW:
            raise RefreshTooEarly("Token is not expired yet")
        return self.issue(claims.get("username", ""), ttl=REFRESH_TTL)

    def _secret(self) -> str:
        if not self.settings.jwt_secret:
            raise AuthError("JWT_SECRET is not configured")
        return self.settings.jwt_secret
