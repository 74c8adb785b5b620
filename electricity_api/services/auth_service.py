"""
Credential store and bearer token issuer.
Holds the static user set loaded from configuration and signs/verifies JWTs.
"""

import hmac
import time
from typing import Callable, Dict, Optional

import jwt
from pydantic import ValidationError

from electricity_api.config import Settings
from electricity_api.exceptions import ConfigurationError
from electricity_api.logging_config import get_logger
from electricity_api.models.auth import LoginResponse, TokenPayload

logger = get_logger(__name__)

ALGORITHM = "HS256"
TOKEN_EXPIRES_IN = 24 * 60 * 60  # 24 hours


def parse_api_users(api_users: Optional[str]) -> Dict[str, str]:
    """
    Parse the multi-user form 'user1:pass1,user2:pass2'.

    Pairs without a username or password are skipped. The password is
    everything after the first colon. Later duplicates overwrite earlier ones.
    """
    users: Dict[str, str] = {}
    if not api_users:
        return users

    for pair in api_users.split(','):
        username, _, password = pair.strip().partition(':')
        if username and password:
            users[username] = password

    return users


class AuthService:
    """Static credential store with JWT issuing and verification."""

    def __init__(
        self,
        jwt_secret: Optional[str],
        api_users: Optional[str] = None,
        api_username: Optional[str] = None,
        api_password: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        if not jwt_secret:
            raise ConfigurationError("JWT_SECRET environment variable is required")

        self._secret = jwt_secret
        self._clock = clock
        self._users = self._load_users(api_users, api_username, api_password)

        if not self._users:
            raise ConfigurationError(
                'No users configured. Set API_USERS with format "username1:password1,username2:password2" '
                "or use legacy API_USERNAME and API_PASSWORD"
            )

        logger.info("Credential store initialized", users=len(self._users))

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        """Build the service from application settings."""
        return cls(
            jwt_secret=settings.jwt_secret,
            api_users=settings.api_users,
            api_username=settings.api_username,
            api_password=settings.api_password,
        )

    @staticmethod
    def _load_users(
        api_users: Optional[str],
        api_username: Optional[str],
        api_password: Optional[str],
    ) -> Dict[str, str]:
        users = parse_api_users(api_users)
        if users:
            return users

        # Legacy single-user fallback
        if api_username and api_password:
            return {api_username: api_password}

        return {}

    @property
    def user_count(self) -> int:
        return len(self._users)

    def verify_credentials(self, username: Optional[str], password: Optional[str]) -> bool:
        """Check a username/password pair against the configured users."""
        if not username or not password:
            return False

        stored_password = self._users.get(username)
        if stored_password is None:
            return False

        return hmac.compare_digest(stored_password.encode("utf-8"), password.encode("utf-8"))

    def issue_token(self, username: str) -> LoginResponse:
        """
        Sign a token for the given user.

        No existence check is made here; callers verify credentials first.
        """
        issued_at = int(self._clock())
        payload = {
            "username": username,
            "iat": issued_at,
            "exp": issued_at + TOKEN_EXPIRES_IN,
        }
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)

        logger.debug("Issued token", username=username, expires_at=payload["exp"])
        return LoginResponse(token=token, expires_in=TOKEN_EXPIRES_IN)

    def verify_token(self, token: Optional[str]) -> Optional[TokenPayload]:
        """
        Decode and validate a bearer token.

        Returns None for empty, malformed, forged or expired tokens.
        """
        if not token:
            return None

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["username", "iat", "exp"]},
            )
            payload = TokenPayload(**claims)
        except jwt.PyJWTError as e:
            logger.debug("Rejected token", reason=type(e).__name__)
            return None
        except ValidationError:
            logger.debug("Rejected token", reason="invalid claims")
            return None

        if not payload.username or payload.exp <= self._clock():
            return None

        return payload
