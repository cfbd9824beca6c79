"""
JWT access tokens (HS256).

Claims: sub (username), uid, roles, iat, exp.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from src.core.entities.user import User
from src.core.exceptions import AuthenticationError
from src.core.interfaces.security import ITokenService

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    username: str
    user_id: int
    roles: tuple[str, ...]
    expires_at: datetime


class JwtService(ITokenService):
    """Issue and validate bearer tokens."""

    def __init__(self, secret: str, expiration_seconds: int = 86400):
        self._secret = secret
        self._expiration = timedelta(seconds=expiration_seconds)

    def generate_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.username,
            "uid": user.id,
            "roles": sorted(r.value for r in user.roles),
            "iat": now,
            "exp": now + self._expiration,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def validate_token(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except ExpiredSignatureError as e:
            logger.debug("JWT token is expired")
            raise AuthenticationError("JWT token is expired") from e
        except InvalidTokenError as e:
            logger.debug(f"Invalid JWT token: {e}")
            raise AuthenticationError("Invalid JWT token") from e

        return TokenClaims(
            username=payload["sub"],
            user_id=int(payload.get("uid") or 0),
            roles=tuple(payload.get("roles", [])),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
