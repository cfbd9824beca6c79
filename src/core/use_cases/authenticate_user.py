"""
Use Case: Authenticate User

Confere credenciais e emite token de acesso.
"""

import logging
from dataclasses import dataclass

from src.core.entities.user import User
from src.core.exceptions import AuthenticationError
from src.core.interfaces.repositories import IUserRepository
from src.core.interfaces.security import IPasswordHasher, ITokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    token: str
    user: User


class AuthenticateUserUseCase:

    def __init__(self, users: IUserRepository, hasher: IPasswordHasher, tokens: ITokenService):
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, username: str, password: str) -> AuthenticatedUser:
        user = self._users.find_by_username(username)
        if user is None or not self._hasher.verify(password, user.password_hash):
            logger.warning(f"Failed sign-in attempt for '{username}'")
            raise AuthenticationError("Bad credentials")

        return AuthenticatedUser(token=self._tokens.generate_token(user), user=user)
