"""
Use Case: Register User

Cria conta com senha hasheada. Username e e-mail são únicos.
Papel "admin" → ROLE_ADMIN; qualquer outro valor → ROLE_USER.
"""

import logging
from dataclasses import dataclass, field

from src.core.entities.user import Role, User
from src.core.exceptions import DuplicateUserError
from src.core.interfaces.repositories import IUserRepository
from src.core.interfaces.security import IPasswordHasher

logger = logging.getLogger(__name__)


@dataclass
class SignupInput:
    username: str
    email: str
    password: str
    roles: set[str] | None = field(default=None)


def resolve_roles(requested: set[str] | None) -> set[Role]:
    if not requested:
        return {Role.USER}
    return {Role.ADMIN if r == "admin" else Role.USER for r in requested}


class RegisterUserUseCase:

    def __init__(self, users: IUserRepository, hasher: IPasswordHasher):
        self._users = users
        self._hasher = hasher

    def execute(self, data: SignupInput) -> User:
        if self._users.exists_by_username(data.username):
            raise DuplicateUserError("Error: Username is already taken!")
        if self._users.exists_by_email(data.email):
            raise DuplicateUserError("Error: Email is already in use!")

        user = User(
            id=None,
            username=data.username,
            email=data.email,
            password_hash=self._hasher.hash(data.password),
            roles=resolve_roles(data.roles),
        )
        saved = self._users.save(user)
        logger.info(f"Registered user {saved.username} roles={sorted(r.value for r in saved.roles)}")
        return saved
