"""
Entity: User

Usuário do marketplace (vendedor e/ou comprador).
Modelo puro — sem dependência de framework ou banco.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


@dataclass
class User:
    """Entidade de domínio: Usuário."""
    id: int | None
    username: str
    email: str
    password_hash: str = ""
    roles: set[Role] = field(default_factory=lambda: {Role.USER})
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles
