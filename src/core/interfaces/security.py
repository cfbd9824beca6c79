"""
Contracts: Password hashing + access tokens.
"""

from abc import ABC, abstractmethod

from src.core.entities.user import User


class IPasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str: ...

    @abstractmethod
    def verify(self, password: str, encoded: str) -> bool: ...


class ITokenService(ABC):

    @abstractmethod
    def generate_token(self, user: User) -> str:
        """Emite token de acesso (bearer) para o usuário."""
        ...

    @abstractmethod
    def validate_token(self, token: str):
        """
        Valida o token e retorna suas claims.

        Raises:
            AuthenticationError: token inválido ou expirado.
        """
        ...
