"""
Contract: Storage Service

Gerencia persistência de arquivos enviados (imagens de anúncios)
em storage local ou remoto. Cada backend implementa este contrato.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StoredResource:
    """Handle para um arquivo armazenado."""
    path: Path
    relative_path: str
    size_bytes: int
    content_type: str

    def exists(self) -> bool:
        return self.path.is_file()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


class IStorageService(ABC):
    """
    Port: Storage Service

    Capacidades: store, load, delete, signed URL.
    Implementação pode ser filesystem local, S3, etc.
    """

    @abstractmethod
    def init(self) -> None:
        """Prepara o backend (ex.: cria diretório raiz)."""
        ...

    @abstractmethod
    def store(self, data: bytes, relative_path: str) -> str:
        """
        Persiste bytes no caminho relativo.

        Args:
            data: Conteúdo em bytes.
            relative_path: Pasta + nome do arquivo (ex: "images/abc.jpg").

        Returns:
            URL pública do arquivo.
        """
        ...

    @abstractmethod
    def load_as_resource(self, relative_path: str) -> StoredResource:
        """
        Localiza um arquivo armazenado.

        Raises:
            StorageFileNotFoundError: se o arquivo não existir.
        """
        ...

    @abstractmethod
    def delete(self, relative_path: str) -> bool:
        """Remove o arquivo. Retorna False se ele não existia."""
        ...

    @abstractmethod
    def public_url(self, relative_path: str) -> str:
        ...

    @abstractmethod
    def get_signed_url(self, relative_path: str, ttl_seconds: int = 3600) -> str:
        """
        Gera URL assinada para acesso temporário.

        Args:
            relative_path: Caminho no storage.
            ttl_seconds: Tempo de expiração.

        Returns:
            URL assinada.
        """
        ...

    @abstractmethod
    def verify_signed_url(self, relative_path: str, token: str) -> bool:
        """Confere assinatura, expiração e caminho do token."""
        ...
