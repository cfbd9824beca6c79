"""
Contract: File Validator

Decide se um arquivo enviado pode ser aceito: tipo declarado,
tamanho e assinatura real do conteúdo (magic number).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """Arquivo recebido do cliente, antes de validação."""
    filename: str
    content_type: str | None
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class IFileValidator(ABC):
    """
    Port: File Validator

    Implementações levantam InvalidFileError com mensagem
    descritiva quando o arquivo deve ser rejeitado.
    """

    @abstractmethod
    def validate(self, file: UploadedFile) -> None:
        ...

    @abstractmethod
    def extension_for(self, mime_type: str) -> str:
        """Extensão canônica (com ponto) para o MIME type permitido."""
        ...
