"""
Use Case: Upload Image

Valida o arquivo (tipo, tamanho, magic number), gera um nome
único e persiste no storage. Retorna nome, URL e tipo.
"""

import logging
import uuid
from dataclasses import dataclass

from src.core.exceptions import StorageError
from src.core.interfaces.file_validator import IFileValidator, UploadedFile
from src.core.interfaces.storage_service import IStorageService

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "images"


@dataclass(frozen=True)
class UploadedImage:
    """Resultado do upload."""
    file_name: str
    url: str
    file_type: str
    key: str            # caminho relativo no storage
    size_bytes: int


class UploadImageUseCase:
    """
    Use Case: recebe arquivo → valida → armazena.

    Dependency Injection: validador e storage vêm pelo construtor.
    """

    def __init__(self, validator: IFileValidator, storage: IStorageService):
        self._validator = validator
        self._storage = storage

    def execute(self, file: UploadedFile, folder: str = DEFAULT_FOLDER) -> UploadedImage:
        """
        1. Rejeita nomes com sequência de path traversal
        2. Valida conteúdo
        3. Gera nome único com extensão canônica
        4. Armazena
        """
        original = file.filename or ""
        if ".." in original.replace("\\", "/").split("/"):
            logger.warning(f"Upload rejected, invalid path sequence in filename: {original}")
            raise StorageError(f"Filename contains invalid path sequence {original}")

        self._validator.validate(file)

        content_type = (file.content_type or "").split(";")[0].strip().lower()
        file_name = f"{uuid.uuid4().hex}{self._validator.extension_for(content_type)}"
        key = f"{folder.strip('/')}/{file_name}" if folder.strip("/") else file_name

        url = self._storage.store(file.data, key)
        logger.info(f"Uploaded '{original}' as {key} ({file.size_bytes} bytes)")

        return UploadedImage(
            file_name=file_name,
            url=url,
            file_type=content_type,
            key=key,
            size_bytes=file.size_bytes,
        )
