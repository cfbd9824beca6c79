"""
Adapter: Local Filesystem Storage Service

Implementação concreta do contrato IStorageService
gravando arquivos sob um diretório raiz configurado.
"""

import logging
import mimetypes
import os
import tempfile
import time
from pathlib import Path, PurePosixPath
from urllib.parse import quote

import jwt

from src.core.exceptions import StorageError, StorageFileNotFoundError
from src.core.interfaces.storage_service import IStorageService, StoredResource

logger = logging.getLogger(__name__)

SIGNED_URL_ALGORITHM = "HS256"


class LocalStorageService(IStorageService):
    """
    Storage em disco local.

    Nenhum estado mutável além do próprio filesystem: seguro para
    uso concorrente entre requests. Escritas são atômicas por caminho
    (arquivo temporário + rename).
    """

    def __init__(self, location: str | Path, base_url: str, signing_secret: str):
        self._root = Path(location).expanduser().resolve()
        self._base_url = base_url.rstrip("/")
        self._signing_secret = signing_secret

    @property
    def root(self) -> Path:
        return self._root

    def init(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not initialize storage at {self._root}: {e}") from e
        logger.info(f"Local storage initialized at {self._root}")

    def store(self, data: bytes, relative_path: str) -> str:
        target = self._resolve(relative_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to store file {relative_path}: {e}") from e

        logger.info(f"Stored {len(data)} bytes at {relative_path}")
        return self.public_url(relative_path)

    def load_as_resource(self, relative_path: str) -> StoredResource:
        target = self._resolve(relative_path)
        if not target.is_file():
            logger.debug(f"File not found in storage: {relative_path}")
            raise StorageFileNotFoundError(f"Could not read file: {relative_path}")

        content_type, _ = mimetypes.guess_type(target.name)
        return StoredResource(
            path=target,
            relative_path=self._normalize(relative_path),
            size_bytes=target.stat().st_size,
            content_type=content_type or "application/octet-stream",
        )

    def delete(self, relative_path: str) -> bool:
        target = self._resolve(relative_path)
        try:
            target.unlink()
        except FileNotFoundError:
            logger.debug(f"Nothing to delete at {relative_path}")
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete file {relative_path}: {e}") from e

        logger.info(f"Deleted {relative_path}")
        return True

    def public_url(self, relative_path: str) -> str:
        return f"{self._base_url}/{quote(self._normalize(relative_path))}"

    def get_signed_url(self, relative_path: str, ttl_seconds: int = 3600) -> str:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        path = self._normalize(relative_path)
        now = int(time.time())
        token = jwt.encode(
            {"path": path, "iat": now, "exp": now + ttl_seconds},
            self._signing_secret,
            algorithm=SIGNED_URL_ALGORITHM,
        )
        return f"{self.public_url(path)}?token={token}"

    def verify_signed_url(self, relative_path: str, token: str) -> bool:
        try:
            claims = jwt.decode(token, self._signing_secret, algorithms=[SIGNED_URL_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.debug(f"Expired signed URL for {relative_path}")
            return False
        except jwt.InvalidTokenError:
            logger.warning(f"Invalid signed URL token for {relative_path}")
            return False
        return claims.get("path") == self._normalize(relative_path)

    # ── Helpers ──

    @staticmethod
    def _normalize(relative_path: str) -> str:
        """Reject absolute paths and '..' segments; return a clean POSIX path."""
        if not relative_path or not relative_path.strip():
            raise StorageError("Empty storage path")
        cleaned = relative_path.replace("\\", "/")
        pure = PurePosixPath(cleaned)
        if not pure.parts:
            raise StorageError("Empty storage path")
        if pure.is_absolute() or ".." in pure.parts or ":" in pure.parts[0]:
            logger.warning(f"Path traversal attempt rejected: {relative_path}")
            raise StorageError(
                f"Cannot store file outside storage directory, invalid path sequence: {relative_path}"
            )
        return str(pure)

    def _resolve(self, relative_path: str) -> Path:
        target = (self._root / self._normalize(relative_path)).resolve()
        if target != self._root and self._root not in target.parents:
            logger.warning(f"Path traversal attempt rejected: {relative_path}")
            raise StorageError(
                f"Cannot store file outside storage directory, invalid path sequence: {relative_path}"
            )
        return target
