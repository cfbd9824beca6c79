"""
Adapter: Magic-Number File Validator.

Rejects uploads whose declared content type is not allowed, whose
size exceeds the configured limit, or whose leading bytes do not
match the signature of the declared type (content-type spoofing).
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from src.core.exceptions import InvalidFileError
from src.core.interfaces.file_validator import IFileValidator, UploadedFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024


@dataclass(frozen=True)
class FileSignature:
    """Known image format: canonical extension + magic-number check."""
    extension: str
    prefixes: tuple[bytes, ...]
    # (offset, bytes) that must also be present, e.g. "WEBP" inside a RIFF header
    marker: tuple[int, bytes] | None = None

    def matches(self, data: bytes) -> bool:
        if not any(data.startswith(p) for p in self.prefixes):
            return False
        if self.marker is not None:
            offset, expected = self.marker
            return data[offset:offset + len(expected)] == expected
        return True


SIGNATURES: dict[str, FileSignature] = {
    "image/jpeg": FileSignature(".jpg", (b"\xff\xd8\xff",)),
    "image/png": FileSignature(".png", (b"\x89PNG\r\n\x1a\n",)),
    "image/gif": FileSignature(".gif", (b"GIF89a", b"GIF87a")),
    "image/webp": FileSignature(".webp", (b"RIFF",), marker=(8, b"WEBP")),
}

DEFAULT_ALLOWED_TYPES = tuple(SIGNATURES)


def parse_allowed_types(allowed_types: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalize a comma-separated string or iterable into an ordered, de-duplicated tuple."""
    if allowed_types is None:
        return DEFAULT_ALLOWED_TYPES
    if isinstance(allowed_types, str):
        items = allowed_types.split(",")
    else:
        items = list(allowed_types)

    parsed: list[str] = []
    for item in items:
        mime = item.strip().lower()
        if mime and mime not in parsed:
            parsed.append(mime)
    return tuple(parsed) or DEFAULT_ALLOWED_TYPES


class FileValidator(IFileValidator):
    """
    Stateless validator built once from configuration.

    Check order: empty -> allowed type -> size -> signature.
    """

    def __init__(
        self,
        allowed_types: str | Iterable[str] | None = None,
        max_size_bytes: int | None = DEFAULT_MAX_FILE_SIZE,
    ):
        types = parse_allowed_types(allowed_types)
        unknown = [t for t in types if t not in SIGNATURES]
        if unknown:
            raise ValueError(f"No magic-number signature known for: {', '.join(unknown)}")

        self._allowed_types = types
        self._max_size = max_size_bytes if max_size_bytes is not None else DEFAULT_MAX_FILE_SIZE

    @property
    def allowed_types(self) -> tuple[str, ...]:
        return self._allowed_types

    @property
    def max_size_bytes(self) -> int:
        return self._max_size

    def validate(self, file: UploadedFile) -> None:
        if file.size_bytes == 0:
            raise InvalidFileError("File is empty")

        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if content_type not in self._allowed_types:
            logger.warning(f"Rejected upload '{file.filename}': type '{content_type}' not allowed")
            raise InvalidFileError(
                f"File type '{content_type or 'unknown'}' is not allowed. "
                f"Allowed types: {', '.join(self._allowed_types)}"
            )

        if file.size_bytes > self._max_size:
            raise InvalidFileError(
                f"File size {file.size_bytes} bytes exceeds maximum limit of {self._max_size} bytes"
            )

        if not SIGNATURES[content_type].matches(file.data):
            logger.warning(f"Rejected upload '{file.filename}': content does not match '{content_type}'")
            raise InvalidFileError(
                f"File content does not match declared type '{content_type}'; file is not allowed"
            )

    def extension_for(self, mime_type: str) -> str:
        signature = SIGNATURES.get((mime_type or "").strip().lower())
        if signature is None:
            raise InvalidFileError(f"Unsupported file type: {mime_type}")
        return signature.extension
