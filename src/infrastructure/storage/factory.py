"""
Storage backend selection.

Only the local filesystem backend ships; others plug in by
implementing IStorageService and registering here.
"""

from src.config.settings import Settings
from src.core.interfaces.storage_service import IStorageService
from src.infrastructure.storage.local_storage import LocalStorageService


def build_storage_service(settings: Settings) -> IStorageService:
    """Factory — build the configured storage backend (not yet initialized)."""
    backend = settings.storage_backend.strip().lower()
    if backend == "local":
        return LocalStorageService(
            location=settings.storage_location,
            base_url=settings.storage_base_url,
            signing_secret=settings.storage_signing_secret,
        )
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
