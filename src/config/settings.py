"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"
    cors_origins: str = "*"

    # --- Database ---
    database_url: str = "sqlite:///autotrader.db"

    # --- Storage ---
    storage_backend: str = "local"
    storage_location: str = "uploads"
    storage_base_url: str = "http://localhost:8080/api/files"
    storage_signing_secret: str = "dev-storage-signing-secret-change-me"
    storage_require_signed_urls: bool = False
    signed_url_default_ttl: int = 3600

    # --- Upload ---
    upload_allowed_types: str = "image/jpeg,image/png,image/gif,image/webp"
    upload_max_file_size: int = 5 * 1024 * 1024

    # --- Auth (JWT) ---
    jwt_secret: str = "dev-jwt-secret-change-me-at-least-32-bytes"
    jwt_expiration_seconds: int = 86400
    password_hash_iterations: int = 310_000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
