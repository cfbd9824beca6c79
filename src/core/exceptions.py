"""
Exceções de domínio.

Hierarquia única para que a camada de API traduza cada erro
em um status HTTP sem conhecer detalhes de infraestrutura.
"""


class MarketplaceError(Exception):
    """Base de todos os erros de domínio."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFileError(MarketplaceError):
    """Arquivo vazio, tipo não permitido, assinatura falsa ou tamanho excedido."""


class StorageError(MarketplaceError):
    """Falha de I/O ou tentativa de path traversal no storage."""


class StorageFileNotFoundError(StorageError):
    """Arquivo solicitado não existe no storage."""


class DuplicateUserError(MarketplaceError):
    """Username ou e-mail já cadastrado."""


class AuthenticationError(MarketplaceError):
    """Credenciais ou token inválidos."""


class PermissionDeniedError(MarketplaceError):
    """Usuário autenticado sem permissão para a operação."""


class ListingNotFoundError(MarketplaceError):
    """Anúncio inexistente ou não visível para o usuário."""

    def __init__(self, listing_id: int):
        super().__init__(f"Listing not found with id: {listing_id}")
        self.listing_id = listing_id


class InvalidSortFieldError(ValueError):
    """Campo de ordenação fora da whitelist."""

    def __init__(self, field_name: str):
        super().__init__(f"Sorting by field '{field_name}' is not allowed.")
        self.field_name = field_name


class ListingStateError(MarketplaceError):
    """Transição de estado inválida (ex.: vender anúncio arquivado)."""
