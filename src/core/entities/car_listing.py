"""
Entity: Car Listing

Anúncio de veículo. Agregação de domínio: dados do carro,
vendedor, imagem no storage e flags de moderação.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class CarListing:
    """Entidade de domínio: Anúncio."""
    id: int | None
    title: str
    brand: str
    model: str
    model_year: int
    mileage: int
    price: Decimal
    seller_id: int
    seller_username: str = ""
    location: str | None = None
    description: str | None = None
    image_key: str | None = None          # caminho relativo no storage

    # Moderação / ciclo de vida
    approved: bool = False
    is_sold: bool = False
    is_archived: bool = False

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime | None = None

    def is_owned_by(self, user_id: int) -> bool:
        return self.seller_id == user_id


@dataclass
class Page:
    """Página de resultados (conteúdo + metadados de paginação)."""
    content: list
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total_elements + self.size - 1) // self.size

    @property
    def last(self) -> bool:
        return self.page + 1 >= self.total_pages
