"""
Entity: Listing Query

Filtros, ordenação e paginação para busca de anúncios.
A whitelist de ordenação impede ordenar por colunas arbitrárias.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.core.exceptions import InvalidSortFieldError

SORTABLE_FIELDS = ("created_at", "price", "model_year", "mileage", "title")
DEFAULT_SORT = "created_at"
MAX_PAGE_SIZE = 100

# aliases aceitos na query string (estilo camelCase do frontend)
_SORT_ALIASES = {
    "createdAt": "created_at",
    "modelYear": "model_year",
}


@dataclass(frozen=True)
class ListingFilter:
    """Critérios opcionais — None significa 'sem filtro'."""
    brand: str | None = None
    model: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    location: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    min_mileage: int | None = None
    max_mileage: int | None = None
    is_sold: bool | None = None
    is_archived: bool | None = None


@dataclass(frozen=True)
class SortSpec:
    field: str = DEFAULT_SORT
    descending: bool = True

    @classmethod
    def parse(cls, raw: str | None) -> "SortSpec":
        """
        Interpreta "campo,direção" (ex: "price,asc").

        Raises:
            InvalidSortFieldError: campo fora da whitelist.
        """
        if not raw or not raw.strip():
            return cls()
        name, _, direction = raw.partition(",")
        name = name.strip()
        name = _SORT_ALIASES.get(name, name)
        if name not in SORTABLE_FIELDS:
            raise InvalidSortFieldError(name)
        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction '{direction}'")
        return cls(field=name, descending=direction == "desc")


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 10
    sort: SortSpec = SortSpec()

    def __post_init__(self):
        if self.page < 0:
            raise ValueError("Page index must not be negative")
        if not 1 <= self.size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return self.page * self.size
