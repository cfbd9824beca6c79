"""
Contracts: Repositories

Persistência de usuários e anúncios. Implementação concreta
em src/infrastructure/db (SQLAlchemy).
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.car_listing import CarListing, Page
from src.core.entities.listing_query import ListingFilter, PageRequest
from src.core.entities.user import User


class IUserRepository(ABC):

    @abstractmethod
    def save(self, user: User) -> User: ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def exists_by_username(self, username: str) -> bool: ...

    @abstractmethod
    def exists_by_email(self, email: str) -> bool: ...


class ICarListingRepository(ABC):

    @abstractmethod
    def save(self, listing: CarListing) -> CarListing: ...

    @abstractmethod
    def get_by_id(self, listing_id: int) -> Optional[CarListing]: ...

    @abstractmethod
    def update(self, listing_id: int, **changes) -> Optional[CarListing]: ...

    @abstractmethod
    def delete(self, listing_id: int) -> bool: ...

    @abstractmethod
    def find_by_seller(self, seller_id: int, page: PageRequest) -> Page: ...

    @abstractmethod
    def search(self, criteria: ListingFilter, page: PageRequest, approved_only: bool = True) -> Page:
        """Busca com filtros; por padrão só anúncios aprovados."""
        ...
