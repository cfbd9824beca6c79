"""
Use Case: Manage Car Listings

Criação, leitura, busca, edição, moderação e remoção de anúncios,
incluindo a imagem associada no storage.

Regras de acesso:
  - anúncios não aprovados só são visíveis ao dono e a admins
  - edição / status / imagem: apenas o dono
  - remoção: dono ou admin
  - aprovação: apenas admin
"""

import logging
from dataclasses import dataclass, fields
from decimal import Decimal

from src.core.entities.car_listing import CarListing, Page
from src.core.entities.listing_query import ListingFilter, PageRequest
from src.core.entities.user import User
from src.core.exceptions import (
    ListingNotFoundError,
    ListingStateError,
    PermissionDeniedError,
)
from src.core.interfaces.file_validator import UploadedFile
from src.core.interfaces.repositories import ICarListingRepository
from src.core.interfaces.storage_service import IStorageService
from src.core.use_cases.upload_image import UploadImageUseCase

logger = logging.getLogger(__name__)

LISTING_IMAGE_FOLDER = "listings"


@dataclass
class ListingInput:
    """Dados de criação (já validados na borda da API)."""
    title: str
    brand: str
    model: str
    model_year: int
    mileage: int
    price: Decimal
    location: str | None = None
    description: str | None = None


class ManageListingsUseCase:
    """
    Use Case: ciclo de vida completo de um anúncio.

    Dependency Injection: repositório, upload e storage vêm pelo construtor.
    """

    def __init__(
        self,
        listings: ICarListingRepository,
        uploader: UploadImageUseCase,
        storage: IStorageService,
    ):
        self._listings = listings
        self._uploader = uploader
        self._storage = storage

    # ── Create ──

    def create(self, data: ListingInput, seller: User, image: UploadedFile | None = None) -> CarListing:
        image_key = None
        if image is not None:
            image_key = self._uploader.execute(image, folder=LISTING_IMAGE_FOLDER).key

        listing = CarListing(
            id=None,
            title=data.title,
            brand=data.brand,
            model=data.model,
            model_year=data.model_year,
            mileage=data.mileage,
            price=data.price,
            seller_id=seller.id,
            seller_username=seller.username,
            location=data.location,
            description=data.description,
            image_key=image_key,
        )
        try:
            return self._listings.save(listing)
        except Exception:
            if image_key:
                self._storage.delete(image_key)
            raise

    # ── Read ──

    def get(self, listing_id: int, viewer: User | None = None) -> CarListing:
        listing = self._listings.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        if listing.approved:
            return listing
        if viewer is not None and (viewer.is_admin or listing.is_owned_by(viewer.id)):
            return listing
        # não revela a existência de anúncios pendentes
        raise ListingNotFoundError(listing_id)

    def list_approved(self, page: PageRequest) -> Page:
        return self._listings.search(ListingFilter(), page, approved_only=True)

    def search(self, criteria: ListingFilter, page: PageRequest) -> Page:
        return self._listings.search(criteria, page, approved_only=True)

    def list_for_seller(self, seller: User, page: PageRequest) -> Page:
        return self._listings.find_by_seller(seller.id, page)

    # ── Update ──

    def update(self, listing_id: int, user: User, changes: dict) -> CarListing:
        self._owned(listing_id, user)
        allowed = {f.name for f in fields(ListingInput)}
        changes = {k: v for k, v in changes.items() if k in allowed and v is not None}
        if not changes:
            return self._require(listing_id)
        return self._apply(listing_id, **changes)

    def replace_image(self, listing_id: int, user: User, image: UploadedFile) -> CarListing:
        listing = self._owned(listing_id, user)
        uploaded = self._uploader.execute(image, folder=LISTING_IMAGE_FOLDER)
        try:
            updated = self._apply(listing_id, image_key=uploaded.key)
        except Exception:
            self._storage.delete(uploaded.key)
            raise
        if listing.image_key:
            self._storage.delete(listing.image_key)
        return updated

    # ── Moderation / status ──

    def approve(self, listing_id: int, admin: User) -> CarListing:
        if not admin.is_admin:
            raise PermissionDeniedError("Only administrators can approve listings")
        self._require(listing_id)
        logger.info(f"Listing {listing_id} approved by {admin.username}")
        return self._apply(listing_id, approved=True)

    def mark_sold(self, listing_id: int, user: User) -> CarListing:
        listing = self._owned(listing_id, user)
        if listing.is_archived:
            raise ListingStateError("Cannot mark an archived listing as sold.")
        if listing.is_sold:
            raise ListingStateError("Listing is already marked as sold.")
        return self._apply(listing_id, is_sold=True)

    def archive(self, listing_id: int, user: User) -> CarListing:
        listing = self._owned(listing_id, user)
        if listing.is_archived:
            raise ListingStateError("Listing is already archived.")
        return self._apply(listing_id, is_archived=True)

    def unarchive(self, listing_id: int, user: User) -> CarListing:
        listing = self._owned(listing_id, user)
        if not listing.is_archived:
            raise ListingStateError("Listing is not archived.")
        return self._apply(listing_id, is_archived=False)

    # ── Delete ──

    def delete(self, listing_id: int, user: User) -> None:
        listing = self._require(listing_id)
        if not (user.is_admin or listing.is_owned_by(user.id)):
            raise PermissionDeniedError("You do not have permission to delete this listing")
        self._listings.delete(listing_id)
        if listing.image_key:
            self._storage.delete(listing.image_key)

    # ── Helpers ──

    def _require(self, listing_id: int) -> CarListing:
        listing = self._listings.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    def _owned(self, listing_id: int, user: User) -> CarListing:
        listing = self._require(listing_id)
        if not listing.is_owned_by(user.id):
            raise PermissionDeniedError("You do not have permission to modify this listing")
        return listing

    def _apply(self, listing_id: int, **changes) -> CarListing:
        updated = self._listings.update(listing_id, **changes)
        if updated is None:
            raise ListingNotFoundError(listing_id)
        return updated
