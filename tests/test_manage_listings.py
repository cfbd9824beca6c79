from decimal import Decimal

import pytest

from src.core.entities.car_listing import CarListing
from src.core.entities.user import User
from src.core.exceptions import ListingNotFoundError
from src.core.interfaces.file_validator import UploadedFile
from src.core.use_cases.manage_listings import ManageListingsUseCase
from src.core.use_cases.upload_image import UploadImageUseCase
from src.infrastructure.validation.file_validator import FileValidator
from tests.conftest import JPEG_BYTES


class VanishingListingRepository:
    """Listing exists on read but is gone by the time it is updated."""

    def __init__(self, listing: CarListing):
        self._listing = listing

    def get_by_id(self, listing_id):
        return self._listing

    def update(self, listing_id, **changes):
        return None


@pytest.fixture
def seller():
    return User(id=1, username="seller", email="seller@example.com")


def _use_case(listing, storage):
    return ManageListingsUseCase(
        listings=VanishingListingRepository(listing),
        uploader=UploadImageUseCase(validator=FileValidator(), storage=storage),
        storage=storage,
    )


def test_replace_image_removes_new_file_when_update_fails(storage, seller):
    listing = CarListing(
        id=7, title="Test Car", brand="Toyota", model="Camry", model_year=2022,
        mileage=5000, price=Decimal("25000.00"), seller_id=seller.id,
    )
    use_case = _use_case(listing, storage)

    with pytest.raises(ListingNotFoundError):
        use_case.replace_image(7, seller, UploadedFile("car.jpg", "image/jpeg", JPEG_BYTES))

    assert list((storage.root / "listings").glob("*")) == []


def test_replace_image_keeps_old_file_when_update_fails(storage, seller):
    storage.store(JPEG_BYTES, "listings/old.jpg")
    listing = CarListing(
        id=7, title="Test Car", brand="Toyota", model="Camry", model_year=2022,
        mileage=5000, price=Decimal("25000.00"), seller_id=seller.id, image_key="listings/old.jpg",
    )
    use_case = _use_case(listing, storage)

    with pytest.raises(ListingNotFoundError):
        use_case.replace_image(7, seller, UploadedFile("car.jpg", "image/jpeg", JPEG_BYTES))

    assert [p.name for p in (storage.root / "listings").iterdir()] == ["old.jpg"]
