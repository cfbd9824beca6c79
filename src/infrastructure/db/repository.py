"""
Repositories — users and car listings.

Handles:
  - Account lookup / uniqueness checks
  - Listing CRUD
  - Filtered, sorted, paginated listing search
"""

import logging
from typing import Optional

from sqlalchemy import asc, desc, func
from sqlalchemy.exc import IntegrityError

from src.core.entities.car_listing import CarListing, Page
from src.core.entities.listing_query import ListingFilter, PageRequest, SORTABLE_FIELDS
from src.core.entities.user import User
from src.core.exceptions import DuplicateUserError
from src.core.interfaces.repositories import ICarListingRepository, IUserRepository
from src.infrastructure.db.database import get_db
from src.infrastructure.db.models import CarListingRecord, UserRecord

logger = logging.getLogger(__name__)

# campos que podem ser alterados via update()
_UPDATABLE_FIELDS = (
    "title", "brand", "model", "model_year", "mileage", "price",
    "location", "description", "image_key", "approved", "is_sold", "is_archived",
)


class UserRepository(IUserRepository):
    """Repository for user accounts."""

    def save(self, user: User) -> User:
        try:
            with get_db() as db:
                record = UserRecord.from_entity(user)
                db.add(record)
                db.flush()
                logger.info(f"Saved user {record.username} (id={record.id})")
                return record.to_entity()
        except IntegrityError as e:
            # signup concorrente venceu a checagem prévia de unicidade
            logger.warning(f"Unique constraint hit while saving user {user.username}")
            if self.exists_by_username(user.username):
                raise DuplicateUserError("Error: Username is already taken!") from e
            raise DuplicateUserError("Error: Email is already in use!") from e

    def find_by_username(self, username: str) -> Optional[User]:
        with get_db() as db:
            record = db.query(UserRecord).filter_by(username=username).first()
            return record.to_entity() if record else None

    def find_by_id(self, user_id: int) -> Optional[User]:
        with get_db() as db:
            record = db.get(UserRecord, user_id)
            return record.to_entity() if record else None

    def exists_by_username(self, username: str) -> bool:
        with get_db() as db:
            return db.query(UserRecord.id).filter_by(username=username).first() is not None

    def exists_by_email(self, email: str) -> bool:
        with get_db() as db:
            return db.query(UserRecord.id).filter(func.lower(UserRecord.email) == email.lower()).first() is not None


class CarListingRepository(ICarListingRepository):
    """Repository for car listings."""

    def save(self, listing: CarListing) -> CarListing:
        with get_db() as db:
            record = CarListingRecord(
                title=listing.title,
                brand=listing.brand,
                model=listing.model,
                model_year=listing.model_year,
                mileage=listing.mileage,
                price=listing.price,
                location=listing.location,
                description=listing.description,
                image_key=listing.image_key,
                approved=listing.approved,
                is_sold=listing.is_sold,
                is_archived=listing.is_archived,
                seller_id=listing.seller_id,
                created_at=listing.created_at,
            )
            db.add(record)
            db.flush()
            logger.info(f"Saved listing {record.id} [{record.brand} {record.model}] seller={record.seller_id}")
            return record.to_entity()

    def get_by_id(self, listing_id: int) -> Optional[CarListing]:
        with get_db() as db:
            record = db.get(CarListingRecord, listing_id)
            return record.to_entity() if record else None

    def update(self, listing_id: int, **changes) -> Optional[CarListing]:
        """Apply field changes; unknown fields raise ValueError."""
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        with get_db() as db:
            record = db.get(CarListingRecord, listing_id)
            if record is None:
                return None
            for key, value in changes.items():
                setattr(record, key, value)
            db.flush()
            logger.debug(f"Updated listing {listing_id}: {sorted(changes)}")
            return record.to_entity()

    def delete(self, listing_id: int) -> bool:
        with get_db() as db:
            record = db.get(CarListingRecord, listing_id)
            if record is None:
                return False
            db.delete(record)
            logger.info(f"Deleted listing {listing_id}")
            return True

    def find_by_seller(self, seller_id: int, page: PageRequest) -> Page:
        with get_db() as db:
            query = db.query(CarListingRecord).filter_by(seller_id=seller_id)
            return self._paginate(query, page)

    def search(self, criteria: ListingFilter, page: PageRequest, approved_only: bool = True) -> Page:
        """List listings with optional filtering, sorting and pagination."""
        with get_db() as db:
            query = db.query(CarListingRecord)
            if approved_only:
                query = query.filter(CarListingRecord.approved.is_(True))
            query = self._apply_filter(query, criteria)
            return self._paginate(query, page)

    @staticmethod
    def _apply_filter(query, criteria: ListingFilter):
        c = CarListingRecord
        if criteria.brand:
            query = query.filter(func.lower(c.brand) == criteria.brand.lower())
        if criteria.model:
            query = query.filter(func.lower(c.model) == criteria.model.lower())
        if criteria.min_year is not None:
            query = query.filter(c.model_year >= criteria.min_year)
        if criteria.max_year is not None:
            query = query.filter(c.model_year <= criteria.max_year)
        if criteria.location:
            query = query.filter(func.lower(c.location).contains(criteria.location.lower()))
        if criteria.min_price is not None:
            query = query.filter(c.price >= criteria.min_price)
        if criteria.max_price is not None:
            query = query.filter(c.price <= criteria.max_price)
        if criteria.min_mileage is not None:
            query = query.filter(c.mileage >= criteria.min_mileage)
        if criteria.max_mileage is not None:
            query = query.filter(c.mileage <= criteria.max_mileage)
        if criteria.is_sold is not None:
            query = query.filter(c.is_sold.is_(criteria.is_sold))
        if criteria.is_archived is not None:
            query = query.filter(c.is_archived.is_(criteria.is_archived))
        return query

    @staticmethod
    def _paginate(query, page: PageRequest) -> Page:
        if page.sort.field not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {page.sort.field}")
        column = getattr(CarListingRecord, page.sort.field)
        direction = desc if page.sort.descending else asc

        total = query.count()
        records = (
            query.order_by(direction(column), direction(CarListingRecord.id))
            .offset(page.offset)
            .limit(page.size)
            .all()
        )
        return Page(
            content=[r.to_entity() for r in records],
            page=page.page,
            size=page.size,
            total_elements=total,
        )
