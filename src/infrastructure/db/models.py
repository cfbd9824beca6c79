"""
Database Models — SQLAlchemy.

Tables:
  - users: Accounts + roles
  - car_listings: Vehicle listings with moderation flags
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, JSON, Numeric,
    ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from src.core.entities.car_listing import CarListing
from src.core.entities.user import Role, User


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    """Registered marketplace user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)

    listings = relationship("CarListingRecord", back_populates="seller", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.username} roles={self.roles}>"

    @classmethod
    def from_entity(cls, user: User) -> "UserRecord":
        return cls(
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            roles=sorted(r.value for r in user.roles),
            created_at=user.created_at,
        )

    def to_entity(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            password_hash=self.password_hash,
            roles={Role(r) for r in (self.roles or [Role.USER.value])},
            created_at=self.created_at,
        )


class CarListingRecord(Base):
    """A car offered for sale."""
    __tablename__ = "car_listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    brand = Column(String(50), nullable=False, index=True)
    model = Column(String(50), nullable=False, index=True)
    model_year = Column(Integer, nullable=False, index=True)
    mileage = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False, index=True)
    location = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    image_key = Column(String(500), nullable=True)

    # Moderation
    approved = Column(Boolean, default=False, index=True)
    is_sold = Column(Boolean, default=False)
    is_archived = Column(Boolean, default=False)

    seller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    seller = relationship("UserRecord", back_populates="listings")

    __table_args__ = (
        Index("ix_car_listings_brand_model", "brand", "model"),
    )

    def __repr__(self):
        return f"<CarListing {self.id} {self.brand} {self.model} {self.model_year} approved={self.approved}>"

    def to_entity(self) -> CarListing:
        return CarListing(
            id=self.id,
            title=self.title,
            brand=self.brand,
            model=self.model,
            model_year=self.model_year,
            mileage=self.mileage,
            price=self.price,
            seller_id=self.seller_id,
            seller_username=self.seller.username if self.seller else "",
            location=self.location,
            description=self.description,
            image_key=self.image_key,
            approved=bool(self.approved),
            is_sold=bool(self.is_sold),
            is_archived=bool(self.is_archived),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
