"""
Pydantic schemas — Request models para a API.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

MIN_MODEL_YEAR = 1920
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def check_model_year(value: int) -> int:
    """Exactly one message per violation, checked in this order."""
    if not 1000 <= value <= 9999:
        raise PydanticCustomError("model_year_digits", "Year must be a 4-digit number")
    if value < MIN_MODEL_YEAR:
        raise PydanticCustomError("model_year_min", "Year must be 1920 or later")
    if value > date.today().year:
        raise PydanticCustomError("model_year_max", "Year must not be later than the current year")
    return value


class SignupRequest(BaseModel):
    username: str = Field(min_length=3, max_length=20)
    email: str = Field(max_length=50, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=40)
    role: set[str] | None = None


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CreateListingRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    title: str = Field(min_length=1, max_length=100)
    brand: str = Field(min_length=1, max_length=50)
    model: str = Field(min_length=1, max_length=50)
    model_year: int
    mileage: int = Field(ge=0)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    location: str | None = Field(default=None, max_length=100)
    description: str | None = None

    @field_validator("model_year")
    @classmethod
    def _year(cls, v: int) -> int:
        return check_model_year(v)


class UpdateListingRequest(BaseModel):
    """Partial update — omitted fields are left unchanged."""
    model_config = ConfigDict(protected_namespaces=())

    title: str | None = Field(default=None, min_length=1, max_length=100)
    brand: str | None = Field(default=None, min_length=1, max_length=50)
    model: str | None = Field(default=None, min_length=1, max_length=50)
    model_year: int | None = None
    mileage: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    location: str | None = Field(default=None, max_length=100)
    description: str | None = None

    @field_validator("model_year")
    @classmethod
    def _year(cls, v: int | None) -> int | None:
        return check_model_year(v) if v is not None else v
