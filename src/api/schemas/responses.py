"""
Pydantic schemas — Response models para a API.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    message: str


class JwtResponse(BaseModel):
    token: str
    type: str = "Bearer"
    id: int
    username: str
    email: str
    roles: list[str]


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    url: str
    file_type: str = Field(alias="fileType")


class SignedUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    expires_in: int = Field(alias="expiresIn")


class CarListingResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: int
    title: str
    brand: str
    model: str
    model_year: int
    mileage: int
    price: Decimal
    location: str | None = None
    description: str | None = None
    image_key: str | None = None
    image_url: str | None = None
    seller_id: int
    seller_username: str = ""
    approved: bool = False
    is_sold: bool = False
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime | None = None


class PageResponse(BaseModel):
    content: list[CarListingResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
    last: bool
