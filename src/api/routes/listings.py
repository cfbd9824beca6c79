"""
Routes: /listings — car listing CRUD, search and moderation.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.api.dependencies import (
    get_current_user,
    get_listings_use_case,
    get_optional_user,
    get_page_request,
    get_storage,
    get_upload_limit,
    require_admin,
)
from src.api.routes.images import read_upload
from src.api.schemas.requests import CreateListingRequest, UpdateListingRequest
from src.api.schemas.responses import CarListingResponse, MessageResponse, PageResponse
from src.core.entities.car_listing import CarListing, Page
from src.core.entities.listing_query import ListingFilter, PageRequest
from src.core.entities.user import User
from src.core.interfaces.storage_service import IStorageService
from src.core.use_cases.manage_listings import ListingInput, ManageListingsUseCase

router = APIRouter()


def to_response(listing: CarListing, storage: IStorageService) -> CarListingResponse:
    return CarListingResponse(
        id=listing.id,
        title=listing.title,
        brand=listing.brand,
        model=listing.model,
        model_year=listing.model_year,
        mileage=listing.mileage,
        price=listing.price,
        location=listing.location,
        description=listing.description,
        image_key=listing.image_key,
        image_url=storage.public_url(listing.image_key) if listing.image_key else None,
        seller_id=listing.seller_id,
        seller_username=listing.seller_username,
        approved=listing.approved,
        is_sold=listing.is_sold,
        is_archived=listing.is_archived,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


def to_page_response(page: Page, storage: IStorageService) -> PageResponse:
    return PageResponse(
        content=[to_response(item, storage) for item in page.content],
        page=page.page,
        size=page.size,
        total_elements=page.total_elements,
        total_pages=page.total_pages,
        last=page.last,
    )


def _to_input(req: CreateListingRequest) -> ListingInput:
    return ListingInput(**req.model_dump())


# ── Create ──

@router.post("/listings", response_model=CarListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    req: CreateListingRequest,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    listing = use_case.create(_to_input(req), seller=user)
    return to_response(listing, storage)


@router.post("/listings/with-image", response_model=CarListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing_with_image(
    listing: str = Form(..., description="CreateListingRequest as JSON"),
    image: UploadFile = File(...),
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
    upload_limit: int = Depends(get_upload_limit),
):
    """Multipart create: listing JSON in the `listing` field plus one image."""
    try:
        req = CreateListingRequest.model_validate_json(listing)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    created = use_case.create(_to_input(req), seller=user, image=await read_upload(image, upload_limit))
    return to_response(created, storage)


# ── Read ──

@router.get("/listings", response_model=PageResponse)
async def get_all_listings(
    page: PageRequest = Depends(get_page_request),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    """Approved listings, newest first unless `sort` says otherwise."""
    return to_page_response(use_case.list_approved(page), storage)


@router.get("/listings/filter", response_model=PageResponse)
async def get_filtered_listings(
    brand: str | None = None,
    model: str | None = None,
    min_year: int | None = Query(None, alias="minYear"),
    max_year: int | None = Query(None, alias="maxYear"),
    location: str | None = None,
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    min_mileage: int | None = Query(None, alias="minMileage", ge=0),
    max_mileage: int | None = Query(None, alias="maxMileage", ge=0),
    is_sold: bool | None = Query(None, alias="isSold"),
    is_archived: bool | None = Query(None, alias="isArchived"),
    page: PageRequest = Depends(get_page_request),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    criteria = ListingFilter(
        brand=brand,
        model=model,
        min_year=min_year,
        max_year=max_year,
        location=location,
        min_price=min_price,
        max_price=max_price,
        min_mileage=min_mileage,
        max_mileage=max_mileage,
        is_sold=is_sold,
        is_archived=is_archived,
    )
    return to_page_response(use_case.search(criteria, page), storage)


@router.get("/listings/my-listings", response_model=PageResponse)
async def get_my_listings(
    page: PageRequest = Depends(get_page_request),
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_page_response(use_case.list_for_seller(user, page), storage)


@router.get("/listings/{listing_id}", response_model=CarListingResponse)
async def get_listing(
    listing_id: int,
    viewer: User | None = Depends(get_optional_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_response(use_case.get(listing_id, viewer), storage)


# ── Update ──

@router.put("/listings/{listing_id}", response_model=CarListingResponse)
async def update_listing(
    listing_id: int,
    req: UpdateListingRequest,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    listing = use_case.update(listing_id, user, req.model_dump(exclude_unset=True))
    return to_response(listing, storage)


@router.post("/listings/{listing_id}/image", response_model=CarListingResponse)
async def upload_listing_image(
    listing_id: int,
    image: UploadFile = File(...),
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
    upload_limit: int = Depends(get_upload_limit),
):
    listing = use_case.replace_image(listing_id, user, await read_upload(image, upload_limit))
    return to_response(listing, storage)


@router.put("/listings/{listing_id}/approve", response_model=CarListingResponse)
async def approve_listing(
    listing_id: int,
    admin: User = Depends(require_admin),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_response(use_case.approve(listing_id, admin), storage)


@router.put("/listings/{listing_id}/mark-sold", response_model=CarListingResponse)
async def mark_listing_sold(
    listing_id: int,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_response(use_case.mark_sold(listing_id, user), storage)


@router.put("/listings/{listing_id}/archive", response_model=CarListingResponse)
async def archive_listing(
    listing_id: int,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_response(use_case.archive(listing_id, user), storage)


@router.put("/listings/{listing_id}/unarchive", response_model=CarListingResponse)
async def unarchive_listing(
    listing_id: int,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
    storage: IStorageService = Depends(get_storage),
):
    return to_response(use_case.unarchive(listing_id, user), storage)


# ── Delete ──

@router.delete("/listings/{listing_id}", response_model=MessageResponse)
async def delete_listing(
    listing_id: int,
    user: User = Depends(get_current_user),
    use_case: ManageListingsUseCase = Depends(get_listings_use_case),
):
    use_case.delete(listing_id, user)
    return MessageResponse(message="Listing deleted successfully")
