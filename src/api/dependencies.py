"""
Dependency wiring — lazy singletons + request-scoped auth helpers.

Concrete adapters are built once from Settings and reused by every
request; none of them holds mutable state.
"""

import logging

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import get_settings
from src.core.entities.listing_query import MAX_PAGE_SIZE, PageRequest, SortSpec
from src.core.entities.user import User
from src.core.exceptions import AuthenticationError
from src.core.interfaces.storage_service import IStorageService
from src.core.use_cases.authenticate_user import AuthenticateUserUseCase
from src.core.use_cases.manage_listings import ManageListingsUseCase
from src.core.use_cases.register_user import RegisterUserUseCase
from src.core.use_cases.upload_image import UploadImageUseCase
from src.infrastructure.db.repository import CarListingRepository, UserRepository
from src.infrastructure.security.jwt_service import JwtService
from src.infrastructure.security.password_hasher import PasswordHasher
from src.infrastructure.storage.factory import build_storage_service
from src.infrastructure.validation.file_validator import FileValidator

logger = logging.getLogger(__name__)

# ── Lazy singletons ──
_storage = None
_validator = None
_jwt_service = None
_user_repo = None
_listing_repo = None
_hasher = None

bearer_scheme = HTTPBearer(auto_error=False)


def reset_singletons():
    """Drop cached adapters so the next request rebuilds them from Settings."""
    global _storage, _validator, _jwt_service, _user_repo, _listing_repo, _hasher
    _storage = _validator = _jwt_service = _user_repo = _listing_repo = _hasher = None


def get_storage() -> IStorageService:
    global _storage
    if _storage is None:
        storage = build_storage_service(get_settings())
        storage.init()
        _storage = storage
    return _storage


def get_file_validator() -> FileValidator:
    global _validator
    if _validator is None:
        settings = get_settings()
        _validator = FileValidator(
            allowed_types=settings.upload_allowed_types,
            max_size_bytes=settings.upload_max_file_size,
        )
    return _validator


def get_upload_limit() -> int:
    """Largest upload body buffered per request; one byte more than the validator accepts."""
    return get_file_validator().max_size_bytes + 1


def get_jwt_service() -> JwtService:
    global _jwt_service
    if _jwt_service is None:
        settings = get_settings()
        _jwt_service = JwtService(settings.jwt_secret, settings.jwt_expiration_seconds)
    return _jwt_service


def get_user_repository() -> UserRepository:
    global _user_repo
    if _user_repo is None:
        _user_repo = UserRepository()
    return _user_repo


def get_listing_repository() -> CarListingRepository:
    global _listing_repo
    if _listing_repo is None:
        _listing_repo = CarListingRepository()
    return _listing_repo


def get_password_hasher() -> PasswordHasher:
    global _hasher
    if _hasher is None:
        _hasher = PasswordHasher(iterations=get_settings().password_hash_iterations)
    return _hasher


# ── Use case factories ──

def get_upload_use_case() -> UploadImageUseCase:
    return UploadImageUseCase(validator=get_file_validator(), storage=get_storage())


def get_listings_use_case() -> ManageListingsUseCase:
    return ManageListingsUseCase(
        listings=get_listing_repository(),
        uploader=get_upload_use_case(),
        storage=get_storage(),
    )


def get_register_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(users=get_user_repository(), hasher=get_password_hasher())


def get_authenticate_use_case() -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(
        users=get_user_repository(),
        hasher=get_password_hasher(),
        tokens=get_jwt_service(),
    )


# ── Auth ──

def _resolve_user(credentials: HTTPAuthorizationCredentials | None) -> User | None:
    if credentials is None:
        return None
    try:
        claims = get_jwt_service().validate_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = get_user_repository().find_by_username(claims.username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User | None:
    return _resolve_user(credentials)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    user = _resolve_user(credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Full authentication is required to access this resource",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


# ── Paging ──

def get_page_request(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    sort: str | None = Query(None, description="field,asc|desc"),
) -> PageRequest:
    try:
        return PageRequest(page=page, size=size, sort=SortSpec.parse(sort))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
