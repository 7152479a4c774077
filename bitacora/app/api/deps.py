# bitacora/app/api/deps.py
"""
Request-scoped dependencies: settings, repositories, the auth gate, the
admin guard, upload policies and list filters.
"""
import logging
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.core.config import Settings
from bitacora.app.core.exceptions import AppError, BadRequest, Forbidden, InternalError, Unauthorized
from bitacora.app.db.base import is_object_id
from bitacora.app.db.session import get_db
from bitacora.app.repositories import (
    ActivityRepository,
    ImageRepository,
    ListFilters,
    PostRepository,
    SiteSettingsRepository,
    UserRepository,
)
from bitacora.app.repositories.interfaces import (
    ActivityStore,
    ImageStore,
    PostStore,
    SiteSettingsStore,
    UserStore,
)
from bitacora.app.schemas.user import CurrentUser
from bitacora.app.security.jwt import TokenService
from bitacora.app.security.upload import AcceptedUpload
from bitacora.app.services.auth import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT returned by /auth/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


# --- Repositories (one per request, sharing the request's session) ---

def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserStore:
    return UserRepository(db)


def get_post_repository(db: AsyncSession = Depends(get_db)) -> PostStore:
    return PostRepository(db)


def get_activity_repository(db: AsyncSession = Depends(get_db)) -> ActivityStore:
    return ActivityRepository(db)


def get_image_repository(db: AsyncSession = Depends(get_db)) -> ImageStore:
    return ImageRepository(db)


def get_site_settings_repository(db: AsyncSession = Depends(get_db)) -> SiteSettingsStore:
    return SiteSettingsRepository(db)


def get_auth_service(
        db: AsyncSession = Depends(get_db),
        users: UserStore = Depends(get_user_repository),
        tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, users, tokens)


# --- Auth gate ---

async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        users: UserStore = Depends(get_user_repository),
        tokens: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.

    - no bearer token          → 401 "Access token required"
    - bad / expired token      → 403 "Invalid token" / "Token expired"
    - unknown or inactive user → 401 "Invalid or inactive user"
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access token required")

    try:
        user_id = tokens.verify(credentials.credentials)
        user = await users.get_by_id(user_id)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure while authenticating request")
        raise InternalError() from exc

    if user is None or not user.is_active:
        raise Unauthorized("Invalid or inactive user")

    return CurrentUser(id=user.id, email=user.email, name=user.name, role=user.role)


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise Forbidden("Access denied. Administrator privileges required")
    return current_user


# --- Upload policies (sized from settings at startup) ---

async def character_image_upload(request: Request) -> AcceptedUpload:
    return await request.app.state.upload_policies.character_image(request)


async def document_upload(request: Request) -> AcceptedUpload:
    return await request.app.state.upload_policies.document(request)


async def general_upload(request: Request) -> AcceptedUpload:
    return await request.app.state.upload_policies.general(request)


# --- Ids and list filters ---

def ensure_object_id(value: str, resource: str) -> str:
    """Malformed ids fail before any query runs."""
    if not is_object_id(value):
        raise BadRequest(f"Invalid {resource} id")
    return value.lower()


def get_page_filters(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        search: Optional[str] = Query(None, max_length=200),
) -> ListFilters:
    """Paging and free-text search for lists already scoped to the caller."""
    search = search.strip() if search else None
    return ListFilters(page=page, limit=limit, search=search or None)


def get_list_filters(
        page_filters: ListFilters = Depends(get_page_filters),
        user_id: Optional[str] = Query(None, alias="userId"),
) -> ListFilters:
    if user_id is not None:
        page_filters.user_id = ensure_object_id(user_id, "user")
    return page_filters
