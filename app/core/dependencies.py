import secrets
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator, Optional

from ..core.config import Config
from ..db.database import AsyncSessionLocal
from ..exceptions import AdminTokenRequiredException, InvalidAdminTokenException
from ..repositories import DatabaseStorage, Storage
from ..services import CategoryService, ProductService, RepairCatalogService, RepairRequestService


admin_bearer = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Asynchronous dependency that provides a database session for FastAPI routes.

    Yields:
        AsyncSession: An instance of the asynchronous database session.

    Usage:
        Use as a dependency in FastAPI endpoints to access the database session.
        The session is automatically closed after the request is processed.
    """

    async with AsyncSessionLocal() as db:
        yield db


async def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    """
    Provide the storage boundary the services work against, bound to the
    request's database session.
    """

    return DatabaseStorage(db)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_bearer),
) -> bool:
    """
    Guard for admin endpoints.

    Admin sessions are issued outside this service; requests carry the shared
    admin token as a bearer credential.

    Raises:
        AdminTokenRequiredException: If no bearer token was sent.
        InvalidAdminTokenException: If the token does not match ``ADMIN_TOKEN``.
    """
    if credentials is None or not credentials.credentials:
        raise AdminTokenRequiredException()

    if not secrets.compare_digest(credentials.credentials.encode(), Config.ADMIN_TOKEN.encode()):
        raise InvalidAdminTokenException()

    return True


async def get_category_service(storage: Storage = Depends(get_storage)) -> CategoryService:
    return CategoryService(storage)


async def get_product_service(storage: Storage = Depends(get_storage)) -> ProductService:
    return ProductService(storage)


async def get_repair_request_service(storage: Storage = Depends(get_storage)) -> RepairRequestService:
    """
    Dependency function that provides an instance of RepairRequestService
    initialized with the request-scoped storage.
    """

    return RepairRequestService(storage)


async def get_repair_catalog_service(storage: Storage = Depends(get_storage)) -> RepairCatalogService:
    return RepairCatalogService(storage)
