"""FastAPI dependencies shared by the catalog controllers."""

from functools import lru_cache
from typing import NoReturn

from fastapi import Header, HTTPException

from catalogmate.models.errors import CatalogError
from catalogmate.services.catalog_services import CatalogServices, CatalogServicesFactory

TENANT_HEADER = "X-Tenant-ID"
USER_HEADER = "X-User-ID"


@lru_cache(maxsize=1)
def get_catalog_services() -> CatalogServices:
    """One CatalogServices per process so the business id sequence is shared"""
    return CatalogServicesFactory.create_default()


def get_tenant_id(x_tenant_id: str | None = Header(None, alias=TENANT_HEADER)) -> str:
    """Tenant scope of the request; authentication happens upstream"""
    if not x_tenant_id or not x_tenant_id.strip():
        raise HTTPException(status_code=400, detail=f"Missing {TENANT_HEADER} header")
    return x_tenant_id.strip()


def get_user_id(x_user_id: str | None = Header(None, alias=USER_HEADER)) -> str:
    if not x_user_id or not x_user_id.strip():
        return "anonymous"
    return x_user_id.strip()


def raise_for_error(error: CatalogError) -> NoReturn:
    """Translate a service error into an HTTP error with its caller-safe message"""
    raise HTTPException(status_code=error.kind.http_status(), detail=error.message)
