"""Catalog controller for upload, search and product endpoints."""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, UploadFile
from loguru import logger
from pydantic import ValidationError

from catalogmate.api.dependencies import get_catalog_services, get_tenant_id, get_user_id, raise_for_error
from catalogmate.api.interfaces.controllers.schemas import (
    AvailableFilterResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    HeaderPreviewResponse,
    ProductPageResponse,
    ProductResponse,
    SearchRequest,
    UpdateProductRequest,
    UploadResponse,
    ValuesResponse,
)
from catalogmate.services.catalog_services import CatalogServices


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


# Fixed paths are declared before /{product_id}
@router.post("/preview-headers", response_model=HeaderPreviewResponse)
async def preview_headers(
    file: UploadFile = File(..., description="CSV or Excel file"),
    services: CatalogServices = Depends(get_catalog_services),
):
    """
    Show the normalized key every column header of a file would get.

    Nothing is stored. Useful to check a spreadsheet before uploading it.
    """
    try:
        content = await file.read()
        logger.info(f"Previewing headers of '{file.filename}' ({len(content)} bytes)")

        result = services.ingestion.preview_headers(file.filename, content)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return HeaderPreviewResponse.from_columns(file.filename, result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error previewing headers: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error previewing headers")


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_catalog(
    file: UploadFile = File(..., description="CSV or Excel file; the first row holds the headers"),
    tenant_id: str = Depends(get_tenant_id),
    user_id: str = Depends(get_user_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """
    Ingest a spreadsheet: one product per non-empty data row.

    A partial store failure still returns 201; compare totalProducts with
    attemptedProducts.

    Example:
        curl -F file=@products.xlsx -H "X-Tenant-ID: acme" /api/catalog/upload
    """
    try:
        content = await file.read()
        logger.info(f"[Tenant: {tenant_id}] Upload of '{file.filename}' by {user_id} ({len(content)} bytes)")

        result = services.ingestion.ingest(tenant_id, file.filename, content, user_id)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return UploadResponse.from_result(result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error uploading catalog: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error uploading catalog")


@router.post("/search", response_model=ProductPageResponse)
async def search_catalog(
    request: SearchRequest,
    tenant_id: str = Depends(get_tenant_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """
    Search products by keyword, category and attribute filters.

    With a keyword the results are ordered by relevance; otherwise by sortBy
    and sortDirection.

    Example:
        POST /api/catalog/search
        {"keyword": "pipe", "filters": {"size_millimeter": {"type": "RANGE", "min": 10, "max": 20}}}
    """
    try:
        try:
            query = request.to_query(default_size=services.settings.default_page_size)
        except ValidationError as e:
            logger.warning(f"[Tenant: {tenant_id}] Invalid search filters: {e}")
            raise HTTPException(status_code=400, detail=f"Invalid filter: {e.errors()[0]['msg']}")

        result = services.search.search(tenant_id, query)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return ProductPageResponse.from_page(result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error searching catalog: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error searching catalog")


@router.get("/filters", response_model=List[AvailableFilterResponse])
async def get_available_filters(
    tenant_id: str = Depends(get_tenant_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """List every attribute key of the tenant's catalog with its type and values."""
    try:
        result = services.search.list_available_filters(tenant_id)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return [AvailableFilterResponse.from_descriptor(descriptor) for descriptor in result.unwrap()]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error listing filters: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing filters")


@router.get("/attributes/{attribute_key}/values", response_model=ValuesResponse)
async def get_attribute_values(
    attribute_key: str = Path(..., description="Normalized attribute key"),
    tenant_id: str = Depends(get_tenant_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """Distinct values of one attribute across the tenant's catalog."""
    try:
        result = services.search.distinct_values(tenant_id, attribute_key)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return ValuesResponse(values=result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error listing values of '{attribute_key}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing attribute values")


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_products(
    request: BulkDeleteRequest,
    tenant_id: str = Depends(get_tenant_id),
    user_id: str = Depends(get_user_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """Delete several products; unknown ids are skipped and not counted."""
    try:
        if request.hard:
            result = services.documents.bulk_hard_delete(tenant_id, request.ids)
        else:
            result = services.documents.bulk_soft_delete(tenant_id, request.ids, user_id)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return BulkDeleteResponse(deleted_count=result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error bulk deleting products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error deleting products")


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    tenant_id: str = Depends(get_tenant_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """Get one product by its document id."""
    try:
        result = services.documents.get(tenant_id, product_id)
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return ProductResponse.from_document(result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error fetching product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching product")


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    tenant_id: str = Depends(get_tenant_id),
    user_id: str = Depends(get_user_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """Replace the display name and/or the attribute list of a product."""
    try:
        attributes = [item.to_input() for item in request.attributes] if request.attributes is not None else None
        result = services.documents.update(
            tenant_id,
            product_id,
            user_id,
            display_name=request.display_name,
            attributes=attributes,
        )
        if result.is_err():
            raise_for_error(result.unwrap_err())
        return ProductResponse.from_document(result.unwrap())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error updating product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error updating product")


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    hard: bool = Query(False, description="Permanently remove the product"),
    tenant_id: str = Depends(get_tenant_id),
    user_id: str = Depends(get_user_id),
    services: CatalogServices = Depends(get_catalog_services),
):
    """Soft-delete a product, or remove it permanently with ?hard=true."""
    try:
        if hard:
            result = services.documents.hard_delete(tenant_id, product_id)
        else:
            result = services.documents.soft_delete(tenant_id, product_id, user_id)
        if result.is_err():
            raise_for_error(result.unwrap_err())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Tenant: {tenant_id}] Error deleting product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error deleting product")
