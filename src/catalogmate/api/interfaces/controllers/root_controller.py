"""Root controller for basic application endpoints."""

from fastapi import APIRouter, Depends
from loguru import logger

from catalogmate import __version__
from catalogmate.api.dependencies import get_catalog_services
from catalogmate.services.catalog_services import CatalogServices
from catalogmate.utils.settings.factory import settings_factory


router = APIRouter(tags=["root"])


@router.get("/")
async def root():
    """Root endpoint with basic API information."""
    logger.info("Root endpoint accessed")
    return {
        "message": "Welcome to Catalogmate API",
        "version": __version__,
        "status": "running"
    }


@router.get("/health")
async def health_check(services: CatalogServices = Depends(get_catalog_services)):
    """Health check endpoint including document store reachability."""
    logger.info("Health check endpoint accessed")
    store_healthy = services.store.health_check()
    return {
        "status": "healthy" if store_healthy else "degraded",
        "store": "up" if store_healthy else "down",
        "environment": settings_factory.create_app_settings().environment,
    }
