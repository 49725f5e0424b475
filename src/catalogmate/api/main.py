"""Main FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalogmate import __version__
from catalogmate.api.interfaces.controllers.root_controller import router as root_router
from catalogmate.api.interfaces.controllers.catalog_controller import router as catalog_router
from catalogmate.utils.settings.factory import settings_factory


app_settings = settings_factory.create_app_settings()

app = FastAPI(
    title="Catalogmate API",
    description="Schema-less product catalog ingestion and relevance-ranked search",
    version=__version__
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(root_router)
app.include_router(catalog_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app_settings.host, port=app_settings.port)
