from fastapi import FastAPI

from imagecolors import __version__
from imagecolors.api.v1 import router as v1_router
from imagecolors.schemas import HealthResponse
from imagecolors.utils.logging import get_logger

# Configure loguru sinks once for the process
get_logger()

app = FastAPI(
    title="Image Colors Service",
    description="Extract representative colors from images for UI theming",
    version=__version__
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Liveness probe."""
    return HealthResponse(ok=True, version=__version__, service="imagecolors")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Image Colors API",
        "version": __version__,
        "docs": "/docs"
    }
