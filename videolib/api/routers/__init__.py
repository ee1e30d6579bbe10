# /videolib/api/routers/__init__.py

from fastapi import APIRouter

from .utils import utils_router
from .videos import videos_router
from .cloud import cloud_router
from .uploads import uploads_router

# Create a primary API router
router = APIRouter()


# Mount each sub-router under its own path segment
router.include_router(utils_router, prefix="/api")
router.include_router(videos_router, prefix="/api")
router.include_router(cloud_router, prefix="/api")
router.include_router(uploads_router)
