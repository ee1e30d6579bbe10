# /videolib/api/routers/cloud.py

from typing import List

from fastapi import APIRouter, Depends

from videolib.api.dependencies import get_catalog_service
from videolib.models import CloudVideoSummary
from videolib.services.catalog import CatalogService

cloud_router = APIRouter(
    prefix="/cloud-videos",
    tags=["cloud"]
)

@cloud_router.get("")
async def list_cloud_videos(
    catalog: CatalogService = Depends(get_catalog_service)
) -> List[CloudVideoSummary]:
    """
    Everything currently in the storage container, summarised for display.
    """
    return await catalog.list_cloud()
