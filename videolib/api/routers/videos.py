# /videolib/api/routers/videos.py

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from videolib.api.dependencies import get_catalog_service, get_config, get_ingestion_service
from videolib.config import APIConfig
from videolib.errors import ParseError, PayloadTooLargeError
from videolib.models import VideoRecord
from videolib.services.catalog import CatalogService
from videolib.services.ingestion import IngestionService

videos_router = APIRouter(
    prefix="/videos",
    tags=["videos"]
)


async def read_json_body(request: Request, limit: int) -> Dict[str, Any]:
    """
    Read the request body up to `limit` bytes and parse it as a JSON object.
    An empty body is treated as an empty object.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(detail=f"declared body of {declared} bytes exceeds {limit}")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(detail=f"body exceeds {limit} bytes")

    if not body:
        return {}

    try:
        parsed = json.loads(body)
    except ValueError as e:
        raise ParseError(detail=f"Upload body is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ParseError(detail=f"Upload body must be a JSON object, got {type(parsed).__name__}")
    return parsed


@videos_router.get("")
async def list_videos(
    catalog: CatalogService = Depends(get_catalog_service)
) -> List[VideoRecord]:
    return await catalog.list()

@videos_router.post("", status_code=201)
async def upload_video(
    request: Request,
    cfg: APIConfig = Depends(get_config),
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    body = await read_json_body(request, cfg.MAX_UPLOAD_BYTES)
    record = await ingestion.upload(body)
    return JSONResponse(record.to_json_dict(), status_code=201)
