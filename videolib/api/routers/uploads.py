# /videolib/api/routers/uploads.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, RedirectResponse

from videolib.api.dependencies import get_catalog_service
from videolib.services.catalog import CatalogService, LocalFile
from videolib.utils.mime import VIDEO_MIME_TYPES, DEFAULT_MIME_TYPE

UPLOADS_PREFIX = "/uploads/"

uploads_router = APIRouter(
    prefix="/uploads",
    tags=["uploads"]
)

@uploads_router.get("/{file_path:path}")
def get_upload(
    file_path: str,
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
):
    # Decode from the raw path so percent-escapes are decoded exactly once
    raw_path = request.scope.get("raw_path", b"").split(b"?", 1)[0].decode("latin-1")
    if raw_path.startswith(UPLOADS_PREFIX):
        file_path = raw_path[len(UPLOADS_PREFIX):]

    target = catalog.fetch(file_path)
    if isinstance(target, LocalFile):
        media_type = VIDEO_MIME_TYPES.get(target.path.suffix.lower(), DEFAULT_MIME_TYPE)
        return FileResponse(target.path, media_type=media_type)
    return RedirectResponse(url=target.url, status_code=302)
