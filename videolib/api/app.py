# /videolib/api/app.py

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from videolib.adapters.blob_sink import BlobSink, LocalBlobSink, UnconfiguredBlobSink, build_blob_sink
from videolib.adapters.metadata_store import JsonMetadataStore
from videolib.api.routers import router
from videolib.config import APIConfig, get_api_config
from videolib.errors import VideoLibraryError
from videolib.services.catalog import CatalogService
from videolib.services.ingestion import IngestionService

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _corsify_headers(h: Optional[dict] = None) -> dict:
    h = dict(h or {})
    h["Access-Control-Allow-Origin"] = "*"
    return h


def create_app(cfg: Optional[APIConfig] = None, sink: Optional[BlobSink] = None) -> FastAPI:
    cfg = cfg or get_api_config()

    app = FastAPI(title=f"{cfg.APP_NAME} API", version=cfg.APP_VERSION, redirect_slashes=False)

    store = JsonMetadataStore(cfg.metadata_file)
    sink = sink or build_blob_sink(cfg)

    app.state.cfg = cfg
    app.state.store = store
    app.state.sink = sink
    app.state.ingestion = IngestionService(store, sink)
    # Unconfigured storage still serves whatever is already in the upload dir
    local_reads = None
    if isinstance(sink, UnconfiguredBlobSink):
        local_reads = LocalBlobSink(cfg.upload_dir, url_prefix=f"/{cfg.UPLOADS_PREFIX}")
    app.state.catalog = CatalogService(store, sink, local_reads=local_reads)

    # Permissive CORS: any OPTIONS is a preflight, every response is tagged
    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            headers = dict(CORS_HEADERS)
            requested = request.headers.get("access-control-request-headers")
            if requested:
                headers["Access-Control-Allow-Headers"] = requested
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.exception_handler(VideoLibraryError)
    async def handle_library_error(request: Request, exc: VideoLibraryError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse({"message": exc.message}, status_code=exc.status_code, headers=_corsify_headers())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=_corsify_headers())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"message": "Internal server error."}, status_code=500, headers=_corsify_headers())

    app.include_router(router)

    @app.on_event("startup")
    def on_startup():
        # Ensure storage directory and metadata document
        store.ensure()
        if isinstance(sink, LocalBlobSink):
            sink.ensure()
        logger.info(f"{cfg.APP_NAME} API ready ({sink.kind} storage, metadata at {store.path})")

    @app.on_event("shutdown")
    async def on_shutdown():
        await sink.aclose()

    return app


app = create_app()
