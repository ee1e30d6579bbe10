# /videolib/api/routers/utils.py

from fastapi import APIRouter, Request

utils_router = APIRouter(
    prefix="/utils",
    tags=["utils"]
)

@utils_router.get("/health")
def health(request: Request):
    """
    Simple check to see if the API is running, and which storage it writes to.
    """
    return {"status": "ok", "storage": request.app.state.sink.kind}
