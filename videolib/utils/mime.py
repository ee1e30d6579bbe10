from typing import Any, Optional

DEFAULT_EXTENSION = ".mp4"
DEFAULT_MIME_TYPE = "application/octet-stream"

VIDEO_MIME_TYPES = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".m4v": "video/x-m4v",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
}


def resolve_mime_type(extension: str, provided: Optional[Any] = None) -> str:
    """
    Caller-provided MIME type wins when it is a non-blank string, otherwise
    the extension is looked up (case-insensitively) in VIDEO_MIME_TYPES.
    """
    if isinstance(provided, str) and provided.strip():
        return provided
    return VIDEO_MIME_TYPES.get((extension or "").lower(), DEFAULT_MIME_TYPE)
