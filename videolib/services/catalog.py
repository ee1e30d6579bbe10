# /videolib/services/catalog.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import unquote

from loguru import logger

from videolib.adapters.blob_sink import BlobSink, LocalBlobSink
from videolib.adapters.metadata_store import MetadataStore
from videolib.errors import NotFoundError, PathTraversalError
from videolib.models import CloudVideoSummary, VideoRecord
from videolib.utils.misc import display_name, format_file_size


@dataclass(frozen=True)
class LocalFile:
    path: Path

@dataclass(frozen=True)
class Redirect:
    url: str


def normalize_request_path(raw_path: str) -> str:
    """
    Percent-decode a storage-relative path and reject anything empty or
    containing a parent-directory segment.
    """
    try:
        decoded = unquote(raw_path, errors="strict")
    except UnicodeDecodeError as e:
        logger.warning(f"Failed to decode upload path {raw_path!r}: {e}")
        raise PathTraversalError(detail=f"undecodable path {raw_path!r}") from e

    normalized = decoded.replace("\\", "/").lstrip("/")
    if not normalized or ".." in normalized:
        raise PathTraversalError(detail=f"rejected path {raw_path!r}")
    return normalized


class CatalogService:
    def __init__(self, store: MetadataStore, sink: BlobSink, local_reads: Optional[LocalBlobSink] = None) -> None:
        """
        `local_reads` serves stored files when the sink itself cannot
        (storage unconfigured); a local sink always serves its own root.
        """
        self.store = store
        self.sink = sink
        self.local_reads = sink if isinstance(sink, LocalBlobSink) else local_reads

    async def list(self) -> List[VideoRecord]:
        return await self.store.list_all()

    def fetch(self, raw_path: str) -> Union[LocalFile, Redirect]:
        name = normalize_request_path(raw_path)

        if self.local_reads is not None:
            path = self.local_reads.resolve(name)
            if not path.is_file():
                raise NotFoundError(detail=f"{path} does not exist")
            return LocalFile(path)

        # Remote sinks redirect, no existence check here; unconfigured ones raise
        return Redirect(self.sink.locate(name))

    async def list_cloud(self) -> List[CloudVideoSummary]:
        blobs = await self.sink.list_blobs()
        return [
            CloudVideoSummary(
                id=f"{blob.name}-{index}",
                name=blob.name,
                content_type=blob.content_type,
                size=blob.size,
                display_name=display_name(blob.name),
                formatted_size=format_file_size(blob.size),
            )
            for index, blob in enumerate(blobs)
        ]
