# /videolib/adapters/blob_sink.py
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, urlsplit
from xml.etree import ElementTree

import httpx
from loguru import logger

from videolib.config import APIConfig
from videolib.errors import (
    ConfigurationError,
    PathTraversalError,
    StorageListError,
    StorageWriteError,
)
from videolib.models import BlobInfo
from videolib.utils.mime import VIDEO_MIME_TYPES, DEFAULT_MIME_TYPE


class BlobSink(ABC):
    kind: str = "abstract"

    @abstractmethod
    async def put(self, name: str, data: bytes, mime_type: Optional[str] = None) -> str:
        """Store `data` under `name` and return the locator URL."""

    @abstractmethod
    def locate(self, name: str) -> str:
        ...

    @abstractmethod
    async def list_blobs(self) -> List[BlobInfo]:
        ...

    async def aclose(self) -> None:
        pass


class LocalBlobSink(BlobSink):
    kind = "local"

    def __init__(self, root: Path, url_prefix: str = "/uploads") -> None:
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, name: str) -> Path:
        """
        Map a storage name to a path inside the root; anything resolving
        outside of it raises PathTraversalError.
        """
        target = (self.root / name).resolve()
        if target != self.root and self.root not in target.parents:
            raise PathTraversalError(detail=f"{name!r} resolves outside {self.root}")
        return target

    async def put(self, name: str, data: bytes, mime_type: Optional[str] = None) -> str:
        target = self.resolve(name)
        if target == self.root:
            raise PathTraversalError(detail=f"{name!r} names the upload root itself")

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageWriteError(detail=f"Local write to {target} failed: {e}") from e

        logger.info(f"Stored {len(data)} bytes at {target}")
        return self.locate(name)

    def locate(self, name: str) -> str:
        return f"{self.url_prefix}/{quote(name, safe='/')}"

    async def list_blobs(self) -> List[BlobInfo]:
        def _scan() -> List[BlobInfo]:
            if not self.root.is_dir():
                return []
            return [
                BlobInfo(
                    name=p.name,
                    content_type=VIDEO_MIME_TYPES.get(p.suffix.lower(), DEFAULT_MIME_TYPE),
                    size=p.stat().st_size,
                )
                for p in sorted(self.root.iterdir())
                if p.is_file()
            ]

        return await asyncio.to_thread(_scan)


class RemoteBlobSink(BlobSink):
    """
    Object-storage container reached through a pre-signed URL. The query
    string carries the credential and is copied verbatim onto every request.
    """
    kind = "remote"

    def __init__(
        self,
        base_url: str,
        query: str = "",
        client: Optional[httpx.AsyncClient] = None,
        api_version: str = "2022-11-02",
        timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.query = query.lstrip("?")
        self.api_version = api_version
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_sas_url(cls, sas_url: str, **kwargs) -> "RemoteBlobSink":
        parts = urlsplit(sas_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"not an http(s) URL with a host: {sas_url!r}")
        base = f"{parts.scheme}://{parts.netloc}{parts.path.rstrip('/')}"
        return cls(base, parts.query, **kwargs)

    def _with_query(self, url: str, extra: str = "") -> str:
        query = "&".join(q for q in (self.query, extra) if q)
        return f"{url}?{query}" if query else url

    def locate(self, name: str) -> str:
        return self._with_query(f"{self.base_url}/{quote(name, safe='')}")

    async def put(self, name: str, data: bytes, mime_type: Optional[str] = None) -> str:
        blob_url = self.locate(name)
        headers = {
            "x-ms-blob-type": "BlockBlob",
            "x-ms-version": self.api_version,
            "Content-Type": mime_type or DEFAULT_MIME_TYPE,
            "Content-Length": str(len(data)),
        }
        try:
            response = await self._client.put(blob_url, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageWriteError(detail=f"Blob upload request failed: {e!r}") from e

        if not response.is_success:
            raise StorageWriteError(
                detail=f"Blob upload failed with status {response.status_code}: {response.text}"
            )

        logger.info(f"Uploaded {len(data)} bytes to remote blob {name}")
        return blob_url

    async def list_blobs(self) -> List[BlobInfo]:
        blobs: List[BlobInfo] = []
        marker = ""
        while True:
            extra = "restype=container&comp=list"
            if marker:
                extra += f"&marker={quote(marker, safe='')}"
            try:
                response = await self._client.get(self._with_query(self.base_url, extra))
            except httpx.HTTPError as e:
                raise StorageListError(detail=f"Blob listing request failed: {e!r}") from e
            if not response.is_success:
                raise StorageListError(
                    detail=f"Blob listing failed with status {response.status_code}: {response.text}"
                )

            try:
                page, marker = self._parse_listing(response.content)
            except ElementTree.ParseError as e:
                raise StorageListError(detail=f"Unreadable blob listing: {e}") from e
            blobs.extend(page)
            if not marker:
                return blobs

    @staticmethod
    def _parse_listing(xml_bytes: bytes) -> tuple:
        root = ElementTree.fromstring(xml_bytes)
        page = []
        for blob in root.iter("Blob"):
            props = blob.find("Properties")
            size_text = props.findtext("Content-Length") if props is not None else None
            page.append(
                BlobInfo(
                    name=blob.findtext("Name") or "",
                    content_type=props.findtext("Content-Type") if props is not None else None,
                    size=int(size_text) if size_text and size_text.isdigit() else 0,
                )
            )
        return page, (root.findtext("NextMarker") or "").strip()

    async def aclose(self) -> None:
        await self._client.aclose()


class UnconfiguredBlobSink(BlobSink):
    kind = "unconfigured"

    def __init__(self, reason: str = "Blob storage is not configured.") -> None:
        self.reason = reason

    async def put(self, name: str, data: bytes, mime_type: Optional[str] = None) -> str:
        raise ConfigurationError(detail=self.reason)

    def locate(self, name: str) -> str:
        raise ConfigurationError("Unable to resolve stored file location.", detail=self.reason)

    async def list_blobs(self) -> List[BlobInfo]:
        raise ConfigurationError(detail=self.reason)


def build_blob_sink(cfg: APIConfig, client: Optional[httpx.AsyncClient] = None) -> BlobSink:
    """
    Pick the storage backend once, at startup.
    No connection URL -> local disk. Malformed URL -> storage disabled.
    """
    sas_url = (cfg.AZURE_CONTAINER_SAS_URL or "").strip()
    if not sas_url:
        logger.info(f"No remote storage configured, storing uploads in {cfg.upload_dir}")
        return LocalBlobSink(cfg.upload_dir, url_prefix=f"/{cfg.UPLOADS_PREFIX}")

    try:
        sink = RemoteBlobSink.from_sas_url(
            sas_url,
            client=client,
            api_version=cfg.AZURE_BLOB_API_VERSION,
            timeout=cfg.REMOTE_TIMEOUT_S,
        )
    except ValueError as e:
        logger.warning(f"Invalid blob storage SAS URL provided, remote storage disabled: {e}")
        return UnconfiguredBlobSink(f"Invalid blob storage SAS URL: {e}")

    if not sink.query:
        logger.warning("Blob storage SAS URL is missing the SAS query string.")
    logger.info(f"Storing uploads in remote container {sink.base_url}")
    return sink
