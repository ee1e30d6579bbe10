# /videolib/client.py
from __future__ import annotations

import base64
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

import httpx
from loguru import logger

LOCAL_HOSTNAMES = ("localhost", "127.0.0.1", "::1")
LOCAL_API_PORT = 3000


@dataclass(frozen=True)
class EndpointSnapshot:
    """
    Everything the API base can be derived from, captured once.
    """
    configured_base: Optional[str] = None
    meta_base: Optional[str] = None
    hostname: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EndpointSnapshot":
        env = os.environ if environ is None else environ
        return cls(
            configured_base=env.get("VIDEOLIB_API_BASE"),
            meta_base=env.get("VIDEOLIB_API_META"),
            hostname=env.get("VIDEOLIB_HOSTNAME"),
        )


def resolve_api_base(snapshot: EndpointSnapshot) -> str:
    """
    Pick one API base: explicit configuration, then the meta value, then the
    local development server for localhost hostnames. Empty means same origin.
    """
    for candidate in (snapshot.configured_base, snapshot.meta_base):
        if candidate and candidate.strip():
            return candidate.strip().rstrip("/")

    hostname = (snapshot.hostname or "").strip().lower()
    if hostname in LOCAL_HOSTNAMES:
        host = f"[{hostname}]" if ":" in hostname else hostname
        return f"http://{host}:{LOCAL_API_PORT}"
    return ""


class UploadClient:
    def __init__(self, base_url: str, client: Optional[httpx.Client] = None, timeout: float = 120.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def list_videos(self) -> List[dict]:
        response = self._client.get(f"{self.base_url}/api/videos")
        response.raise_for_status()
        return response.json()

    def upload(
        self,
        path: Path,
        title: str,
        description: str,
        folder: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> dict:
        path = Path(path)
        payload = {
            "title": title,
            "description": description,
            "originalName": path.name,
            "data": base64.b64encode(path.read_bytes()).decode("ascii"),
        }
        if folder:
            payload["folder"] = folder
        if mime_type:
            payload["mimeType"] = mime_type

        logger.info(f"Uploading {path} to {self.base_url}")
        response = self._client.post(f"{self.base_url}/api/videos", json=payload)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "UploadClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
