# /videolib/adapters/metadata_store.py
from __future__ import annotations

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from videolib.models import VideoRecord


class MetadataStore(ABC):
    """
    Ordered collection of uploaded video records.
    `append` is a single atomic operation from the caller's point of view.
    """

    @abstractmethod
    async def list_all(self) -> List[VideoRecord]:
        ...

    @abstractmethod
    async def append(self, record: VideoRecord) -> VideoRecord:
        ...


class JsonMetadataStore(MetadataStore):
    """
    Flat JSON array on disk, read and rewritten wholesale on every access.
    Appends are serialised through an asyncio.Lock so concurrent uploads in
    the same process cannot overwrite each other's records.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def ensure(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]", encoding="utf-8")

    # Sync primitives
    def read_all(self) -> List[VideoRecord]:
        if not self.path.exists():
            self.ensure()
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [VideoRecord.model_validate(item) for item in data]
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.error(f"Failed to read metadata file {self.path}: {e}")
            return []

    def write_all(self, records: List[VideoRecord]) -> None:
        payload = json.dumps([r.to_json_dict() for r in records], indent=2, ensure_ascii=False)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self.path)

    # Async API
    async def list_all(self) -> List[VideoRecord]:
        return await asyncio.to_thread(self.read_all)

    async def append(self, record: VideoRecord) -> VideoRecord:
        async with self._lock:
            records = await asyncio.to_thread(self.read_all)
            records.append(record)
            await asyncio.to_thread(self.write_all, records)
        logger.debug(f"Metadata store now holds {len(records)} records")
        return record
