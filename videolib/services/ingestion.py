# /videolib/services/ingestion.py
from __future__ import annotations

import base64
import binascii
from pathlib import PurePosixPath
from typing import Any, Dict

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from videolib.adapters.blob_sink import BlobSink
from videolib.adapters.metadata_store import MetadataStore
from videolib.config import APIConfig
from videolib.errors import ParseError, ValidationError, VideoLibraryError
from videolib.models import REQUIRED_UPLOAD_FIELDS, UploadRequest, VideoRecord
from videolib.utils.mime import DEFAULT_EXTENSION, resolve_mime_type
from videolib.utils.misc import monotonic_ms, new_id

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")
_BASE64_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/")


def storage_extension(original_name: str) -> str:
    return PurePosixPath(original_name.replace("\\", "/")).suffix or DEFAULT_EXTENSION

def storage_key(extension: str) -> str:
    return f"{monotonic_ms()}-{new_id()}{extension}"


def decode_payload(data: str) -> bytes:
    """
    Decode standard or URL-safe base64, with or without padding.
    Whitespace is ignored; anything else outside the alphabet is rejected.
    """
    cleaned = "".join(data.split()).translate(_URLSAFE_TO_STANDARD).rstrip("=")
    if not cleaned or len(cleaned) % 4 == 1 or not _BASE64_ALPHABET.issuperset(cleaned):
        raise ValidationError("Field 'data' is not valid base64.")

    padded = cleaned + "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Field 'data' is not valid base64.") from e


class IngestionService:
    def __init__(self, store: MetadataStore, sink: BlobSink) -> None:
        self.store = store
        self.sink = sink

    @staticmethod
    def validate(body: Dict[str, Any]) -> UploadRequest:
        missing = [key for key in REQUIRED_UPLOAD_FIELDS if not body.get(key)]
        if missing:
            raise ValidationError.missing_fields(missing)

        try:
            return UploadRequest.model_validate(body)
        except PydanticValidationError as e:
            raise ParseError(detail=str(e)) from e

    async def upload(self, body: Dict[str, Any]) -> VideoRecord:
        req = self.validate(body)

        extension = storage_extension(req.original_name)
        file_name = storage_key(extension)
        mime_type = resolve_mime_type(extension, req.mime_type)
        payload = decode_payload(req.data)

        try:
            url = await self.sink.put(file_name, payload, mime_type)
        except VideoLibraryError as e:
            logger.error(f"Failed to store upload {file_name} ({self.sink.kind}): {e}")
            raise

        record = VideoRecord(
            title=req.title,
            description=req.description,
            folder=req.folder or APIConfig.DEFAULT_FOLDER,
            original_name=req.original_name,
            file_name=file_name,
            url=url,
        )
        await self.store.append(record)

        logger.info(f"Uploaded '{record.title}' as {file_name} ({mime_type}, {len(payload)} bytes)")
        return record
