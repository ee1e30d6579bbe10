import asyncio
import base64
import re

import pytest

from videolib.adapters.blob_sink import LocalBlobSink, UnconfiguredBlobSink
from videolib.adapters.metadata_store import JsonMetadataStore
from videolib.errors import ConfigurationError, ParseError, ValidationError
from videolib.services.ingestion import IngestionService, decode_payload, storage_extension, storage_key
from videolib.utils.mime import resolve_mime_type

from conftest import b64, upload_body


@pytest.fixture
def service(tmp_path) -> IngestionService:
    return IngestionService(JsonMetadataStore(tmp_path / "videos.json"), LocalBlobSink(tmp_path / "uploads"))


@pytest.mark.parametrize(
    "name, expected",
    [("clip.mov", ".mov"), ("archive.tar.MKV", ".MKV"), ("noext", ".mp4"), ("dir\\movie.webm", ".webm")],
)
def test_storage_extension(name, expected):
    assert storage_extension(name) == expected


def test_storage_key_shape_and_uniqueness():
    keys = {storage_key(".mov") for _ in range(200)}

    assert len(keys) == 200
    assert all(re.fullmatch(r"\d+-[0-9a-f-]{36}\.mov", k) for k in keys)


@pytest.mark.parametrize(
    "extension, provided, expected",
    [
        (".mp4", None, "video/mp4"),
        (".MOV", None, "video/quicktime"),
        (".m4v", "", "video/x-m4v"),
        (".webm", "   ", "video/webm"),
        (".mkv", 42, "video/x-matroska"),
        (".avi", None, "application/octet-stream"),
        (".mp4", "video/custom", "video/custom"),
    ],
)
def test_resolve_mime_type(extension, provided, expected):
    assert resolve_mime_type(extension, provided) == expected


def test_upload_stores_bytes_and_appends_record(service, tmp_path):
    record = asyncio.run(service.upload(upload_body(data=b64(b"video-bytes"), folder="Trips")))

    assert record.folder == "Trips"
    assert record.original_name == "clip.mov"
    assert record.file_name.endswith(".mov")
    assert record.url == f"/uploads/{record.file_name}"
    assert record.created_at.endswith("Z")
    assert (tmp_path / "uploads" / record.file_name).read_bytes() == b"video-bytes"
    assert service.store.read_all() == [record]


def test_upload_defaults_folder(service):
    record = asyncio.run(service.upload(upload_body(folder="")))

    assert record.folder == "Unsorted"


def test_upload_ids_are_unique(service):
    records = [asyncio.run(service.upload(upload_body())) for _ in range(5)]

    assert len({r.id for r in records}) == 5
    assert len({r.file_name for r in records}) == 5


@pytest.mark.parametrize(
    "dropped",
    [("data",), ("title", "originalName"), ("title", "description", "originalName", "data")],
)
def test_upload_names_every_missing_field(service, tmp_path, dropped):
    body = upload_body()
    for key in dropped:
        body.pop(key)

    with pytest.raises(ValidationError) as info:
        asyncio.run(service.upload(body))

    assert info.value.missing == dropped
    assert info.value.message == f"Missing required fields: {', '.join(dropped)}"
    assert service.store.read_all() == []
    uploads = tmp_path / "uploads"
    assert not uploads.exists() or not any(uploads.iterdir())


def test_upload_treats_falsy_values_as_missing(service):
    with pytest.raises(ValidationError) as info:
        asyncio.run(service.upload(upload_body(title="", description=None)))

    assert info.value.missing == ("title", "description")


def test_upload_rejects_non_string_fields(service):
    with pytest.raises(ParseError):
        asyncio.run(service.upload(upload_body(title=123)))


@pytest.mark.parametrize(
    "data, expected",
    [
        ("AQID", b"\x01\x02\x03"),
        ("AQI", b"\x01\x02"),
        ("AQ", b"\x01"),
        ("AQI=", b"\x01\x02"),
        ("-_-_", b"\xfb\xff\xbf"),
        ("+/+/", b"\xfb\xff\xbf"),
        ("AQ ID\n", b"\x01\x02\x03"),
    ],
)
def test_decode_payload_accepts_standard_and_url_safe_forms(data, expected):
    assert decode_payload(data) == expected


@pytest.mark.parametrize("data", ["a", "AQIDB", "not base64!", "====", "AQ*D"])
def test_decode_payload_rejects_undecodable_data(data):
    with pytest.raises(ValidationError):
        decode_payload(data)


def test_upload_round_trips_url_safe_payload(service, tmp_path):
    payload = b"\xfb\xff\xbf" * 50 + b"\x00"
    encoded = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")

    record = asyncio.run(service.upload(upload_body(data=encoded)))

    assert (tmp_path / "uploads" / record.file_name).read_bytes() == payload


def test_upload_rejects_undecodable_data(service):
    with pytest.raises(ValidationError):
        asyncio.run(service.upload(upload_body(data="not base64!")))
    assert service.store.read_all() == []


def test_upload_without_storage_creates_no_record(tmp_path):
    service = IngestionService(JsonMetadataStore(tmp_path / "videos.json"), UnconfiguredBlobSink())

    with pytest.raises(ConfigurationError):
        asyncio.run(service.upload(upload_body()))
    assert service.store.read_all() == []
