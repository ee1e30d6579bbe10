import json

import httpx
import pytest

from videolib.client import EndpointSnapshot, UploadClient, resolve_api_base


@pytest.mark.parametrize(
    "snapshot, expected",
    [
        (EndpointSnapshot(configured_base="https://api.example.com/", meta_base="https://meta"), "https://api.example.com"),
        (EndpointSnapshot(configured_base="  ", meta_base="https://meta.example.com"), "https://meta.example.com"),
        (EndpointSnapshot(hostname="localhost"), "http://localhost:3000"),
        (EndpointSnapshot(hostname="127.0.0.1"), "http://127.0.0.1:3000"),
        (EndpointSnapshot(hostname="::1"), "http://[::1]:3000"),
        (EndpointSnapshot(hostname="videos.example.com"), ""),
        (EndpointSnapshot(), ""),
    ],
)
def test_resolve_api_base(snapshot, expected):
    assert resolve_api_base(snapshot) == expected


def test_snapshot_from_env():
    snapshot = EndpointSnapshot.from_env({"VIDEOLIB_API_BASE": "http://x", "VIDEOLIB_HOSTNAME": "localhost"})

    assert snapshot == EndpointSnapshot(configured_base="http://x", hostname="localhost")


def test_upload_client_posts_base64_payload(tmp_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json={"id": "1", **{k: v for k, v in body.items() if k != "data"}})

    video = tmp_path / "trip.mov"
    video.write_bytes(b"\x01\x02\x03")

    with UploadClient("http://api.test/", client=httpx.Client(transport=httpx.MockTransport(handler))) as client:
        record = client.upload(video, title="Trip", description="Summer", folder="Holidays")

    (request,) = seen
    assert str(request.url) == "http://api.test/api/videos"
    assert json.loads(request.content) == {
        "title": "Trip",
        "description": "Summer",
        "originalName": "trip.mov",
        "data": "AQID",
        "folder": "Holidays",
    }
    assert record["originalName"] == "trip.mov"


def test_upload_client_raises_on_rejection(tmp_path):
    transport = httpx.MockTransport(lambda r: httpx.Response(400, json={"message": "Missing required fields: title"}))
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")

    with UploadClient("http://api.test", client=httpx.Client(transport=transport)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            client.upload(video, title="", description="d")
