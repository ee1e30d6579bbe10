import base64
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from videolib.adapters.blob_sink import RemoteBlobSink
from videolib.api.app import create_app
from videolib.config import APIConfig

SAS_URL = "https://example.blob.core.windows.net/videos?sv=2024-11-04&sr=c&sig=abc%2Fdef%3D"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def upload_body(**overrides) -> dict:
    body = {
        "title": "T",
        "description": "D",
        "originalName": "clip.mov",
        "data": b64(b"\x00\x01\x02"),
    }
    body.update(overrides)
    return body


@pytest.fixture
def cfg(tmp_path) -> APIConfig:
    return APIConfig(DATA_DIR=tmp_path, AZURE_CONTAINER_SAS_URL=None)


@pytest.fixture
def client(cfg):
    with TestClient(create_app(cfg)) as c:
        yield c


class RecordingHandler:
    """
    httpx.MockTransport handler that records requests and answers with a
    configurable response factory.
    """

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response] = None) -> None:
        self.requests: List[httpx.Request] = []
        self.respond = respond or (lambda request: httpx.Response(201))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.respond(request)


@pytest.fixture
def remote_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def remote_sink(remote_handler) -> RemoteBlobSink:
    transport = httpx.MockTransport(remote_handler)
    return RemoteBlobSink.from_sas_url(SAS_URL, client=httpx.AsyncClient(transport=transport))


@pytest.fixture
def remote_client(cfg, remote_sink):
    with TestClient(create_app(cfg, sink=remote_sink)) as c:
        yield c
