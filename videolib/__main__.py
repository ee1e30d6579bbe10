# /videolib/__main__.py
import argparse
import json
import sys
from pathlib import Path

import httpx
from loguru import logger

from videolib.client import EndpointSnapshot, UploadClient, resolve_api_base
from videolib.config import get_api_config


def _api_base(args) -> str:
    if args.api:
        return args.api.rstrip("/")
    cfg = get_api_config()
    return resolve_api_base(EndpointSnapshot.from_env()) or f"http://127.0.0.1:{cfg.PORT}"


def serve(args) -> int:
    import uvicorn

    cfg = get_api_config()
    uvicorn.run("videolib.api.app:app", host=args.host or cfg.HOST, port=args.port or cfg.PORT)
    return 0


def upload(args) -> int:
    with UploadClient(_api_base(args)) as client:
        try:
            record = client.upload(
                args.file,
                title=args.title,
                description=args.description,
                folder=args.folder,
                mime_type=args.mime_type,
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"Upload rejected ({e.response.status_code}): {e.response.text}")
            return 1
    print(json.dumps(record, indent=2))
    return 0


def list_videos(args) -> int:
    with UploadClient(_api_base(args)) as client:
        print(json.dumps(client.list_videos(), indent=2))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="videolib", description="Video library upload service")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP server")
    p_serve.add_argument("--host")
    p_serve.add_argument("--port", type=int)
    p_serve.set_defaults(func=serve)

    p_upload = sub.add_parser("upload", help="Upload a video file")
    p_upload.add_argument("file", type=Path)
    p_upload.add_argument("--title", required=True)
    p_upload.add_argument("--description", required=True)
    p_upload.add_argument("--folder")
    p_upload.add_argument("--mime-type")
    p_upload.add_argument("--api", help="API base URL")
    p_upload.set_defaults(func=upload)

    p_list = sub.add_parser("list", help="Print the video catalog")
    p_list.add_argument("--api", help="API base URL")
    p_list.set_defaults(func=list_videos)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
