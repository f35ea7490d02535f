#!/usr/bin/env python3
"""
Upload files or shorten URLs against a running CamDN server.

Examples:
    python scripts/upload.py --server http://127.0.0.1:3000 --api-key secret file cat.png
    python scripts/upload.py --api-key secret shorten https://example.com/long/path
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import os
import sys
import urllib.error
import urllib.request
import uuid
from pathlib import Path
from typing import Any, Iterator, Optional

CHUNK_SIZE = 1024 * 1024


def http_put_json(url: str, payload: dict[str, Any], headers: Optional[dict[str, str]] = None,
                  timeout: int = 30) -> tuple[int, bytes]:
    data = json.dumps(payload).encode("utf-8")
    req_headers = {"Content-Type": "application/json"}
    if headers:
        req_headers.update(headers)
    req = urllib.request.Request(url, data=data, headers=req_headers, method="PUT")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as exc:
        return exc.code, exc.read()


def _multipart_parts(path: Path, boundary: str) -> tuple[bytes, bytes]:
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="file"; filename="{path.name}"\r\n'
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
    return head, tail


def _iter_body(path: Path, head: bytes, tail: bytes) -> Iterator[bytes]:
    yield head
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    yield tail


def http_put_file(url: str, path: Path, headers: Optional[dict[str, str]] = None,
                  timeout: int = 600) -> tuple[int, bytes]:
    """Stream ``path`` as a single-file multipart body without loading it into memory."""
    boundary = "----CamdnBoundary" + uuid.uuid4().hex
    head, tail = _multipart_parts(path, boundary)
    req_headers = {
        "Content-Type": f"multipart/form-data; boundary={boundary}",
        "Content-Length": str(len(head) + os.path.getsize(path) + len(tail)),
    }
    if headers:
        req_headers.update(headers)

    req = urllib.request.Request(url, data=_iter_body(path, head, tail), headers=req_headers, method="PUT")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as exc:
        return exc.code, exc.read()


def upload_file(server: str, api_key: str, path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise SystemExit(f"file not found: {path}")
    url = server.rstrip("/") + "/upload"
    print(f"[api] uploading {path.name} to {url}", file=sys.stderr)
    status, body = http_put_file(url, path, headers={"Authorization": api_key})
    if status != 200:
        raise SystemExit(f"upload failed: {status} {body.decode(errors='ignore')}")
    return json.loads(body.decode("utf-8"))


def shorten_url(server: str, api_key: str, target: str) -> dict[str, Any]:
    url = server.rstrip("/") + "/shorten"
    status, body = http_put_json(url, {"url": target}, headers={"Authorization": api_key})
    if status != 200:
        raise SystemExit(f"shorten failed: {status} {body.decode(errors='ignore')}")
    return json.loads(body.decode("utf-8"))


def main() -> None:
    parser = argparse.ArgumentParser(description="CamDN command line client")
    parser.add_argument("--server", default=os.environ.get("CAMDN_SERVER", "http://127.0.0.1:3000"),
                        help="CamDN server base URL")
    parser.add_argument("--api-key", default=os.environ.get("API_KEY"), help="Shared API key")
    sub = parser.add_subparsers(dest="command", required=True)

    file_cmd = sub.add_parser("file", help="Upload one or more files")
    file_cmd.add_argument("paths", nargs="+", type=Path)

    shorten_cmd = sub.add_parser("shorten", help="Create a short link")
    shorten_cmd.add_argument("url")

    args = parser.parse_args()
    if not args.api_key:
        raise SystemExit("an API key is required (--api-key or API_KEY)")

    if args.command == "file":
        for path in args.paths:
            resp = upload_file(args.server, args.api_key, path)
            print(resp.get("fileName", json.dumps(resp, ensure_ascii=False)))
    else:
        resp = shorten_url(args.server, args.api_key, args.url)
        print(resp.get("url", json.dumps(resp, ensure_ascii=False)))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit("aborted by user")
