#!/usr/bin/env python3
"""
Sign in with a one-time code and upload a video file to the VOD server.

Example:
    python scripts/upload_video.py movie.mp4 \
        --server http://127.0.0.1:8000 \
        --phone +15551234567 \
        --title "Big Buck Bunny" --category animation --duration 596

Outside production the server returns the code as ``devOtp`` and it is used
automatically; otherwise the script prompts for the code sent by SMS.
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
import urllib.error
import urllib.request
import uuid
from pathlib import Path
from typing import Any, Optional


def http_post_json(url: str, payload: dict[str, Any], headers: Optional[dict[str, str]] = None,
                   timeout: int = 30) -> tuple[int, bytes]:
    data = json.dumps(payload).encode("utf-8")
    req_headers = {"Content-Type": "application/json"}
    if headers:
        req_headers.update(headers)
    req = urllib.request.Request(url, data=data, headers=req_headers, method="POST")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as exc:
        return exc.code, exc.read()


def http_post_multipart(url: str,
                        fields: dict[str, str],
                        files: dict[str, tuple[str, bytes, str]],
                        headers: Optional[dict[str, str]] = None,
                        timeout: int = 600) -> tuple[int, bytes]:
    boundary = "----VodBoundary" + uuid.uuid4().hex
    body = bytearray()

    def add_line(line: str) -> None:
        body.extend(line.encode("utf-8"))

    for name, value in fields.items():
        add_line(f"--{boundary}\r\n")
        add_line(f'Content-Disposition: form-data; name="{name}"\r\n\r\n')
        add_line(f"{value}\r\n")

    for name, (filename, content, content_type) in files.items():
        add_line(f"--{boundary}\r\n")
        add_line(f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n')
        add_line(f"Content-Type: {content_type}\r\n\r\n")
        body.extend(content)
        body.extend(b"\r\n")

    add_line(f"--{boundary}--\r\n")

    req_headers = {"Content-Type": f"multipart/form-data; boundary={boundary}"}
    if headers:
        req_headers.update(headers)

    req = urllib.request.Request(url, data=bytes(body), headers=req_headers, method="POST")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as exc:
        return exc.code, exc.read()


def _expect(status: int, body: bytes, action: str, expected: tuple[int, ...] = (200,)) -> dict[str, Any]:
    if status not in expected:
        raise SystemExit(f"{action} failed: {status} {body.decode(errors='ignore')}")
    return json.loads(body.decode("utf-8"))


def login(server: str, phone: str, code: Optional[str]) -> str:
    api = server.rstrip("/") + "/api/auth"
    print(f"[api] requesting code for {phone}")
    sent = _expect(*http_post_json(f"{api}/send-otp", {"phoneNumber": phone}, timeout=15), "send-otp")

    code = code or sent.get("devOtp")
    if not code:
        code = input("Enter the code you received: ").strip()

    verified = _expect(
        *http_post_json(f"{api}/verify-otp", {"phoneNumber": phone, "otp": code, "deviceInfo": "upload_video.py"}),
        "verify-otp",
    )
    token = (verified.get("tokens") or {}).get("accessToken")
    if not token:
        raise SystemExit("verify-otp response missing accessToken")
    return token


def upload(server: str, token: str, path: Path, fields: dict[str, str]) -> dict[str, Any]:
    url = server.rstrip("/") + "/api/admin/upload-video"
    content_type = mimetypes.guess_type(path.name)[0] or "video/mp4"
    print(f"[api] uploading {path.name} ({path.stat().st_size} bytes) to {url}")
    with path.open("rb") as fp:
        files = {"video": (path.name, fp.read(), content_type)}
    status, body = http_post_multipart(url, fields, files, headers={"Authorization": f"Bearer {token}"})
    return _expect(status, body, "upload", expected=(200, 201))


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload a video to the VOD server")
    parser.add_argument("file", type=Path, help="Video file to upload")
    parser.add_argument("--server", default="http://127.0.0.1:8000", help="VOD server base URL")
    parser.add_argument("--phone", required=True, help="Administrator phone number (E.164)")
    parser.add_argument("--otp", help="Login code, if already known")
    parser.add_argument("--title", help="Video title (defaults to the file name)")
    parser.add_argument("--description", default="")
    parser.add_argument("--category", default="general")
    parser.add_argument("--duration", type=float, default=0, help="Duration in seconds")
    parser.add_argument("--thumbnail", default="")
    parser.add_argument("--quality", choices=["240p", "480p", "720p", "1080p"])
    args = parser.parse_args()

    if not args.file.is_file():
        raise SystemExit(f"file not found: {args.file}")

    token = login(args.server, args.phone, args.otp)
    fields = {
        "title": args.title or args.file.stem,
        "description": args.description,
        "category": args.category,
        "duration": str(args.duration),
        "thumbnail": args.thumbnail,
    }
    if args.quality:
        fields["quality"] = args.quality

    result = upload(args.server, token, args.file, fields)
    print("[done] upload succeeded")
    print(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit("aborted by user")
