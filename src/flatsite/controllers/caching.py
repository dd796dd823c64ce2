"""HTTP cache validators for rendered pages."""

from datetime import datetime
from email.utils import format_datetime
from hashlib import md5

from aiohttp import web

CACHE_CONTROL = "private, max-age=60"


def compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough to detect a changed page
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'


def is_not_modified(request: web.Request, etag: str) -> bool:
    return request.headers.get("If-None-Match") == etag


def cache_headers(etag: str, last_modified: datetime) -> dict[str, str]:
    return {
        "ETag": etag,
        "Last-Modified": format_datetime(last_modified, usegmt=True),
        "Cache-Control": CACHE_CONTROL,
    }
