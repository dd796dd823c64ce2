"""Flat-file page repository.

Each ``<slug>.md`` file in the content directory is one page. Pages are
read from disk on every lookup; nothing is kept between requests.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Protocol, TypedDict

from flatsite.core.frontmatter import ContentError, parse_frontmatter

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")


class PageSummaryDict(TypedDict):
    """Dictionary representation of a page listing entry."""

    slug: str
    title: str
    description: str
    url: str


@dataclass(frozen=True)
class Page:
    """A markdown content item with its front matter."""

    slug: str
    title: str
    description: str
    body: str
    source_path: Path
    modified: datetime
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def url(self) -> str:
        return f"/{self.slug}"

    def summary(self) -> PageSummaryDict:
        """Convert to a listing entry for JSON serialization."""
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "url": self.url,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Front matter values YAML parses into dates are emitted as ISO strings.
        """
        return {
            **self.summary(),
            "meta": {key: _json_value(value) for key, value in self.meta.items()},
            "last_modified": self.modified.isoformat(),
        }


class ContentRepository(Protocol):
    """Read access to site pages."""

    def list_pages(self) -> list[Page]: ...

    def get(self, slug: str) -> Page | None: ...


class FilesystemContentRepository:
    """Pages stored as markdown files in a single directory."""

    def __init__(self, source_dir: Path) -> None:
        self._source_dir = source_dir

    @property
    def source_dir(self) -> Path:
        """Directory containing markdown sources."""
        return self._source_dir

    def list_pages(self) -> list[Page]:
        """Load every page, sorted by title and then slug.

        Files whose name is not a valid slug are skipped.

        Raises:
            ContentError: If a page is not UTF-8 or has malformed front matter
        """
        if not self._source_dir.is_dir():
            logger.warning(f"Content directory not found: {self._source_dir}")
            return []

        pages = []
        for path in sorted(self._source_dir.glob("*.md")):
            if not path.is_file():
                continue
            if not is_valid_slug(path.stem):
                logger.debug(f"Skipping {path.name}: not a valid slug")
                continue
            pages.append(self._load(path.stem, path))

        return sorted(pages, key=lambda page: (page.title.casefold(), page.slug))

    def get(self, slug: str) -> Page | None:
        """Load a page by slug.

        Returns:
            Page if a matching file exists, None otherwise

        Raises:
            ContentError: If the page is not UTF-8 or has malformed front matter
        """
        if not is_valid_slug(slug):
            return None

        path = self._source_dir / f"{slug}.md"
        if not path.is_file():
            return None

        return self._load(slug, path)

    def _load(self, slug: str, path: Path) -> Page:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ContentError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e

        try:
            meta, body = parse_frontmatter(text)
        except ContentError as e:
            raise ContentError(f"{path}: {e}") from e

        modified = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)

        return Page(
            slug=slug,
            title=_string_field(meta, "title") or humanize_slug(slug),
            description=_string_field(meta, "description") or "",
            body=body,
            source_path=path,
            modified=modified,
            meta=meta,
        )


def is_valid_slug(slug: str) -> bool:
    return SLUG_PATTERN.fullmatch(slug) is not None


def humanize_slug(slug: str) -> str:
    """Turn ``getting-started`` into ``Getting Started``."""
    words = re.split(r"[-_]+", slug)
    return " ".join(word.capitalize() for word in words if word)


def _string_field(meta: dict[str, Any], key: str) -> str | None:
    value = meta.get(key)
    if value is None:
        return None
    return str(value).strip()


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return value
