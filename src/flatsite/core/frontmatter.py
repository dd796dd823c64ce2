"""YAML front matter parsing."""

from typing import Any

import yaml

FRONTMATTER_DELIMITER = "---"


class ContentError(Exception):
    """Raised when a content file cannot be parsed."""


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter and body from markdown content.

    Expects the text to start with ``---`` on the first line. The next
    ``---`` line closes the YAML block and everything after it is the body.
    Both ``\\n`` and ``\\r\\n`` line endings are accepted.

    Returns:
        A ``(metadata, body)`` tuple. Without a complete front matter
        block the metadata is empty and the body is the whole text.

    Raises:
        ContentError: If the YAML is invalid or is not a mapping
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, normalized

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, normalized

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :]).removeprefix("\n")

    try:
        data = yaml.safe_load(yaml_block)
    except yaml.YAMLError as e:
        raise ContentError(f"Invalid front matter: {e}") from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ContentError("Front matter must be a mapping")

    return {str(key): value for key, value in data.items()}, body
