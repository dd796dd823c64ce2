"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from flatsite.config import AppConfig, Config, ContentConfig, ServerConfig

API_KEY = "test-secret"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's APP_ENV / API_KEY out of the tests."""
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create an empty content directory."""
    content = tmp_path / "content"
    content.mkdir(exist_ok=True)
    return content


@pytest.fixture
def test_config(content_dir: Path) -> Config:
    """Create a production test configuration with an API key."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=content_dir, site_title="Test Site"),
        app=AppConfig(env="production", api_key=API_KEY),
    )


@pytest.fixture
def write_page(content_dir: Path) -> Callable[..., Path]:
    """Return a helper writing a markdown page with optional front matter."""

    def write(slug: str, body: str, **meta: str) -> Path:
        if meta:
            header = "\n".join(f"{key}: {value}" for key, value in meta.items())
            text = f"---\n{header}\n---\n{body}"
        else:
            text = body
        path = content_dir / f"{slug}.md"
        path.write_text(text, encoding="utf-8")
        return path

    return write
