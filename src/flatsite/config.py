"""Configuration management for flatsite.

Supports TOML configuration format with auto-discovery, plus a ``.env``
file for the application environment and API secret.
"""

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Self

from dotenv import dotenv_values

CONFIG_FILENAME = "flatsite.toml"
ENV_FILENAME = ".env"

APP_ENVIRONMENTS = ("development", "production")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content configuration."""

    source_dir: Path = field(default_factory=lambda: Path("content"))
    templates_dir: Path | None = None
    site_title: str = "flatsite"


@dataclass
class AppConfig:
    """Application environment loaded from ``.env``."""

    env: str = "production"
    api_key: str | None = None

    @property
    def debug(self) -> bool:
        """Whether pretty error pages are shown."""
        return self.env == "development"


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    app: AppConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for flatsite.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Self:
        """Create config with all defaults, reading ``.env`` from cwd."""
        cwd = Path.cwd()
        return cls(
            server=ServerConfig(),
            content=ContentConfig(source_dir=cwd / "content"),
            app=load_app_config(cwd / ENV_FILENAME),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        server = cls._parse_server(data.get("server"))
        content = cls._parse_content(data.get("content"), config_dir)
        app = cls._parse_app(data.get("app"), config_dir)

        return cls(server=server, content=content, app=app, config_path=path)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(source_dir=config_dir / "content")

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source_dir = data.get("source_dir", "content")
        if not isinstance(source_dir, str):
            raise ValueError("content.source_dir must be a string")

        templates_dir = data.get("templates_dir")
        if templates_dir is not None and not isinstance(templates_dir, str):
            raise ValueError("content.templates_dir must be a string")

        site_title = data.get("site_title", "flatsite")
        if not isinstance(site_title, str):
            raise ValueError("content.site_title must be a string")

        return ContentConfig(
            source_dir=config_dir / source_dir,
            templates_dir=config_dir / templates_dir if templates_dir is not None else None,
            site_title=site_title,
        )

    @classmethod
    def _parse_app(cls, data: object, config_dir: Path) -> AppConfig:
        """Parse app configuration section and load the env file it names.

        Args:
            data: Raw app section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            AppConfig instance
        """
        if data is None:
            return load_app_config(config_dir / ENV_FILENAME)

        if not isinstance(data, dict):
            raise ValueError("app section must be a dictionary")

        env_file = data.get("env_file", ENV_FILENAME)
        if not isinstance(env_file, str):
            raise ValueError("app.env_file must be a string")

        return load_app_config(config_dir / env_file)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        templates_dir: Path | None = None,
        env: str | None = None,
    ) -> Self:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config.

        Args:
            host: Override server.host
            port: Override server.port
            source_dir: Override content.source_dir
            templates_dir: Override content.templates_dir
            env: Override app.env

        Returns:
            New Config instance with overrides applied

        Raises:
            ValueError: If env is not a known environment
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if source_dir is not None or templates_dir is not None:
            content = replace(
                self.content,
                source_dir=source_dir if source_dir is not None else self.content.source_dir,
                templates_dir=(
                    templates_dir if templates_dir is not None else self.content.templates_dir
                ),
            )

        app = self.app
        if env is not None:
            app = replace(self.app, env=_validate_env(env))

        return replace(self, server=server, content=content, app=app)


def load_app_config(env_path: Path) -> AppConfig:
    """Build AppConfig from a ``.env`` file and the process environment.

    A missing file is not an error. ``APP_ENV`` and ``API_KEY`` set in the
    process environment take precedence over the file.

    Raises:
        ValueError: If APP_ENV is not a known environment
    """
    values: dict[str, str | None] = dotenv_values(env_path) if env_path.is_file() else {}

    env = os.environ.get("APP_ENV") or values.get("APP_ENV") or "production"
    api_key = os.environ.get("API_KEY") or values.get("API_KEY") or None

    return AppConfig(env=_validate_env(env), api_key=api_key)


def _validate_env(env: str) -> str:
    if env not in APP_ENVIRONMENTS:
        allowed = ", ".join(APP_ENVIRONMENTS)
        raise ValueError(f"APP_ENV must be one of: {allowed} (got {env!r})")
    return env
