"""Unified configuration loaded from .postkit.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".postkit.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "postkit" / "config.toml"

DEFAULT_REQUIRED_KEYS = ["layout", "title", "published"]


class PostsSectionConfig(BaseModel):
    """[posts] section."""

    directory: str = "_posts"
    pattern: str = "*.md"


class CheckSectionConfig(BaseModel):
    """[check] section."""

    required_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED_KEYS))
    layouts: list[str] = Field(default_factory=list)  # empty allows any layout
    markdown: bool = True
    duplicates: bool = True
    strict: bool = False


class BuildSectionConfig(BaseModel):
    """[build] section."""

    output_directory: str = "_site"
    format: str = "html"
    include_drafts: bool = False


class PostkitConfig(BaseModel):
    """Top-level configuration model."""

    posts: PostsSectionConfig = Field(default_factory=PostsSectionConfig)
    check: CheckSectionConfig = Field(default_factory=CheckSectionConfig)
    build: BuildSectionConfig = Field(default_factory=BuildSectionConfig)

    @property
    def posts_dir(self) -> Path:
        return Path(self.posts.directory)

    @property
    def output_dir(self) -> Path:
        return Path(self.build.output_directory)


def load_config(path: str | Path | None = None) -> PostkitConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .postkit.toml in CWD
    3. ~/.config/postkit/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged PostkitConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        found = False
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                found = True
                break
        if not found and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = PostkitConfig.model_validate(data) if data else PostkitConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: PostkitConfig, **cli_kwargs: object) -> PostkitConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "posts_directory": ("posts", "directory"),
        "posts_pattern": ("posts", "pattern"),
        "strict": ("check", "strict"),
        "output_directory": ("build", "output_directory"),
        "build_format": ("build", "format"),
        "include_drafts": ("build", "include_drafts"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = str(value) if isinstance(value, Path) else value

    return PostkitConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PostkitConfig) -> PostkitConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "POSTKIT_POSTS_DIR": ("posts", "directory"),
        "POSTKIT_OUTPUT_DIR": ("build", "output_directory"),
        "POSTKIT_FORMAT": ("build", "format"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    strict_raw = os.environ.get("POSTKIT_STRICT")
    if strict_raw is not None:
        data["check"]["strict"] = strict_raw.lower() in ("true", "1", "yes")

    return PostkitConfig.model_validate(data)
