"""User configuration for fsctl.

This module provides the configuration model and I/O functions for the
CLI. Configuration is stored in ~/.config/fsctl/config.toml; a missing
file means all defaults apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fsctl.core.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024
DEFAULT_PROGRESS_THRESHOLD = 8 * 1024 * 1024


class FsctlConfig(BaseModel):
    """Configuration for the fsctl CLI.

    Attributes:
        use_trash: Delete to the platform trash unless --permanent is given.
        confirm_destructive: Ask before deleting or overwriting.
        show_hidden: Include dot entries in listings by default.
        chunk_size_bytes: Read/write chunk size for file copies.
        progress_threshold_bytes: File size from which copies show progress.
    """

    model_config = ConfigDict(extra="forbid")

    use_trash: Annotated[
        bool,
        Field(description="Delete to the trash by default"),
    ] = True
    confirm_destructive: Annotated[
        bool,
        Field(description="Ask before deleting or overwriting"),
    ] = True
    show_hidden: Annotated[
        bool,
        Field(description="Show dot entries in listings"),
    ] = False
    chunk_size_bytes: Annotated[
        int,
        Field(ge=4 * 1024, le=64 * 1024 * 1024, description="Copy chunk size (4 KiB - 64 MiB)"),
    ] = DEFAULT_CHUNK_SIZE
    progress_threshold_bytes: Annotated[
        int,
        Field(ge=0, description="Minimum file size for copy progress"),
    ] = DEFAULT_PROGRESS_THRESHOLD


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> FsctlConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated FsctlConfig object; defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or its content doesn't
            match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return FsctlConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return FsctlConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(
    config: FsctlConfig,
    path: Path | None = None,
    *,
    include_defaults: bool = False,
) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The FsctlConfig object to save.
        path: Path to save the config. If None, uses the default config path.
        include_defaults: Write every setting, not only those that differ
            from the defaults.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create config directory {config_path.parent}: {e}") from e

    data = _config_to_dict(config, include_defaults=include_defaults)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    logger.debug("Saved config to %s", config_path)
    return config_path


def _config_to_dict(config: FsctlConfig, *, include_defaults: bool) -> dict[str, object]:
    """Convert FsctlConfig to a dictionary for TOML serialization.

    Args:
        config: The FsctlConfig to convert.
        include_defaults: Keep values equal to their defaults.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(exclude_defaults=not include_defaults)
