"""hostprobe configuration and settings.

Configuration is stored in ~/.config/hostprobe/config.toml. A missing file
is not an error: every setting has a default matching the strict command
contracts (fail-fast traversal, single bounded socket read).
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hostprobe.core.paths import get_config_path
from hostprobe.net.models import DEFAULT_READ_BUFFER_SIZE, ResponseFraming

logger = logging.getLogger(__name__)


class TraversalConfig(BaseModel):
    """Settings for the directory size aggregator.

    Attributes:
        skip_permission_denied: Treat permission-denied sub-entries as zero
            bytes instead of aborting the whole aggregation.
    """

    model_config = ConfigDict(extra="forbid")

    skip_permission_denied: Annotated[
        bool,
        Field(description="Skip permission-denied entries (best-effort mode)"),
    ] = False


class SocketConfig(BaseModel):
    """Settings for the TCP request/response client.

    Attributes:
        read_buffer_size: Size of the single bounded read in bytes.
        framing: How the response is read (single read or until close).
        max_response_bytes: Upper bound on bytes read in until-close mode.
        connect_timeout: Connect/read timeout in seconds (None = OS default).
    """

    model_config = ConfigDict(extra="forbid")

    read_buffer_size: Annotated[
        int,
        Field(ge=1, le=1_048_576, description="Bounded read size in bytes"),
    ] = DEFAULT_READ_BUFFER_SIZE
    framing: Annotated[
        ResponseFraming,
        Field(description="Response framing discipline"),
    ] = ResponseFraming.SINGLE_READ
    max_response_bytes: Annotated[
        int,
        Field(ge=1, description="Cap for until_close framing"),
    ] = 1_048_576
    connect_timeout: Annotated[
        float | None,
        Field(gt=0, description="Timeout in seconds (None = OS default)"),
    ] = None


class ProbeConfig(BaseModel):
    """Top-level hostprobe configuration."""

    model_config = ConfigDict(extra="forbid")

    traversal: TraversalConfig = Field(default_factory=TraversalConfig)
    socket: SocketConfig = Field(default_factory=SocketConfig)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> ProbeConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ProbeConfig. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return ProbeConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return ProbeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: ProbeConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and then
    moved into place with os.replace().

    Args:
        config: The ProbeConfig to save.
        path: Destination. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump(mode="json", exclude_none=True)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
