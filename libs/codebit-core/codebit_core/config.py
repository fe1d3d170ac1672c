"""User-level configuration for CodeBit.

Settings live in ``<home>/config.yaml`` (home is ``~/.codebit`` unless
CODEBIT_HOME is set) and may be overridden per process through the
CODEBIT_TIMEOUT and CODEBIT_USER_AGENT environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from codebit_core.errors import ConfigError

yaml = YAML(typ="safe")

DEFAULT_TIMEOUT = 30.0


def _default_user_agent() -> str:
    from codebit_core import __version__

    return f"codebit/{__version__}"


class FetchConfig(BaseModel):
    """Transport settings handed to the fetcher."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Seconds per request")
    user_agent: str = Field(default_factory=_default_user_agent, alias="user-agent")
    follow_redirects: bool = Field(default=True, alias="follow-redirects")


def codebit_home_dir() -> Path:
    """Return per-user CodeBit home (override with CODEBIT_HOME)."""
    env = os.environ.get("CODEBIT_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return Path.home() / ".codebit"


def config_path() -> Path:
    """Path to the user configuration file."""
    return codebit_home_dir() / "config.yaml"


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")
    return data


def load_config(path: Path | None = None) -> FetchConfig:
    """Load fetch settings from the config file, then apply environment overrides."""
    path = path or config_path()
    data = _read_config_file(path)

    timeout = os.environ.get("CODEBIT_TIMEOUT")
    if timeout:
        data["timeout"] = timeout
    user_agent = os.environ.get("CODEBIT_USER_AGENT")
    if user_agent:
        data["user-agent"] = user_agent

    try:
        return FetchConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
