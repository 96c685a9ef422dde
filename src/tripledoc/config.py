"""
Client configuration for tripledoc.

Settings come from three layers, later ones winning:
- defaults on ClientConfig
- an optional YAML file
- TRIPLEDOC_* environment variables
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRIPLEDOC_"
CONFIG_ENV_VAR = "TRIPLEDOC_CONFIG"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ClientConfig:
    """Settings for the HTTP transport."""
    timeout_seconds: float = 30.0
    accept: str = "text/turtle"
    content_type: str = "text/turtle"
    user_agent: str = "tripledoc"
    follow_redirects: bool = True
    headers: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty when valid)."""
        errors = []
        if self.timeout_seconds <= 0:
            errors.append("timeout_seconds must be positive")
        if not self.accept:
            errors.append("accept must not be empty")
        if not self.content_type:
            errors.append("content_type must not be empty")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeout_seconds": self.timeout_seconds,
            "accept": self.accept,
            "content_type": self.content_type,
            "user_agent": self.user_agent,
            "follow_redirects": self.follow_redirects,
            "headers": dict(self.headers),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        try:
            timeout = float(data.get("timeout_seconds", 30.0))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid timeout_seconds: {data.get('timeout_seconds')!r}") from e
        config = cls(
            timeout_seconds=timeout,
            accept=data.get("accept", "text/turtle"),
            content_type=data.get("content_type", "text/turtle"),
            user_agent=data.get("user_agent", "tripledoc"),
            follow_redirects=bool(data.get("follow_redirects", True)),
            headers=dict(data.get("headers") or {}),
        )
        errors = config.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return config


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if f"{ENV_PREFIX}TIMEOUT" in environ:
        overrides["timeout_seconds"] = environ[f"{ENV_PREFIX}TIMEOUT"]
    if f"{ENV_PREFIX}USER_AGENT" in environ:
        overrides["user_agent"] = environ[f"{ENV_PREFIX}USER_AGENT"]
    if f"{ENV_PREFIX}ACCEPT" in environ:
        overrides["accept"] = environ[f"{ENV_PREFIX}ACCEPT"]
    return overrides


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ClientConfig:
    """
    Load client configuration.

    Args:
        path: YAML file to read; falls back to $TRIPLEDOC_CONFIG, then defaults only
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigValidationError: if the file is unreadable or malformed, or values
            are invalid
    """
    environ = dict(os.environ if environ is None else environ)
    if path is None and environ.get(CONFIG_ENV_VAR):
        path = environ[CONFIG_ENV_VAR]

    data: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigValidationError(f"Cannot read {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigValidationError(f"{path} must contain a mapping")
        data.update(loaded or {})
        logger.debug(f"Loaded client configuration from {path}")

    data.update(_env_overrides(environ))
    return ClientConfig.from_dict(data)
