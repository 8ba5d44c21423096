"""Configuration for the cherry-pick workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import UsageError

DEFAULT_CONFIG_NAME = ".cherry-pull.yaml"


class CherryPickConfig(BaseModel):
    """Settings read from ``.cherry-pull.yaml``; every key is optional."""

    model_config = ConfigDict(extra="forbid")

    fork_remote: str = "origin"
    patch_url_template: str = "https://github.com/GoogleCloudPlatform/kubernetes/pull/{pull}.patch"
    patch_dir: Path = Path("/tmp")
    disallowed_upstream: str = "GoogleCloudPlatform/kubernetes.git"
    branch_prefix: str = "automated-cherry-pick-of"
    update_remotes: bool = True
    download_timeout: float = Field(default=60.0, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("log_level must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized

    @field_validator("patch_url_template")
    @classmethod
    def _require_pull_placeholder(cls, value: str) -> str:
        if "{pull}" not in value:
            raise ValueError("patch_url_template must contain a '{pull}' placeholder")
        try:
            value.format(pull="0")
        except (KeyError, IndexError, ValueError) as error:
            raise ValueError(f"patch_url_template may only use the '{{pull}}' placeholder: {error!r}") from error
        return value


def load_config(config_path: Path | None, *, repo_root: Path) -> CherryPickConfig:
    """Load YAML configuration from disk and validate it.

    When ``config_path`` is ``None`` the default file at the repository root
    is used if present; otherwise built-in defaults apply. An explicitly
    requested file that does not exist is a usage error.
    """

    if config_path is None:
        candidate = repo_root / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return CherryPickConfig()
        config_path = candidate
    elif not config_path.exists():
        raise UsageError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data: Dict[str, Any] = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise UsageError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise UsageError("Configuration must be a mapping at the top level.")

    try:
        return CherryPickConfig.model_validate(data)
    except ValidationError as error:
        raise UsageError(f"Invalid configuration in {config_path}: {error}") from error


__all__ = ["CherryPickConfig", "DEFAULT_CONFIG_NAME", "load_config"]
