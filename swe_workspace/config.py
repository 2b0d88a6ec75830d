"""Service settings loaded from YAML with environment overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_PATH = "config/workspace.yaml"

IDENTITY_SOURCES = ("app", "user")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    sandbox_root_dir: str = "/home/daytona"
    branch_prefix: str = "open-swe"
    git_host: str = "github.com"
    app_name: str | None = None
    command_timeout_s: int = 60
    clone_timeout_s: int = 300
    pr_label: str = "open-swe"
    log_level: str = "INFO"
    identity_source: str = "app"
    api_base_url: str = field(default="")

    def __post_init__(self) -> None:
        if self.identity_source not in IDENTITY_SOURCES:
            raise ConfigError(
                f"identity_source must be one of {IDENTITY_SOURCES}, got {self.identity_source!r}"
            )
        if not self.api_base_url:
            object.__setattr__(self, "api_base_url", _api_base_url(self.git_host))


_ENV_OVERRIDES: dict[str, str] = {
    "SWE_SANDBOX_ROOT": "sandbox_root_dir",
    "SWE_BRANCH_PREFIX": "branch_prefix",
    "GITHUB_HOST": "git_host",
    "GITHUB_APP_NAME": "app_name",
    "SWE_COMMAND_TIMEOUT": "command_timeout_s",
    "SWE_CLONE_TIMEOUT": "clone_timeout_s",
    "SWE_PR_LABEL": "pr_label",
    "SWE_LOG_LEVEL": "log_level",
    "SWE_IDENTITY_SOURCE": "identity_source",
}

_INT_FIELDS = {"command_timeout_s", "clone_timeout_s"}


def _api_base_url(host: str) -> str:
    if host == "github.com":
        return "https://api.github.com"
    return f"https://{host}/api/v3"


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    section = data.get("workspace", {})
    if not isinstance(section, dict):
        raise ConfigError(f"'workspace' in {path} must be a mapping")
    return section


def _coerce(name: str, value: Any) -> Any:
    if name not in _INT_FIELDS:
        return value
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {parsed}")
    return parsed


def load_settings(
    config_path: str = DEFAULT_CONFIG_PATH,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    known = set(Settings.__dataclass_fields__)
    for key, value in _load_file(Path(config_path)).items():
        if key not in known:
            raise ConfigError(f"Unknown workspace setting: {key}")
        values[key] = _coerce(key, value)

    for env_name, name in _ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw:
            values[name] = _coerce(name, raw)

    return Settings(**values)
