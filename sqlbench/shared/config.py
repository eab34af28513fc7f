"""Configuration loading utilities for the SQL workbench."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

DEFAULT_QUERY = "select * from 'data/etfs.csv'"


@dataclass(frozen=True, slots=True)
class WorkspaceSettings:
    """Where scripts are listed from and where queries resolve relative paths."""

    root: Path


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Text-editing component presentation."""

    theme: str
    font_size: int
    default_query: str


@dataclass(frozen=True, slots=True)
class BackendSettings:
    """Query-execution backend configuration."""

    row_limit: int | None  # None disables truncation


@dataclass(frozen=True, slots=True)
class WorkbenchSettings:
    """Controller behaviour."""

    discard_stale_responses: bool


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    workspace: WorkspaceSettings
    editor: EditorSettings
    backend: BackendSettings
    workbench: WorkbenchSettings

    def with_workspace_root(self, new_root: str | Path) -> AppConfig:
        """Return a copy with an updated workspace root."""
        resolved = _workspace_root(new_root)
        return replace(self, workspace=replace(self.workspace, root=resolved))


def _default_config() -> dict[str, Any]:
    return {
        "workspace": {"root": str(paths.default_workspace_root())},
        "editor": {
            "theme": "vs-light",
            "font_size": 14,
            "default_query": DEFAULT_QUERY,
        },
        "backend": {"row_limit": 1000},
        "workbench": {"discard_stale_responses": False},
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "workspace.root": (paths.WORKSPACE_ROOT_ENV, str),
    "editor.theme": ("SQLBENCH_EDITOR_THEME", str),
    "editor.font_size": ("SQLBENCH_EDITOR_FONT_SIZE", int),
    "editor.default_query": ("SQLBENCH_DEFAULT_QUERY", str),
    "backend.row_limit": ("SQLBENCH_ROW_LIMIT", int),
    "workbench.discard_stale_responses": ("SQLBENCH_DISCARD_STALE", bool),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(os.environ if env is None else env)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    defaults = _default_config()
    merged: dict[str, Any] = _deep_merge(defaults, file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(
    config_path: str | Path | None, env: Mapping[str, str]
) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is int:
        return int(cleaned)
    return cleaned


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _normalise_row_limit(raw: Any) -> int | None:
    if raw is None:
        return None
    limit = int(raw)
    if limit <= 0:
        return None
    return limit


def _workspace_root(raw: str | Path) -> Path:
    root = paths.resolve_path(raw)
    # DuckDB splits file_search_path on commas.
    if "," in str(root):
        raise ConfigurationError(f"workspace.root may not contain a comma: {root}")
    return root


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        workspace = WorkspaceSettings(root=_workspace_root(str(data["workspace"]["root"])))
        editor_cfg = data["editor"]
        editor = EditorSettings(
            theme=str(editor_cfg["theme"]),
            font_size=int(editor_cfg["font_size"]),
            default_query=str(editor_cfg["default_query"]),
        )
        backend = BackendSettings(row_limit=_normalise_row_limit(data["backend"]["row_limit"]))
        workbench = WorkbenchSettings(
            discard_stale_responses=bool(data["workbench"]["discard_stale_responses"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if editor.font_size <= 0:
        raise ConfigurationError("editor.font_size must be a positive integer.")

    return AppConfig(
        source_path=source_path,
        workspace=workspace,
        editor=editor,
        backend=backend,
        workbench=workbench,
    )
