"""Configuration loading for crabgen (craby.toml)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from .errors import ConfigError
from .naming import flat_case
from .paths import TMP_DIR_NAME, config_path
from .types import CodegenContext, Schema

DEFAULT_SCHEMA_DIR = f"{TMP_DIR_NAME}/schemas"


@dataclass
class CrabyConfig:
    """Represents the settings defined in craby.toml."""

    root: Path
    project_name: str
    android_package_name: str
    schema_dir: Path

    def to_context(self, schemas: Sequence[Schema]) -> CodegenContext:
        return CodegenContext(
            project_name=self.project_name,
            root=self.root,
            android_package_name=self.android_package_name,
            schemas=tuple(schemas),
        )

    def schema_files(self) -> list[Path]:
        """Schema documents under `schema_dir`, sorted for a stable module order."""
        if not self.schema_dir.is_dir():
            return []
        return sorted(self.schema_dir.glob("*.json"))


def load_config(root: Path) -> CrabyConfig:
    """Load craby.toml from the project root."""
    root = Path(root).resolve()
    config_file = config_path(root)
    if not config_file.exists():
        raise ConfigError("craby.toml not found", {"root": str(root)})

    try:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid craby.toml: {exc}", {"file": str(config_file)}) from exc

    project = _as_dict(data.get("project"))
    project_name = _as_str(project.get("name"))
    if not project_name:
        raise ConfigError("[project] name is required", {"file": str(config_file)})

    android = _as_dict(data.get("android"))
    package_name = _as_str(android.get("package_name")) or f"com.{flat_case(project_name)}"

    schema_dir = _as_str(project.get("schema_dir")) or DEFAULT_SCHEMA_DIR

    return CrabyConfig(
        root=root,
        project_name=project_name,
        android_package_name=package_name,
        schema_dir=(root / schema_dir).resolve(),
    )


def _as_dict(value: Any) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("Expected a table in craby.toml")
    return value


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Expected a string in craby.toml, got {type(value).__name__}")
    value = value.strip()
    return value or None


__all__ = ["ConfigError", "CrabyConfig", "load_config"]
