"""Configuration loading for ifacegen (.ifacegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .naming import to_camel_case, to_snake_case

CONFIG_FILENAME = ".ifacegen.yml"


class TypeCase(str, Enum):
    """Case applied to method names in aliases and callback entries."""

    DEFAULT = "default"
    CAMEL = "camel"
    SNAKE = "snake"

    def apply(self, name: str) -> str:
        if self is TypeCase.CAMEL:
            return to_camel_case(name)
        if self is TypeCase.SNAKE:
            return to_snake_case(name)
        return name

    @classmethod
    def parse(cls, value: str) -> "TypeCase":
        key = value.strip().lower().replace("-", "_")
        resolved = _TYPE_CASE_ALIASES.get(key)
        if resolved is None:
            choices = ", ".join(member.value for member in cls)
            raise ConfigError(f"Unknown type_case '{value}'; expected one of: {choices}")
        return resolved


_TYPE_CASE_ALIASES = {
    "default": TypeCase.DEFAULT,
    "identity": TypeCase.DEFAULT,
    "none": TypeCase.DEFAULT,
    "camel": TypeCase.CAMEL,
    "camelcase": TypeCase.CAMEL,
    "camel_case": TypeCase.CAMEL,
    "snake": TypeCase.SNAKE,
    "snakecase": TypeCase.SNAKE,
    "snake_case": TypeCase.SNAKE,
}


class Dialect(str, Enum):
    """Host language the generated interface file targets."""

    JAVA = "java"
    CPP = "cpp"

    @classmethod
    def parse(cls, value: str) -> "Dialect":
        key = value.strip().lower()
        if key in {"c++", "cxx"}:
            key = "cpp"
        for member in cls:
            if member.value == key:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ConfigError(f"Unknown dialect '{value}'; expected one of: {choices}")


@dataclass
class IfaceGenConfig:
    """Represents the settings defined in .ifacegen.yml."""

    root: Path
    type_case: TypeCase = TypeCase.DEFAULT
    dialect: Dialect = Dialect.JAVA
    output: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> IfaceGenConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return IfaceGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = IfaceGenConfig(root=root)

    type_case = _as_str(data.get("type_case"))
    if type_case is not None:
        config.type_case = TypeCase.parse(type_case)

    dialect = _as_str(data.get("dialect"))
    if dialect is not None:
        config.dialect = Dialect.parse(dialect)

    output = _as_str(data.get("output"))
    if output:
        output_path = Path(output).expanduser()
        config.output = output_path if output_path.is_absolute() else root / output_path

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "Dialect",
    "IfaceGenConfig",
    "TypeCase",
    "load_config",
]
