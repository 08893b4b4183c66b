"""Generation strategies: template text, header context key and file size bound."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Final, Mapping, Protocol

import yaml

from ..shared import ConfigError, receiver_name
from .builder import ModelDescriptor

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"
CONFIG_FILE_NAME: Final[str] = "tablegen.yaml"
DEFAULT_PACKAGE_KEY: Final[str] = "package"
DEFAULT_FILE_MAX_SIZE: Final[int] = 64 * 1024

_CONFIG_KEYS: Final[dict[str, type]] = {
    "package_key": str,
    "header_template": str,
    "header_template_file": str,
    "content_template": str,
    "content_template_file": str,
    "file_max_size": int,
}


class GenerationStrategy(Protocol):
    """Parameters of the emission pipeline."""

    @property
    def package_key(self) -> str:
        """Header context key seeded with the first source unit's package."""

    @property
    def header_template(self) -> str: ...

    @property
    def content_template(self) -> str: ...

    @property
    def file_max_size(self) -> int:
        """Buffer size in bytes at which an output file is flushed."""

    def build_template_map(self, model: ModelDescriptor) -> Mapping[str, Any]: ...


@lru_cache(maxsize=8)
def load_builtin_template(name: str) -> str:
    """Read a template shipped with the package."""
    return (TEMPLATE_DIR / name).read_text(encoding="utf-8")


@dataclass(frozen=True)
class TemplateStrategy:
    """Strategy backed by Jinja2 template text.

    Defaults to the packaged Go templates, which emit a ``<Model>Columns``
    value per model and a ``PrimaryKey()`` method when a key is known.
    """

    header_template: str = field(
        default_factory=lambda: load_builtin_template("header.go.j2")
    )
    content_template: str = field(
        default_factory=lambda: load_builtin_template("content.go.j2")
    )
    package_key: str = DEFAULT_PACKAGE_KEY
    file_max_size: int = DEFAULT_FILE_MAX_SIZE

    def build_template_map(self, model: ModelDescriptor) -> Mapping[str, Any]:
        return {
            "model": model,
            "name": model.name,
            "receiver": receiver_name(model.name),
            "fields": model.fields,
            "primary_key": model.primary_key,
            "comments": model.comments,
        }


def _read_template_file(config_path: Path, key: str, value: str) -> str:
    template_path = (config_path.parent / value).resolve()
    try:
        return template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            f"Failed to read template file: {e}", str(config_path), key=key
        ) from e


def load_strategy_config(config_path: Path) -> TemplateStrategy:
    """Load a :class:`TemplateStrategy` from a YAML config file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}", str(config_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(config_path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping", str(config_path))

    for key, value in data.items():
        expected = _CONFIG_KEYS.get(key)
        if expected is None:
            raise ConfigError("unknown config key", str(config_path), key=str(key))
        # bool is an int subclass
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"expected {expected.__name__}, got {type(value).__name__}",
                str(config_path),
                key=key,
            )

    kwargs: dict[str, Any] = {}
    for name in ("header_template", "content_template"):
        file_key = f"{name}_file"
        if name in data and file_key in data:
            raise ConfigError(
                f"cannot be combined with '{file_key}'", str(config_path), key=name
            )
        if name in data:
            kwargs[name] = data[name]
        elif file_key in data:
            kwargs[name] = _read_template_file(config_path, file_key, data[file_key])

    if "package_key" in data:
        if not data["package_key"]:
            raise ConfigError("must not be empty", str(config_path), key="package_key")
        kwargs["package_key"] = data["package_key"]

    if "file_max_size" in data:
        if data["file_max_size"] <= 0:
            raise ConfigError(
                "must be a positive number of bytes", str(config_path), key="file_max_size"
            )
        kwargs["file_max_size"] = data["file_max_size"]

    return TemplateStrategy(**kwargs)


def resolve_strategy(search_dir: Path) -> TemplateStrategy:
    """Return the strategy configured in ``search_dir``, or the default one."""
    config_path = search_dir / CONFIG_FILE_NAME
    if config_path.is_file():
        return load_strategy_config(config_path)
    return TemplateStrategy()
