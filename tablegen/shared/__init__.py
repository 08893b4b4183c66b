"""Shared utilities for the table generator."""

from .source_loader import (
    GO_FILE_EXT,
    SourceUnit,
    collect_source_units,
    load_source,
    parse_source,
)
from .naming import (
    receiver_name,
    snake_string,
)
from .errors import (
    GenerationError,
    SourceReadError,
    SourceParseError,
    TemplateCompileError,
    TemplateRenderError,
    OutputWriteError,
    ConfigError,
)

__all__ = [
    # Source loading
    "GO_FILE_EXT",
    "SourceUnit",
    "collect_source_units",
    "load_source",
    "parse_source",
    # Naming utilities
    "receiver_name",
    "snake_string",
    # Errors
    "GenerationError",
    "SourceReadError",
    "SourceParseError",
    "TemplateCompileError",
    "TemplateRenderError",
    "OutputWriteError",
    "ConfigError",
]
