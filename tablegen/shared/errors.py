"""Custom exceptions for the table generator."""

from __future__ import annotations


class GenerationError(Exception):
    """Base exception for generation errors."""

    def __init__(self, message: str, source_path: str | None = None) -> None:
        self.source_path = source_path
        full_message = f"{message}" if not source_path else f"[{source_path}] {message}"
        super().__init__(full_message)


class SourceReadError(GenerationError):
    """Raised when a source file cannot be read."""


class SourceParseError(GenerationError):
    """Raised when a source file contains syntax errors."""

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        line: int | None = None,
    ) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, source_path)


class TemplateCompileError(GenerationError):
    """Raised when a header or content template cannot be compiled."""

    def __init__(self, template_name: str, message: str) -> None:
        self.template_name = template_name
        super().__init__(f"Template '{template_name}': {message}")


class TemplateRenderError(GenerationError):
    """Raised when a template fails to render for a model."""

    def __init__(
        self,
        template_name: str,
        message: str,
        model_name: str | None = None,
    ) -> None:
        self.template_name = template_name
        self.model_name = model_name
        if model_name:
            message = f"Model '{model_name}': {message}"
        super().__init__(f"Template '{template_name}': {message}")


class OutputWriteError(GenerationError):
    """Raised when a generated file cannot be written."""


class ConfigError(GenerationError):
    """Raised when the generator configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        key: str | None = None,
    ) -> None:
        self.key = key
        if key:
            message = f"Key '{key}': {message}"
        super().__init__(message, config_path)
