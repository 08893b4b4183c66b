"""Render models into size-bounded output files."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

from jinja2 import Environment, StrictUndefined, Template, TemplateError, TemplateSyntaxError

from ..shared import GO_FILE_EXT, OutputWriteError, TemplateCompileError, TemplateRenderError
from .builder import ModelDescriptor
from .classifier import GenerationContext
from .strategy import GenerationStrategy


@lru_cache(maxsize=256)
def _quote(value: str) -> str:
    """Quote a string for Go literal embedding. Cached for performance."""
    return json.dumps(value, ensure_ascii=False)


def create_environment() -> Environment:
    """Create the Jinja2 environment used for header and content templates."""
    env = Environment(
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        autoescape=False,
        auto_reload=False,
    )
    env.filters["quote"] = _quote
    return env


def output_file_name(file_prefix: str, index: int) -> str:
    return f"{file_prefix}{index}{GO_FILE_EXT}"


class Emitter:
    """Renders models through a strategy's templates into output files.

    Both templates are compiled on construction, so a malformed template
    fails before anything is deleted or written.
    """

    def __init__(self, strategy: GenerationStrategy) -> None:
        self.strategy = strategy
        self.env = create_environment()
        self._header = self._compile("header", strategy.header_template)
        self._content = self._compile("content", strategy.content_template)

    def _compile(self, name: str, source: str) -> Template:
        try:
            return self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateCompileError(name, f"line {e.lineno}: {e.message}") from e

    @staticmethod
    def _render(
        template: Template,
        name: str,
        values: Mapping[str, Any],
        model_name: str | None = None,
    ) -> bytes:
        try:
            return template.render(values).encode("utf-8")
        except (TemplateError, TypeError, ValueError) as e:
            raise TemplateRenderError(name, str(e), model_name) from e

    def render_header(self, context: GenerationContext) -> bytes:
        return self._render(self._header, "header", context.as_mapping())

    def render_content(self, model: ModelDescriptor) -> bytes:
        values = self.strategy.build_template_map(model)
        return self._render(self._content, "content", values, model.name)

    def _write(self, buffer: bytearray, output_dir: Path, file_prefix: str, index: int) -> Path:
        output_path = output_dir / output_file_name(file_prefix, index)
        try:
            with output_path.open("wb") as fh:
                fh.write(buffer)
        except OSError as e:
            raise OutputWriteError(
                f"Failed to write generated file: {e}", str(output_path)
            ) from e
        return output_path

    def emit(
        self,
        models: Sequence[ModelDescriptor],
        context: GenerationContext,
        output_dir: Path,
        file_prefix: str,
    ) -> list[Path]:
        """Write ``models`` into ``<prefix><index>.go`` files.

        Each file starts with the rendered header. A file is flushed as soon
        as its buffer reaches ``file_max_size`` bytes; whatever remains after
        the last model becomes the final, possibly smaller, file. Returns the
        written paths in index order.
        """
        max_size = self.strategy.file_max_size
        buffer = bytearray()
        has_header = False
        written: list[Path] = []

        for model in models:
            if not has_header:
                buffer += self.render_header(context)
                has_header = True
            buffer += self.render_content(model)
            if len(buffer) < max_size:
                continue
            written.append(self._write(buffer, output_dir, file_prefix, len(written)))
            buffer.clear()
            has_header = False

        if buffer:
            written.append(self._write(buffer, output_dir, file_prefix, len(written)))
        return written
