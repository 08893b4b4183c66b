"""
Model Code Generator - Generates table metadata code from Go model structs.

Scans a directory of Go sources for struct types declaring the
``TableName() string`` marker method, extracts their fields, columns and
primary keys, and renders them through a header and a content template into
``<prefix><index>.go`` files next to the sources. Output from a previous run
is removed before generation.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..shared import GenerationError, collect_source_units
from .builder import ModelDescriptor, build_models
from .classifier import GenerationContext, classify_all
from .emitter import Emitter
from .strategy import GenerationStrategy, resolve_strategy

DEFAULT_PATH: Final[str] = "./"
DEFAULT_FILE_PREFIX: Final[str] = "auto_generate_"


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    models: list[ModelDescriptor] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    context: GenerationContext = field(default_factory=GenerationContext)


def generate(
    search_dir: Path,
    file_prefix: str = DEFAULT_FILE_PREFIX,
    strategy: GenerationStrategy | None = None,
) -> GenerationResult:
    """Generate model files for the Go sources under ``search_dir``.

    Args:
        search_dir: Directory searched recursively; output is written here.
        file_prefix: Name prefix of generated files. Existing ``.go`` files
            with this prefix are deleted before generation.
        strategy: Templates and size bound. Defaults to the strategy
            configured by ``tablegen.yaml`` in ``search_dir``, or the
            built-in Go templates.

    Returns:
        The built models, the written files and the header context.

    Raises:
        GenerationError: On template, source read or output errors.
        FileNotFoundError: If ``search_dir`` doesn't exist.
    """
    if strategy is None:
        strategy = resolve_strategy(search_dir)
    emitter = Emitter(strategy)

    result = GenerationResult()
    units = collect_source_units(search_dir, file_prefix)
    handles = classify_all(units, result.context, strategy.package_key)
    result.models = build_models(handles)
    result.files = emitter.emit(result.models, result.context, search_dir, file_prefix)
    return result


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate table metadata code from Go structs declaring TableName()",
    )
    parser.add_argument(
        "--path",
        "-path",
        type=Path,
        default=Path(DEFAULT_PATH),
        help="Directory to search for model sources and to write generated files into",
    )
    parser.add_argument(
        "--file-prefix",
        "--filePrefix",
        "-filePrefix",
        dest="file_prefix",
        default=DEFAULT_FILE_PREFIX,
        help="Name prefix of generated files (default: %(default)s)",
    )

    args = parser.parse_args(argv)

    try:
        search_dir = args.path.resolve()
        result = generate(search_dir, args.file_prefix)
        print(
            f"Generated {len(result.files)} file(s) from "
            f"{len(result.models)} model(s) into {search_dir}"
        )
    except (GenerationError, FileNotFoundError) as e:
        raise SystemExit(f"Error: {e}") from e


if __name__ == "__main__":
    main()
