import textwrap
from pathlib import Path

import pytest

from tablegen.shared.source_loader import SourceUnit, parse_source


@pytest.fixture
def parse_go():
    """Parse dedented Go source into a SourceUnit."""

    def _parse(source: str, name: str = "models.go") -> SourceUnit:
        return parse_source(textwrap.dedent(source).lstrip().encode("utf-8"), Path(name))

    return _parse


@pytest.fixture
def write_go(tmp_path):
    """Write dedented Go source under tmp_path and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return path

    return _write
