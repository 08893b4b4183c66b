"""Go source discovery and parsing with tree-sitter."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Final, Iterator

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from .errors import SourceParseError, SourceReadError

GO_FILE_EXT: Final[str] = ".go"


@lru_cache(maxsize=1)
def go_parser() -> Parser:
    """Return the shared tree-sitter parser for Go sources."""
    return Parser(Language(tree_sitter_go.language()))


@dataclass(frozen=True, slots=True)
class SourceUnit:
    """A parsed Go source file."""

    path: Path
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def package_name(self) -> str:
        """Name declared by the ``package`` clause, or an empty string."""
        for child in self.root.named_children:
            if child.type != "package_clause":
                continue
            for ident in child.named_children:
                if ident.type == "package_identifier":
                    return self.text(ident)
        return ""

    def text(self, node: Node) -> str:
        """Return the source text spanned by ``node``."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8")


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_source(source: bytes, path: Path) -> SourceUnit:
    """Parse Go source bytes.

    Raises:
        SourceParseError: If the source is not valid UTF-8 or contains
            syntax errors.
    """
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        line = source.count(b"\n", 0, e.start) + 1
        raise SourceParseError(
            f"invalid UTF-8 at byte {e.start}", str(path), line=line
        ) from e

    tree = go_parser().parse(source)
    if tree.root_node.has_error:
        error_node = _first_error(tree.root_node) or tree.root_node
        reason = "missing token" if error_node.is_missing else "syntax error"
        raise SourceParseError(reason, str(path), line=error_node.start_point[0] + 1)
    return SourceUnit(path=path, source=source, tree=tree)


def load_source(path: Path) -> SourceUnit:
    """Read and parse a Go source file.

    Raises:
        SourceReadError: If the file cannot be read.
        SourceParseError: If the file contains syntax errors.
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        raise SourceReadError(f"Failed to read source file: {e}", str(path)) from e
    return parse_source(source, path)


def iter_go_files(root: Path) -> Iterator[Path]:
    """Yield ``.go`` files under ``root`` in lexical walk order.

    Directory entries are visited sorted by name, descending into a
    directory at the position its name sorts to. Symlinked directories are
    not followed.

    Raises:
        SourceReadError: If a directory cannot be listed.
    """
    try:
        entries = sorted(root.iterdir(), key=lambda item: item.name)
    except OSError as e:
        raise SourceReadError(f"Failed to read directory: {e}", str(root)) from e
    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            yield from iter_go_files(entry)
        elif entry.suffix == GO_FILE_EXT and not entry.is_dir():
            yield entry


def remove_stale_output(path: Path) -> None:
    """Delete a previously generated file.

    Raises:
        SourceReadError: If the file cannot be removed.
    """
    print(f"  Removing: {path}")
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise SourceReadError(f"Failed to remove generated file: {e}", str(path)) from e


def collect_source_units(root: Path, file_prefix: str) -> list[SourceUnit]:
    """Collect parsed Go sources under ``root``.

    Files whose name starts with ``file_prefix`` are generated output from an
    earlier run; they are deleted instead of parsed. Files with syntax errors
    are reported on stderr and skipped.

    Raises:
        FileNotFoundError: If ``root`` doesn't exist.
        SourceReadError: If a directory or source file cannot be read, or
            stale output cannot be removed.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Source path '{root}' does not exist")

    units: list[SourceUnit] = []
    for path in iter_go_files(root):
        if file_prefix and path.name.startswith(file_prefix):
            remove_stale_output(path)
            continue
        try:
            units.append(load_source(path))
        except SourceParseError as e:
            print(f"  WARNING: Skipping {path.name}: {e}", file=sys.stderr)
    return units
