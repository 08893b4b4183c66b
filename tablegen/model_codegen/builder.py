"""Build model descriptors from qualifying struct declarations."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final, Sequence

from tree_sitter import Node

from ..shared import SourceUnit
from .classifier import TypeHandle
from .comments import leading_comments, trailing_comment
from .tags import resolve_column, unquote

INFERRED_PRIMARY_KEY: Final[str] = "id"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """A struct field with its resolved storage column."""

    name: str
    type: str
    column: str
    is_primary_key: bool = False
    comments: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ModelDescriptor:
    """Normalized metadata of a struct mapped to a table."""

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    comments: tuple[str, ...] = ()

    @property
    def primary_key(self) -> FieldDescriptor | None:
        return next((f for f in self.fields if f.is_primary_key), None)

    @property
    def columns(self) -> list[str]:
        return [f.column for f in self.fields]


def _unwrap_pointers(node: Node, depth: int = 0) -> tuple[Node, int]:
    if node.type == "pointer_type" and len(node.named_children) == 1:
        return _unwrap_pointers(node.named_children[0], depth + 1)
    return node, depth


def _base_type(unit: SourceUnit, node: Node) -> str:
    if node.type == "type_identifier":
        return unit.text(node)
    if node.type == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is not None and name is not None:
            return f"{unit.text(package)}.{unit.text(name)}"
    return " ".join(unit.text(node).split())


def type_expression(unit: SourceUnit, node: Node) -> str:
    """Render a field type, e.g. ``**sql.NullString``.

    Pointer levels are unwrapped and re-applied around the base type, which is
    an identifier, a ``pkg.Ident`` selector, or the source text of any other
    type form.
    """
    base, depth = _unwrap_pointers(node)
    return "*" * depth + _base_type(unit, base)


def _embedded_name(unit: SourceUnit, type_node: Node) -> str:
    if type_node.type == "qualified_type":
        type_node = type_node.child_by_field_name("name") or type_node
    elif type_node.type == "generic_type":
        type_node = type_node.child_by_field_name("type") or type_node
    return unit.text(type_node)


def _field_tag(unit: SourceUnit, decl: Node) -> str | None:
    tag_node = decl.child_by_field_name("tag")
    if tag_node is None:
        return None
    try:
        return unquote(unit.text(tag_node))
    except ValueError:
        return None


def build_fields(unit: SourceUnit, decl: Node) -> list[FieldDescriptor]:
    """Build one descriptor per name declared by a ``field_declaration``."""
    type_node = decl.child_by_field_name("type")
    if type_node is None:
        return []

    names = [unit.text(n) for n in decl.children_by_field_name("name")]
    type_str = type_expression(unit, type_node)
    if not names:
        names = [_embedded_name(unit, type_node)]
        if any(child.type == "*" for child in decl.children):
            type_str = "*" + type_str

    tag = _field_tag(unit, decl)
    comments = tuple(leading_comments(unit, decl) + trailing_comment(unit, decl))
    descriptors: list[FieldDescriptor] = []
    for name in names:
        column, is_primary_key = resolve_column(name, tag)
        descriptors.append(
            FieldDescriptor(
                name=name,
                type=type_str,
                column=column,
                is_primary_key=is_primary_key,
                comments=comments,
            )
        )
    return descriptors


def select_primary_key(fields: Sequence[FieldDescriptor]) -> int | None:
    """Return the index of the model's primary key field.

    The first tag-flagged field wins; otherwise the first field whose column
    is ``id``. None when neither exists.
    """
    for index, f in enumerate(fields):
        if f.is_primary_key:
            return index
    for index, f in enumerate(fields):
        if f.column == INFERRED_PRIMARY_KEY:
            return index
    return None


def build_model(handle: TypeHandle) -> ModelDescriptor:
    """Build the descriptor of a qualifying struct type."""
    fields: list[FieldDescriptor] = []
    for body in handle.struct_node.named_children:
        if body.type != "field_declaration_list":
            continue
        for decl in body.named_children:
            if decl.type == "field_declaration":
                fields.extend(build_fields(handle.unit, decl))

    pk_index = select_primary_key(fields)
    resolved = tuple(
        replace(f, is_primary_key=index == pk_index) for index, f in enumerate(fields)
    )
    return ModelDescriptor(name=handle.name, fields=resolved, comments=handle.comments)


def build_models(handles: Sequence[TypeHandle]) -> list[ModelDescriptor]:
    return [build_model(handle) for handle in handles]
