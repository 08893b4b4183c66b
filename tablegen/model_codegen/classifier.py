"""Find struct types that declare the ``TableName() string`` marker method."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Final, Iterator, Mapping

from tree_sitter import Node

from ..shared import SourceUnit
from .comments import leading_comments

MARKER_METHOD: Final[str] = "TableName"
STRING_TYPE: Final[str] = "string"


@dataclass
class GenerationContext:
    """Run-scoped header template values.

    The first seeded value wins; later seeds are ignored.
    """

    values: dict[str, Any] = field(default_factory=dict)
    _seeded: bool = field(default=False, init=False, repr=False)

    @property
    def seeded(self) -> bool:
        return self._seeded

    def seed(self, key: str, value: Any) -> bool:
        """Store ``key`` once per run. Returns True if this call stored it."""
        if self._seeded:
            return False
        self.values[key] = value
        self._seeded = True
        return True

    def as_mapping(self) -> Mapping[str, Any]:
        return dict(self.values)


@dataclass(frozen=True, slots=True)
class TypeHandle:
    """A struct type declaration qualifying for generation."""

    name: str
    unit: SourceUnit
    struct_node: Node
    comments: tuple[str, ...] = ()


def _named(node: Node, *types: str) -> list[Node]:
    return [child for child in node.named_children if child.type in types]


def _is_string_result(unit: SourceUnit, result: Node | None) -> bool:
    if result is None:
        return False
    if result.type == "type_identifier":
        return unit.text(result) == STRING_TYPE
    if result.type != "parameter_list":
        return False
    params = _named(result, "parameter_declaration", "variadic_parameter_declaration")
    if len(params) != 1 or params[0].type != "parameter_declaration":
        return False
    if len(params[0].children_by_field_name("name")) > 1:
        return False
    return _is_string_result(unit, params[0].child_by_field_name("type"))


def _receiver_type_name(unit: SourceUnit, receiver: Node | None) -> str | None:
    """Return ``T`` for a ``T`` or ``*T`` receiver, else None."""
    if receiver is None:
        return None
    params = _named(receiver, "parameter_declaration")
    if len(params) != 1:
        return None
    type_node = params[0].child_by_field_name("type")
    if type_node is not None and type_node.type == "pointer_type":
        inner = type_node.named_children
        type_node = inner[0] if len(inner) == 1 else None
    if type_node is None or type_node.type != "type_identifier":
        return None
    return unit.text(type_node)


def marker_receiver(unit: SourceUnit, method: Node) -> str | None:
    """Return the receiver type name if ``method`` is the marker method."""
    name = method.child_by_field_name("name")
    if name is None or unit.text(name) != MARKER_METHOD:
        return None
    parameters = method.child_by_field_name("parameters")
    if parameters is None or _named(
        parameters, "parameter_declaration", "variadic_parameter_declaration"
    ):
        return None
    if not _is_string_result(unit, method.child_by_field_name("result")):
        return None
    return _receiver_type_name(unit, method.child_by_field_name("receiver"))


def iter_type_specs(unit: SourceUnit) -> Iterator[tuple[Node, Node]]:
    """Yield ``(type_spec, doc_anchor)`` pairs for top-level type declarations.

    The doc anchor is the node whose preceding comments document the type:
    the ``type`` declaration itself, or the ``type_spec`` inside a grouped declaration.
    """
    for decl in _named(unit.root, "type_declaration"):
        grouped = any(child.type == "(" for child in decl.children)
        for spec in _named(decl, "type_spec"):
            yield spec, spec if grouped else decl


def struct_types(unit: SourceUnit) -> dict[str, TypeHandle]:
    """Map each struct type declared in ``unit`` to its handle."""
    handles: dict[str, TypeHandle] = {}
    for spec, anchor in iter_type_specs(unit):
        name = spec.child_by_field_name("name")
        type_node = spec.child_by_field_name("type")
        if name is None or type_node is None or type_node.type != "struct_type":
            continue
        type_name = unit.text(name)
        handles.setdefault(
            type_name,
            TypeHandle(
                name=type_name,
                unit=unit,
                struct_node=type_node,
                comments=tuple(leading_comments(unit, anchor)),
            ),
        )
    return handles


def classify(
    unit: SourceUnit,
    context: GenerationContext,
    package_key: str,
) -> list[TypeHandle]:
    """Return handles for the marker-bearing struct types of ``unit``.

    Handles follow the order of the marker methods in the file, not the order
    of the type declarations they refer to. The first unit
    classified in a run seeds ``context`` with its package name.
    """
    context.seed(package_key, unit.package_name)

    structs: dict[str, TypeHandle] | None = None
    handles: list[TypeHandle] = []
    for method in _named(unit.root, "method_declaration"):
        type_name = marker_receiver(unit, method)
        if type_name is None:
            continue
        if structs is None:
            structs = struct_types(unit)
        handle = structs.get(type_name)
        if handle is None:
            print(
                f"  WARNING: {unit.path.name}: {MARKER_METHOD} receiver '{type_name}' "
                "is not a struct declared in this file",
                file=sys.stderr,
            )
            continue
        handles.append(handle)
    return handles


def classify_all(
    units: list[SourceUnit],
    context: GenerationContext,
    package_key: str,
) -> list[TypeHandle]:
    """Classify every unit in order and concatenate the handles."""
    handles: list[TypeHandle] = []
    for unit in units:
        handles.extend(classify(unit, context, package_key))
    return handles
