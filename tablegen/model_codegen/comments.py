"""Doc and line comment extraction from Go syntax trees."""

from __future__ import annotations

from tree_sitter import Node

from ..shared import SourceUnit


def comment_lines(text: str) -> list[str]:
    """Strip comment markers, keeping one entry per line.

    Like Go's ``CommentGroup.Text``, the first space of a line comment is
    dropped along with leading and trailing blank lines.
    """
    if text.startswith("//"):
        body = text[2:]
        lines = [body[1:] if body.startswith(" ") else body]
    else:
        body = text.removeprefix("/*").removesuffix("*/")
        lines = body.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return [line.rstrip() for line in lines]


def _is_trailing(comment: Node) -> bool:
    before = comment.prev_sibling
    while before is not None and before.type == "\n":
        before = before.prev_sibling
    return (
        before is not None
        and before.type != "comment"
        and before.end_point[0] == comment.start_point[0]
    )


def leading_comments(unit: SourceUnit, node: Node) -> list[str]:
    """Return the comment block directly above ``node``."""
    block: list[Node] = []
    row = node.start_point[0]
    sibling = node.prev_named_sibling
    while (
        sibling is not None
        and sibling.type == "comment"
        and sibling.end_point[0] == row - 1
        and not _is_trailing(sibling)
    ):
        block.append(sibling)
        row = sibling.start_point[0]
        sibling = sibling.prev_named_sibling

    lines: list[str] = []
    for comment in reversed(block):
        lines.extend(comment_lines(unit.text(comment)))
    return lines


def trailing_comment(unit: SourceUnit, node: Node) -> list[str]:
    """Return the comment that follows ``node`` on its last line, if any."""
    sibling = node.next_named_sibling
    if sibling is None or sibling.type != "comment":
        return []
    if sibling.start_point[0] != node.end_point[0]:
        return []
    return comment_lines(unit.text(sibling))
