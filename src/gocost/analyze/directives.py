from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from gocost.analyze.lines import LineMap
from gocost.analyze.parser import node_text

NOINLINE_DIRECTIVE = "go:noinline"

_INFINITY = 1 << 30


@dataclass(frozen=True)
class CommentGroup:
    start_line: int
    end_line: int
    texts: tuple[str, ...]

    def contains(self, needle: str) -> bool:
        return any(needle in text for text in self.texts)


# Top-level declaration start byte -> comment groups associated with it.
CommentMap = dict[int, list[CommentGroup]]


def _group(nodes: list[Node], src: bytes, lines: LineMap) -> CommentGroup:
    return CommentGroup(
        start_line=lines.start_line(nodes[0]),
        end_line=lines.end_line(nodes[-1]),
        texts=tuple(node_text(src, n) for n in nodes),
    )


def comment_groups(
    root: Node, src: bytes, lines: LineMap | None = None
) -> list[tuple[CommentGroup, Node | None, Node | None]]:
    """Top-level comment groups with the declarations around them.

    Adjacent comments (no blank line between them) form a group. A comment on
    the same line as the preceding declaration starts a group of its own that
    only takes further comments from that line.
    """
    lines = lines or LineMap()
    out: list[tuple[CommentGroup, Node | None, Node | None]] = []
    pending: list[tuple[list[Node], Node | None]] = []
    current: list[Node] = []
    trailing = False
    prev: Node | None = None
    for child in root.named_children:
        if child.type != "comment":
            if current:
                pending.append((current, prev))
            out.extend((_group(nodes, src, lines), before, child) for nodes, before in pending)
            pending = []
            current = []
            prev = child
            continue
        line = lines.start_line(child)
        if current:
            limit = lines.end_line(current[-1]) + (0 if trailing else 1)
            if line <= limit:
                current.append(child)
                continue
            pending.append((current, prev))
        trailing = not pending and prev is not None and lines.end_line(prev) == line
        current = [child]
    if current:
        pending.append((current, prev))
    out.extend((_group(nodes, src, lines), before, None) for nodes, before in pending)
    return out


def _claimed_by_previous(group: CommentGroup, prev: Node, following: Node | None, lines: LineMap) -> bool:
    prev_end = lines.end_line(prev)
    next_start = lines.start_line(following) if following is not None else _INFINITY
    if prev_end == group.start_line:
        return True
    return prev_end + 1 == group.start_line and group.end_line + 1 < next_start


def build_comment_map(root: Node, src: bytes, lines: LineMap | None = None) -> CommentMap:
    """Associate top-level comment groups with declarations.

    A group starting on the line where the previous declaration ends, or on the
    next line with a blank line after it, belongs to the previous declaration.
    Any other group belongs to the declaration that follows it; a trailing
    group at end of file that is not claimed belongs to nothing.
    """
    lines = lines or LineMap()
    cmap: CommentMap = {}
    for group, prev, following in comment_groups(root, src, lines):
        if prev is not None and _claimed_by_previous(group, prev, following, lines):
            owner: Node | None = prev
        else:
            owner = following
        if owner is not None:
            cmap.setdefault(owner.start_byte, []).append(group)
    return cmap


def has_noinline_directive(decl: Node, cmap: CommentMap) -> bool:
    # Plain substring match: a comment that merely mentions the directive counts.
    return any(group.contains(NOINLINE_DIRECTIVE) for group in cmap.get(decl.start_byte, []))
