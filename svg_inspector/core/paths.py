from __future__ import annotations

"""Positional addressing of nodes.

A path is the sequence of child indices leading from a root down to a node;
the empty path is the root itself.  Paths are the only identity that survives
a reparse, and they are purely positional: a path captured against one tree
may resolve to an unrelated node in another, or not resolve at all.
"""

from typing import Optional, Sequence, Tuple

from .exceptions import InvalidOperation
from .models import Node

__all__ = ["Path", "compute_path", "resolve_path", "format_path", "parse_path"]

Path = Tuple[int, ...]


def compute_path(node: Node, root: Node) -> Path:
    """Return the path of *node* relative to *root*.

    Raises
    ------
    InvalidOperation
        If *node* is not *root* or one of its descendants.
    """
    indices = []
    current = node
    while current is not root:
        parent = current.parent
        if parent is None:
            raise InvalidOperation(f"{node!r} is not a descendant of {root!r}.")
        for i, sibling in enumerate(parent.children):
            if sibling is current:
                indices.append(i)
                break
        current = parent
    return tuple(reversed(indices))


def resolve_path(root: Node, path: Sequence[int]) -> Optional[Node]:
    """Descend from *root* along *path*; None when an index is out of range."""
    current = root
    for index in path:
        if index < 0 or index >= len(current.children):
            return None
        current = current.children[index]
    return current


def format_path(path: Sequence[int]) -> str:
    """Render a path as ``0/2/1``; the root is ``/``."""
    if not path:
        return "/"
    return "/".join(str(i) for i in path)


def parse_path(value: str) -> Path:
    """Parse the output of :func:`format_path`.

    Raises
    ------
    ValueError
        On anything that is not slash-separated non-negative integers.
    """
    value = value.strip().strip("/")
    if not value:
        return ()
    parts = value.split("/")
    indices = tuple(int(part) for part in parts)
    if any(i < 0 for i in indices):
        raise ValueError(f"Negative index in path '{value}'")
    return indices
