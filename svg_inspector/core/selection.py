from __future__ import annotations

"""Selection of layer nodes.

The selection is an ordered set kept in insertion order (not tree order); the
most recently added node is the *primary*, which drives single-target editors
such as the attribute panel.  All selected nodes belong to the live tree.
Across a tree replacement the selection is carried as paths: capture before the
old tree is discarded, restore against the new root.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from .exceptions import InvalidOperation
from .models import Node
from .paths import Path, compute_path, resolve_path

__all__ = ["Selection"]

logger = logging.getLogger(__name__)


class Selection:
    """Ordered set of selected nodes with a primary pointer."""

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._primary: Optional[Node] = None

    @property
    def nodes(self) -> List[Node]:
        """Selected nodes in insertion order (a copy)."""
        return list(self._nodes)

    @property
    def primary(self) -> Optional[Node]:
        return self._primary

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes))

    def __contains__(self, node: object) -> bool:
        return any(n is node for n in self._nodes)

    def select(self, node: Node, multi: bool = False) -> None:
        """Apply a click on *node*.

        Without *multi* the selection becomes exactly ``{node}``.  With *multi*
        an already-selected node is toggled off (primary falls back to the new
        last element), otherwise it is appended and becomes primary.
        """
        if not multi:
            self._nodes = [node]
            self._primary = node
            return

        if node in self:
            self._nodes = [n for n in self._nodes if n is not node]
            self._primary = self._nodes[-1] if self._nodes else None
        else:
            self._nodes.append(node)
            self._primary = node

    def select_path(self, root: Optional[Node], path: Sequence[int], multi: bool = False) -> bool:
        """Select the node at *path* under *root*; False if it does not resolve."""
        if root is None:
            return False
        node = resolve_path(root, path)
        if node is None:
            logger.debug("Selection: path %s does not resolve", list(path))
            return False
        self.select(node, multi)
        return True

    def set(self, nodes: Iterable[Node]) -> None:
        """Replace the selection; the last node becomes primary."""
        unique: List[Node] = []
        for node in nodes:
            if not any(n is node for n in unique):
                unique.append(node)
        self._nodes = unique
        self._primary = unique[-1] if unique else None

    def clear(self) -> None:
        self._nodes = []
        self._primary = None

    # ------------------------------------------------------------------
    # Carrying the selection across tree replacement
    # ------------------------------------------------------------------

    def capture_selection(self, root: Node) -> List[Path]:
        """Map every selected node to its path under *root*.

        Must be called before the current tree is discarded.  Nodes that are
        not under *root* (left over from an earlier tree) are skipped.
        """
        paths: List[Path] = []
        skipped = 0
        for node in self._nodes:
            try:
                paths.append(compute_path(node, root))
            except InvalidOperation:
                skipped += 1
        if skipped:
            logger.debug("Selection: skipped %d node(s) outside the document", skipped)
        return paths

    def restore_selection(self, new_root: Optional[Node], paths: Sequence[Sequence[int]]) -> None:
        """Rebuild the selection by resolving *paths* against *new_root*.

        Unresolved paths are dropped; they are the normal outcome of structural
        edits made outside the inspector.  Resolution is positional, so a path
        may land on a different element than the one originally selected.
        """
        if new_root is None:
            self.clear()
            return
        restored: List[Node] = []
        dropped = 0
        for path in paths:
            node = resolve_path(new_root, path)
            if node is None:
                dropped += 1
                continue
            restored.append(node)
        if dropped:
            logger.debug("Selection: dropped %d unresolved path(s)", dropped)
        self.set(restored)

    def paths(self, root: Node) -> List[Path]:
        """Current selection as paths, e.g. for highlighting in a renderer."""
        return self.capture_selection(root)
