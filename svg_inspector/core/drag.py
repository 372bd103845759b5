from __future__ import annotations

"""Drag-and-drop session passed along the start -> over -> drop event path.

The session is a plain value owned by whoever handles the pointer events; it
replaces any shared "currently dragged nodes" state.  Geometry enters only as
the pointer's vertical fraction within the hovered row (0.0 top, 1.0 bottom).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import Node, is_ancestor
from .selection import Selection
from .settings import EditorSettings

__all__ = ["DragSession", "drop_position_for", "attribute_drop_position"]


def drop_position_for(fraction: float, has_children: bool,
                      settings: Optional[EditorSettings] = None) -> str:
    """Map a pointer fraction over a layer row to before/after/inside."""
    settings = settings or EditorSettings()
    if has_children and settings.drop_inside_lower < fraction < settings.drop_inside_upper:
        return "inside"
    if fraction < settings.drop_split:
        return "before"
    return "after"


def attribute_drop_position(fraction: float, settings: Optional[EditorSettings] = None) -> str:
    """Attribute and style rows only split into before/after halves."""
    settings = settings or EditorSettings()
    return "before" if fraction < settings.drop_split else "after"


@dataclass
class DragSession:
    """In-flight drag of one or more layer nodes.

    Use :meth:`start` to create a session, :meth:`over` on every hover event
    and :meth:`drop` once on release.
    """

    sources: Tuple[Node, ...]
    settings: EditorSettings = field(default_factory=EditorSettings)
    target: Optional[Node] = None
    position: Optional[str] = None
    finished: bool = False

    @classmethod
    def start(cls, node: Node, selection: Optional[Selection] = None,
              settings: Optional[EditorSettings] = None) -> DragSession:
        """Begin dragging *node*, or the whole selection when *node* is part of it."""
        if selection is not None and node in selection:
            sources: List[Node] = selection.nodes
        else:
            sources = [node]
        return cls(tuple(sources), settings or EditorSettings())

    def accepts(self, target: Node) -> bool:
        """False when *target* is a dragged node or lies inside one."""
        return not any(s is target or is_ancestor(s, target) for s in self.sources)

    def over(self, target: Node, fraction: float) -> Optional[str]:
        """Record the hovered row and return the drop position it implies."""
        if self.finished or not self.accepts(target):
            self.leave()
            return None
        self.target = target
        self.position = drop_position_for(fraction, bool(target.children), self.settings)
        return self.position

    def leave(self) -> None:
        self.target = None
        self.position = None

    def drop(self) -> Optional[Tuple[List[Node], Node, str]]:
        """Finish the session; returns ``(sources, target, position)`` or None."""
        if self.finished:
            return None
        self.finished = True
        if self.target is None or self.position is None:
            return None
        return list(self.sources), self.target, self.position
