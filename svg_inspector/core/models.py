from __future__ import annotations

"""In-memory document tree.

A :class:`Tree` owns its :class:`Node` objects: children are owned by their
parent's ``children`` list, while ``Node.parent`` is only a weak back-reference
used for traversal.  The tree is rebuilt from text on every external change, so
node identity never survives a reparse (see :mod:`svg_inspector.core.paths`).

The structural primitives on :class:`Tree` only rewire ``children``/``parent``
links.  They never serialize; pushing text is the sync session's job.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
import weakref

from .exceptions import InvalidOperation
from .utils import local_name

__all__ = ["Misc", "Node", "Tree", "is_ancestor"]


@dataclass
class Misc:
    """Non-element content: a comment, processing instruction or entity reference.

    Misc items are kept outside ``Node.children`` so child indexes (and
    therefore paths) only count elements.
    """

    kind: str  # "comment", "pi" or "entity"
    text: Optional[str] = None
    target: Optional[str] = None
    tail: Optional[str] = None


@dataclass(eq=False)
class Node:
    """An element of the document.

    Attributes
    ----------
    tag
        Element name, ``{namespace}local`` for namespaced elements.
    attributes
        Ordered attribute mapping; insertion order is the document order.
    children
        Ordered element children.
    text, tail
        Character data before the first child and after the closing tag.
    nsmap
        Namespace declarations introduced on this element (prefix -> URI).
    leading
        Misc content between ``text`` and the first child element.
    trailing
        Misc content after this element's ``tail``, up to the next sibling
        element.  It travels with the element when the element is moved.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    text: Optional[str] = None
    tail: Optional[str] = None
    nsmap: Dict[Optional[str], str] = field(default_factory=dict)
    leading: List[Misc] = field(default_factory=list)
    trailing: List[Misc] = field(default_factory=list)
    _parent_ref: Optional["weakref.ReferenceType[Node]"] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for child in self.children:
            child._parent_ref = weakref.ref(self)

    @property
    def parent(self) -> Optional[Node]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def local_name(self) -> str:
        return local_name(self.tag)

    @property
    def is_visible(self) -> bool:
        """False when the element carries ``visibility="hidden"``."""
        return self.attributes.get("visibility") != "hidden"

    def in_scope_nsmap(self) -> Dict[Optional[str], str]:
        """Namespace declarations visible on this element, nearest first."""
        scope: Dict[Optional[str], str] = {}
        current: Optional[Node] = self
        while current is not None:
            for prefix, uri in current.nsmap.items():
                scope.setdefault(prefix, uri)
            current = current.parent
        return scope

    def label(self) -> str:
        """Return the layer label, e.g. ``rect#logo.shape.primary``."""
        label = self.local_name
        node_id = self.attributes.get("id")
        if node_id:
            label += f"#{node_id}"
        classes = (self.attributes.get("class") or "").split()
        if classes:
            label += "." + ".".join(classes)
        return label

    def iter(self) -> Iterator[Node]:
        """Traverse depth-first, yielding self then descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def next_sibling(self) -> Optional[Node]:
        parent = self.parent
        if parent is None:
            return None
        siblings = parent.children
        for i, sibling in enumerate(siblings):
            if sibling is self:
                return siblings[i + 1] if i + 1 < len(siblings) else None
        return None

    def __repr__(self) -> str:
        return f"Node({self.label()!r}, children={len(self.children)})"


def is_ancestor(candidate: Node, node: Node) -> bool:
    """Return True if *candidate* is a strict ancestor of *node*."""
    current = node.parent
    while current is not None:
        if current is candidate:
            return True
        current = current.parent
    return False


class Tree:
    """A parsed document: one root node plus document-level prologue data.

    Parameters
    ----------
    root
        The document element.  It must not have a parent.
    doctype
        DOCTYPE declaration to re-emit on serialization, if any.
    declaration
        The XML declaration found in the source text, if any.
    prolog, epilog
        Comments and processing instructions before and after the root.
    """

    def __init__(self, root: Node, doctype: Optional[str] = None,
                 declaration: Optional[str] = None,
                 prolog: Optional[List[Misc]] = None,
                 epilog: Optional[List[Misc]] = None) -> None:
        if root.parent is not None:
            raise InvalidOperation("Tree root must not have a parent.")
        self._root = root
        self.doctype = doctype
        self.declaration = declaration
        self.prolog: List[Misc] = list(prolog or [])
        self.epilog: List[Misc] = list(epilog or [])

    @property
    def root(self) -> Node:
        return self._root

    def iter(self) -> Iterator[Node]:
        return self._root.iter()

    def contains(self, node: Node) -> bool:
        """Return True if *node* belongs to this tree instance."""
        current: Optional[Node] = node
        while current is not None:
            if current is self._root:
                return True
            current = current.parent
        return False

    # ------------------------------------------------------------------
    # Structural primitives
    # ------------------------------------------------------------------

    def index_of(self, child: Node, parent: Node) -> int:
        """Return the position of *child* among *parent*'s children, or -1."""
        for i, candidate in enumerate(parent.children):
            if candidate is child:
                return i
        return -1

    def insert_before(self, parent: Node, new_child: Node, reference: Optional[Node]) -> None:
        """Insert *new_child* under *parent* just before *reference*.

        A None reference appends.  A node that already has a parent is
        detached first, so inserting an attached node moves it.
        """
        self._check_insertable(parent, new_child)
        if reference is new_child:
            reference = new_child.next_sibling()
        if reference is not None and reference.parent is not parent:
            raise InvalidOperation(f"{reference!r} is not a child of {parent!r}.")

        self._detach(new_child)
        if reference is None:
            parent.children.append(new_child)
        else:
            parent.children.insert(self.index_of(reference, parent), new_child)
        new_child._parent_ref = weakref.ref(parent)

    def append(self, parent: Node, child: Node) -> None:
        """Append *child* as the last child of *parent*."""
        self.insert_before(parent, child, None)

    def remove(self, child: Node) -> None:
        """Detach *child* from its parent; the root cannot be removed."""
        if child is self._root:
            raise InvalidOperation("Cannot remove the document root.")
        if child.parent is None:
            raise InvalidOperation(f"{child!r} is not attached to a parent.")
        self._detach(child)

    def _check_insertable(self, parent: Node, new_child: Node) -> None:
        if new_child is self._root:
            raise InvalidOperation("Cannot move the document root.")
        if new_child is parent or is_ancestor(new_child, parent):
            raise InvalidOperation(f"Cannot insert {new_child!r} inside itself.")

    def _detach(self, node: Node) -> None:
        parent = node.parent
        if parent is None:
            return
        index = self.index_of(node, parent)
        if index >= 0:
            del parent.children[index]
        node._parent_ref = None
