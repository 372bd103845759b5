from __future__ import annotations

"""Service layer for structural edits on the in-memory SVG tree.

This module provides a UI-agnostic, testable service that encapsulates the
edits a user can make from the layer tree and the attribute panel: attribute
and inline-style editing, reordering, visibility toggling, moving layers and
grouping them.

Scope and guarantees:
- Operates purely in-memory on a :class:`Tree`; no serialization, no I/O.
- Expected invalid actions (stale nodes, unknown names, moving a node into
  itself, grouping non-siblings) return ``OperationResult(success=False, ...)``
  and leave the tree untouched; they never raise.
- Never touches the selection.  Callers update it after edits that displace
  nodes and push the new text after every successful result.

Examples
--------
Basic usage:

    service = MutationService()
    result = service.move(tree, [node], target, "inside")
    if result.success:
        session.push()

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional, Sequence

from svg_inspector.core.codec import check_attribute, new_element, qualified_name, resolve_attribute_name
from svg_inspector.core.exceptions import InvalidOperation
from svg_inspector.core.models import Node, Tree, is_ancestor
from svg_inspector.core.settings import EditorSettings
from svg_inspector.core.styles import StyleBlock
from svg_inspector.core.utils import reorder_items

__all__ = ["OperationResult", "MutationService", "MOVE_POSITIONS"]

logger = logging.getLogger(__name__)

MOVE_POSITIONS = ("before", "after", "inside")


@dataclass(frozen=True)
class OperationResult:
    """Result of an editing operation.

    Attributes
    ----------
    success
        Whether the tree was mutated.  A successful result must be followed by
        a sync push.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class MutationService:
    """Encapsulates edit operations on an SVG document tree.

    Every public method takes the live :class:`Tree` first and validates that
    the nodes it receives belong to it, since drag-and-drop and attribute panel
    events may refer to nodes of a tree that has since been replaced.
    """

    def __init__(self, settings: Optional[EditorSettings] = None) -> None:
        self._settings = settings or EditorSettings()

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def set_attribute(self, tree: Tree, node: Node, name: str, value: str) -> OperationResult:
        """Set an attribute; an existing name keeps its position, a new one appends.

        *name* may be qualified (``xlink:href``); its prefix must be declared
        on the node or an ancestor.  Names and values lxml cannot serialize are
        rejected before the node is touched.
        """
        logger.info("Edit: set_attribute node=%s name=%s", node.label(), name)
        stale = self._check_nodes(tree, [node])
        if stale is not None:
            return stale
        try:
            key = resolve_attribute_name(node, name)
            check_attribute(key, value)
        except InvalidOperation as exc:
            logger.info("Edit noop: set_attribute rejected name=%s: %s", name, exc)
            return OperationResult(False, f"Invalid attribute: {exc}",
                                   {"name": name, "reason": "invalid_attribute"})

        node.attributes[key] = value
        logger.info("Edit OK: set_attribute name=%s", name)
        return OperationResult(True, f"Set attribute '{name}'.", {"name": name, "value": value})

    def delete_attribute(self, tree: Tree, node: Node, name: str) -> OperationResult:
        """Remove an attribute; the remaining attributes keep their order."""
        logger.info("Edit: delete_attribute node=%s name=%s", node.label(), name)
        stale = self._check_nodes(tree, [node])
        if stale is not None:
            return stale
        key = self._existing_key(node, name)
        if key is None:
            logger.info("Edit noop: delete_attribute unknown name=%s", name)
            return OperationResult(False, f"Attribute '{name}' not found.", {"name": name})

        del node.attributes[key]
        logger.info("Edit OK: delete_attribute name=%s", name)
        return OperationResult(True, f"Deleted attribute '{name}'.", {"name": name})

    def reorder_attribute(self, tree: Tree, node: Node, dragged: str, target: str,
                          position: str) -> OperationResult:
        """Move attribute *dragged* immediately before or after attribute *target*.

        No-op when either name is absent, when they are the same name, or when
        *position* is not ``before``/``after``.
        """
        logger.info("Edit: reorder_attribute node=%s dragged=%s target=%s position=%s",
                    node.label(), dragged, target, position)
        stale = self._check_nodes(tree, [node])
        if stale is not None:
            return stale

        dragged_key = self._existing_key(node, dragged)
        target_key = self._existing_key(node, target)
        reordered = None
        if dragged_key is not None and target_key is not None:
            reordered = reorder_items(list(node.attributes.items()), dragged_key, target_key, position)
        if reordered is None:
            logger.info("Edit noop: reorder_attribute dragged=%s target=%s", dragged, target)
            return OperationResult(False, "Cannot reorder attributes.",
                                   {"dragged": dragged, "target": target, "position": position})

        node.attributes.clear()
        node.attributes.update(reordered)
        order = [qualified_name(node, key) for key in node.attributes]
        logger.info("Edit OK: reorder_attribute order=%s", order)
        return OperationResult(True, f"Moved attribute '{dragged}' {position} '{target}'.",
                               {"order": order})

    def toggle_visibility(self, tree: Tree, node: Node) -> OperationResult:
        """Hide a visible node (``visibility="hidden"``) or unhide a hidden one."""
        logger.info("Edit: toggle_visibility node=%s", node.label())
        stale = self._check_nodes(tree, [node])
        if stale is not None:
            return stale

        if node.attributes.get("visibility") == "hidden":
            del node.attributes["visibility"]
            visible = True
        else:
            node.attributes["visibility"] = "hidden"
            visible = False
        logger.info("Edit OK: toggle_visibility visible=%s", visible)
        return OperationResult(True, "Shown layer." if visible else "Hid layer.", {"visible": visible})

    # -------------------------------------------------------------------------
    # Inline style properties
    # -------------------------------------------------------------------------

    def set_style_property(self, tree: Tree, node: Node, name: str, value: str) -> OperationResult:
        """Set a style property, updating in place or appending a new one.

        Names containing ``:`` or ``;`` and values containing ``;`` are
        rejected, since they would not parse back as the same single property.
        """
        name, value = (name or "").strip(), (value or "").strip()
        if not name or not value:
            return OperationResult(False, "Style property name and value are required.",
                                   {"name": name, "value": value})
        if not StyleBlock.is_valid_property(name, value):
            logger.info("Edit noop: set_style_property rejected name=%s", name)
            return OperationResult(False, "Style property names cannot contain ':' or ';' "
                                          "and values cannot contain ';'.",
                                   {"name": name, "value": value, "reason": "invalid_property"})
        block = StyleBlock.parse(node.attributes.get("style"))
        block.set(name, value)
        return self._apply_style(tree, node, block, f"Set style property '{name}'.")

    def delete_style_property(self, tree: Tree, node: Node, name: str) -> OperationResult:
        """Remove a style property.

        Removing the last property leaves an empty ``style`` attribute in
        place; callers wanting the attribute gone delete it explicitly.
        """
        block = StyleBlock.parse(node.attributes.get("style"))
        if not block.delete(name):
            logger.info("Edit noop: delete_style_property unknown name=%s", name)
            return OperationResult(False, f"Style property '{name}' not found.", {"name": name})
        return self._apply_style(tree, node, block, f"Deleted style property '{name}'.")

    def reorder_style_property(self, tree: Tree, node: Node, dragged: str, target: str,
                               position: str) -> OperationResult:
        block = StyleBlock.parse(node.attributes.get("style"))
        if not block.reorder(dragged, target, position):
            logger.info("Edit noop: reorder_style_property dragged=%s target=%s", dragged, target)
            return OperationResult(False, "Cannot reorder style properties.",
                                   {"dragged": dragged, "target": target, "position": position})
        return self._apply_style(tree, node, block,
                                 f"Moved style property '{dragged}' {position} '{target}'.")

    def _apply_style(self, tree: Tree, node: Node, block: StyleBlock, message: str) -> OperationResult:
        result = self.set_attribute(tree, node, "style", block.render())
        if not result.success:
            return result
        return OperationResult(True, message, {"style": block.render(), "properties": block.names()})

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def move(self, tree: Tree, sources: Sequence[Node], target: Node, position: str) -> OperationResult:
        """Move *sources* before, after or inside *target*.

        Sources equal to the target or containing it are dropped from the
        batch; the rest still move.  ``inside`` appends in input order,
        ``before`` stacks the sources directly in front of the target and
        ``after`` places them contiguously, in input order, right after it.
        """
        logger.info("Edit: move count=%d target=%s position=%s",
                    len(sources or []), target.label(), position)
        if position not in MOVE_POSITIONS:
            return OperationResult(False, f"Unsupported move position '{position}'.",
                                   {"allowed": list(MOVE_POSITIONS)})
        stale = self._check_nodes(tree, [target])
        if stale is not None:
            return stale

        valid: List[Node] = []
        for source in sources or []:
            if source is target or is_ancestor(source, target):
                logger.debug("Edit: move skip source=%s (contains target)", source.label())
                continue
            if not tree.contains(source):
                logger.debug("Edit: move skip source=%s (not in document)", source.label())
                continue
            if any(v is source for v in valid):
                continue
            valid.append(source)

        if not valid:
            logger.info("Edit noop: move no valid sources target=%s", target.label())
            return OperationResult(False, "Nothing to move.", {"position": position})

        parent = target.parent
        if position == "inside":
            for source in valid:
                tree.append(target, source)
        elif parent is None:
            logger.info("Edit noop: move %s document root", position)
            return OperationResult(False, f"Cannot move {position} the document root.",
                                   {"position": position})
        elif position == "before":
            for source in valid:
                tree.insert_before(parent, source, target)
        else:
            reference = self._next_sibling_outside(target, valid)
            for source in valid:
                tree.insert_before(parent, source, reference)

        logger.info("Edit OK: move count=%d position=%s", len(valid), position)
        return OperationResult(True, f"Moved {len(valid)} layer(s) {position} '{target.label()}'.",
                               {"moved": len(valid), "skipped": len(sources) - len(valid),
                                "position": position})

    def group(self, tree: Tree, nodes: Sequence[Node]) -> OperationResult:
        """Wrap sibling *nodes* in a new container element.

        Requires at least two distinct nodes sharing the same parent.  The
        container is inserted where the earliest of them sits and receives
        them in document order.  ``details["container"]`` holds the new node
        so the caller can select it.
        """
        unique: List[Node] = []
        for node in nodes or []:
            if not any(u is node for u in unique):
                unique.append(node)
        logger.info("Edit: group count=%d", len(unique))

        if len(unique) < 2:
            logger.info("Edit noop: group needs at least two layers")
            return OperationResult(False, "Select at least two layers to group.",
                                   {"count": len(unique)})
        stale = self._check_nodes(tree, unique)
        if stale is not None:
            return stale
        parent = unique[0].parent
        if parent is None or any(n.parent is not parent for n in unique):
            logger.warning("Edit noop: group can only group siblings")
            return OperationResult(False, "Can only group siblings.", {"count": len(unique)})

        ordered = sorted(unique, key=lambda n: tree.index_of(n, parent))
        container = new_element(tree, self._settings.group_tag)
        tree.insert_before(parent, container, ordered[0])
        for node in ordered:
            tree.append(container, node)

        logger.info("Edit OK: group count=%d parent=%s", len(ordered), parent.label())
        return OperationResult(True, f"Grouped {len(ordered)} layers.",
                               {"container": container, "count": len(ordered)})

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _existing_key(node: Node, name: str) -> Optional[str]:
        # Stored key for a qualified or Clark name, None when absent or unresolvable
        try:
            key = resolve_attribute_name(node, name)
        except InvalidOperation:
            return None
        return key if key in node.attributes else None

    @staticmethod
    def _check_nodes(tree: Tree, nodes: Sequence[Node]) -> Optional[OperationResult]:
        for node in nodes:
            if not tree.contains(node):
                logger.warning("Edit FAIL: node %s is not part of the active document", node.label())
                return OperationResult(False, "Layer is not part of the current document.",
                                       {"reason": "stale_node"})
        return None

    @staticmethod
    def _next_sibling_outside(target: Node, moving: Sequence[Node]) -> Optional[Node]:
        # First following sibling that is not itself being moved
        sibling = target.next_sibling()
        while sibling is not None and any(m is sibling for m in moving):
            sibling = sibling.next_sibling()
        return sibling
