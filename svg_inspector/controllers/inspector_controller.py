from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from svg_inspector.core.codec import qualified_name
from svg_inspector.core.drag import DragSession
from svg_inspector.core.models import Node, Tree
from svg_inspector.core.paths import Path
from svg_inspector.core.services.mutation_service import MutationService, OperationResult
from svg_inspector.core.services.sync_service import SyncSession
from svg_inspector.core.settings import EditorSettings
from svg_inspector.core.styles import StyleBlock


class InspectorController:
    """Controller coordinating layer-tree and attribute-panel actions with services.

    The controller holds transient UI state (the in-flight drag) and delegates
    edits to :class:`MutationService`.  Every successful edit is followed by
    exactly one sync push; failed edits push nothing.  It contains no UI
    toolkit code.

    Parameters
    ----------
    session : SyncSession
        Session owning the live tree and the selection.
    mutation_service : MutationService, optional
        Service performing the edits.
    settings : EditorSettings, optional
        Drop-zone thresholds and grouping options.

    Notes
    -----
    The tree is always read from the session, since a push may be echoed back
    synchronously and replace it.
    """

    def __init__(
        self,
        session: SyncSession,
        mutation_service: Optional[MutationService] = None,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        self.session: SyncSession = session
        self.settings: EditorSettings = settings or EditorSettings()
        self.mutation_service: MutationService = mutation_service or MutationService(self.settings)

        # Transient UI-related state
        self.drag: Optional[DragSession] = None

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    @property
    def tree(self) -> Optional[Tree]:
        return self.session.tree

    @property
    def primary(self) -> Optional[Node]:
        return self.session.selection.primary

    def _pushed_edit(self, mutate: Callable[[Tree], OperationResult],
                     after: Optional[Callable[[OperationResult], Any]] = None) -> OperationResult:
        """Run *mutate* against the live tree and push on success.

        *after* runs between a successful mutation and the push, so selection
        changes are in place before the host echoes the new text.
        """
        tree = self.session.tree
        if tree is None:
            return OperationResult(False, "No document loaded.", {"reason": "missing_document"})
        result = mutate(tree)
        if result.success:
            if after is not None:
                after(result)
            self.session.push()
        return result

    def _with_primary(self, action: Callable[[Tree, Node], OperationResult]) -> OperationResult:
        node = self.primary
        if node is None:
            return OperationResult(False, "No layer selected.", {"reason": "no_selection"})
        return self._pushed_edit(lambda tree: action(tree, node))

    # ---------------------------------------------------------------------------------
    # Selection
    # ---------------------------------------------------------------------------------

    def select(self, node: Node, multi: bool = False) -> None:
        self.session.selection.select(node, multi)

    def select_path(self, path: Sequence[int], multi: bool = False) -> bool:
        """Select by path, as a click on a rendered shape does."""
        tree = self.session.tree
        return self.session.selection.select_path(tree.root if tree else None, path, multi)

    def selected_paths(self) -> List[Path]:
        tree = self.session.tree
        if tree is None:
            return []
        return self.session.selection.paths(tree.root)

    # ---------------------------------------------------------------------------------
    # Attribute panel (acts on the primary selection)
    # ---------------------------------------------------------------------------------

    def attributes(self) -> List[tuple[str, str]]:
        node = self.primary
        if node is None:
            return []
        return [(qualified_name(node, name), value) for name, value in node.attributes.items()]

    def style_properties(self) -> List[tuple[str, str]]:
        node = self.primary
        if node is None or "style" not in node.attributes:
            return []
        return StyleBlock.parse(node.attributes["style"]).properties

    def set_attribute(self, name: str, value: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.set_attribute(tree, node, name, value))

    def delete_attribute(self, name: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.delete_attribute(tree, node, name))

    def reorder_attribute(self, dragged: str, target: str, position: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.reorder_attribute(tree, node, dragged, target, position))

    def set_style_property(self, name: str, value: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.set_style_property(tree, node, name, value))

    def delete_style_property(self, name: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.delete_style_property(tree, node, name))

    def reorder_style_property(self, dragged: str, target: str, position: str) -> OperationResult:
        return self._with_primary(
            lambda tree, node: self.mutation_service.reorder_style_property(tree, node, dragged, target, position))

    # ---------------------------------------------------------------------------------
    # Layer tree
    # ---------------------------------------------------------------------------------

    def toggle_visibility(self, node: Node) -> OperationResult:
        return self._pushed_edit(lambda tree: self.mutation_service.toggle_visibility(tree, node))

    def move(self, sources: Sequence[Node], target: Node, position: str) -> OperationResult:
        return self._pushed_edit(lambda tree: self.mutation_service.move(tree, sources, target, position))

    def move_selection_to(self, target: Node, position: str) -> OperationResult:
        return self.move(self.session.selection.nodes, target, position)

    def group_selection(self) -> OperationResult:
        """Group the selected siblings; the new container becomes the selection."""
        nodes = self.session.selection.nodes
        return self._pushed_edit(
            lambda tree: self.mutation_service.group(tree, nodes),
            after=lambda result: self.session.selection.set([result.details["container"]]),
        )

    # ---------------------------------------------------------------------------------
    # Drag and drop
    # ---------------------------------------------------------------------------------

    def begin_drag(self, node: Node) -> DragSession:
        self.drag = DragSession.start(node, self.session.selection, self.settings)
        return self.drag

    def drag_over(self, target: Node, fraction: float) -> Optional[str]:
        if self.drag is None:
            return None
        return self.drag.over(target, fraction)

    def drag_leave(self) -> None:
        if self.drag is not None:
            self.drag.leave()

    def end_drag(self) -> Optional[OperationResult]:
        """Drop the in-flight drag; None when there was nothing to drop."""
        drag, self.drag = self.drag, None
        if drag is None:
            return None
        dropped = drag.drop()
        if dropped is None:
            return None
        sources, target, position = dropped
        return self.move(sources, target, position)
