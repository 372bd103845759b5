from __future__ import annotations

"""Synchronization between the live tree and the host's text buffer.

The session owns the active :class:`Tree` and the :class:`Selection`.  It runs
two directions of a loop:

Pull
    A ``load`` message carries the full document text.  The selection is
    captured as paths, the text is parsed into a brand-new tree which replaces
    the old one wholesale, and the selection is restored against it.
Push
    After a successful local edit the current tree is serialized and sent as
    an ``updateSvg`` message.  The local tree stays active; the host is
    expected to echo the text back as a ``load``, which is applied like any
    other load.

There is no diffing: every step transmits the entire document.

Design principles
-----------------
- Single-threaded and synchronous; messages are processed strictly in arrival
  order.  A load posted while another is being applied is queued.
- A parse failure is not fatal: the session holds no tree and an empty
  selection until the next valid load.
- A local push racing an external reload is accepted behavior.  Echoes of the
  last push are recognized for diagnostics but are neither dropped nor
  debounced.
"""

from collections import deque
from enum import Enum
import logging
from typing import Any, Callable, Deque, List, Mapping, Optional, Protocol

from svg_inspector.core import protocol
from svg_inspector.core.codec import parse_svg, serialize_svg
from svg_inspector.core.exceptions import ParseError
from svg_inspector.core.models import Tree
from svg_inspector.core.selection import Selection
from svg_inspector.core.settings import EditorSettings

__all__ = ["HostTransport", "SyncState", "SyncSession"]

logger = logging.getLogger(__name__)


class HostTransport(Protocol):
    """Outbound half of the host boundary (core -> host)."""

    def post_message(self, message: Mapping[str, Any]) -> None:
        """Deliver *message* to the host, preserving send order."""
        ...


class SyncState(str, Enum):
    IDLE = "idle"
    APPLYING = "applying"


class SyncSession:
    """Keeps one document tree consistent with the host's text buffer.

    Parameters
    ----------
    transport
        Where ``ready`` and ``updateSvg`` messages are sent.
    selection
        Selection to carry across reloads; a fresh one by default.
    settings
        Parser and serializer options.
    """

    def __init__(
        self,
        transport: HostTransport,
        selection: Optional[Selection] = None,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        self._transport = transport
        self.selection: Selection = selection if selection is not None else Selection()
        self._settings = settings or EditorSettings()

        self.tree: Optional[Tree] = None
        self.state: SyncState = SyncState.IDLE
        self.last_error: Optional[ParseError] = None

        self._pending: Deque[str] = deque()
        self._draining = False
        self._last_pushed: Optional[str] = None
        self._listeners: List[Callable[["SyncSession"], None]] = []

    # --------------------------------------------------------------------- API

    def start(self) -> None:
        """Announce readiness; the host answers with the initial ``load``."""
        logger.info("Sync: ready")
        self._transport.post_message(protocol.ready_message())

    def add_listener(self, callback: Callable[["SyncSession"], None]) -> None:
        """Call *callback* after every tree replacement (successful or not)."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[["SyncSession"], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def handle_message(self, message: Mapping[str, Any]) -> None:
        """Entry point for host -> core messages."""
        kind = message.get("type")
        if kind != protocol.LOAD:
            logger.warning("Sync: ignoring unknown message type=%r", kind)
            return
        text = protocol.message_text(message)
        if text is None:
            logger.warning("Sync: load message without text ignored")
            return
        self.load(text)

    def load(self, text: str) -> None:
        """Replace the tree with one parsed from *text* (queued if busy)."""
        self._pending.append(text)
        if self._draining:
            logger.debug("Sync: load queued pending=%d", len(self._pending))
            return
        self._draining = True
        try:
            while self._pending:
                self._apply(self._pending.popleft())
        finally:
            self._draining = False

    def push(self) -> Optional[str]:
        """Serialize the current tree and send it to the host.

        Returns the pushed text, or None when there is nothing to push.
        """
        if self.tree is None:
            logger.warning("Sync: push skipped, no document")
            return None
        if self.state is SyncState.APPLYING:
            logger.warning("Sync: push skipped while a load is being applied")
            return None
        text = serialize_svg(self.tree, pretty_print=self._settings.pretty_print)
        self._last_pushed = text
        logger.info("Sync: push chars=%d", len(text))
        self._transport.post_message(protocol.update_message(text))
        return text

    @property
    def has_document(self) -> bool:
        return self.tree is not None

    # --------------------------------------------------------------- Internals

    def _apply(self, text: str) -> None:
        self.state = SyncState.APPLYING
        try:
            if self._last_pushed is not None and text == self._last_pushed:
                logger.debug("Sync: load confirms last push")
            self._last_pushed = None

            paths = []
            if self.tree is not None:
                paths = self.selection.capture_selection(self.tree.root)

            try:
                new_tree = parse_svg(
                    text,
                    resolve_entities=self._settings.resolve_entities,
                    huge_tree=self._settings.huge_tree,
                )
            except ParseError as e:
                logger.warning("Sync: parse failed, document cleared: %s", e)
                self.tree = None
                self.last_error = e
                self.selection.clear()
                return

            self.tree = new_tree
            self.last_error = None
            self.selection.restore_selection(new_tree.root, paths)
            logger.info("Sync: load applied chars=%d selected=%d/%d",
                        len(text), len(self.selection), len(paths))
        finally:
            self.state = SyncState.IDLE
            self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)
