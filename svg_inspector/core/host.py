from __future__ import annotations

"""Reference text-buffer hosts.

A host owns the canonical document text.  It answers ``ready`` with a
``load``, applies every ``updateSvg`` as a full-buffer replacement and emits a
``load`` whenever the buffer changes for any reason, including echoing the
core's own write.  Delivery is synchronous, hence FIFO.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import protocol
from .utils import save_text_file

__all__ = ["MemoryTextHost", "FileTextHost"]

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Mapping[str, Any]], None]


class MemoryTextHost:
    """In-memory buffer host, used by tests and embedding applications.

    Attributes
    ----------
    text
        Current buffer content.
    received
        Messages received from the core, in order.
    sent
        Messages sent to the core, in order.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.received: List[Dict[str, Any]] = []
        self.sent: List[Dict[str, Any]] = []
        self._client: Optional[MessageHandler] = None

    def connect(self, handler: MessageHandler) -> None:
        """Register the core's inbound message handler."""
        self._client = handler

    def post_message(self, message: Mapping[str, Any]) -> None:
        """Receive a core -> host message."""
        self.received.append(dict(message))
        kind = message.get("type")
        if kind == protocol.READY:
            self._emit_load()
        elif kind == protocol.UPDATE_SVG:
            text = protocol.message_text(message)
            if text is None:
                logger.warning("Host: updateSvg without text ignored")
                return
            self._replace(text)
            self._emit_load()
        else:
            logger.warning("Host: ignoring unknown message type=%r", kind)

    def edit(self, text: str) -> None:
        """Simulate an edit made outside the inspector."""
        self._replace(text)
        self._emit_load()

    def _replace(self, text: str) -> None:
        self.text = text

    def _emit_load(self) -> None:
        message = protocol.load_message(self.text)
        self.sent.append(message)
        if self._client is None:
            logger.debug("Host: no client connected, load not delivered")
            return
        self._client(message)


class FileTextHost(MemoryTextHost):
    """Host whose buffer is a file on disk; every replacement is written back."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self.path.read_text(encoding="utf-8"))

    def reload(self) -> bool:
        """Re-read the file and emit a load if it changed on disk."""
        text = self.path.read_text(encoding="utf-8")
        if text == self.text:
            return False
        self.text = text
        self._emit_load()
        return True

    def _replace(self, text: str) -> None:
        save_text_file(str(self.path), text)
        self.text = text
