"""Message shapes exchanged with the text-buffer host.

Messages are plain dicts so they can cross any transport unchanged:

========  ===========  ==========================================
type      direction    payload
========  ===========  ==========================================
ready     core->host   none; asks for the initial content
load      host->core   ``svgText``: full authoritative document
updateSvg core->host   ``svgText``: full document after a local edit
========  ===========  ==========================================
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

__all__ = [
    "READY",
    "LOAD",
    "UPDATE_SVG",
    "ready_message",
    "load_message",
    "update_message",
    "message_text",
]

READY = "ready"
LOAD = "load"
UPDATE_SVG = "updateSvg"

TEXT_KEY = "svgText"


def ready_message() -> Dict[str, Any]:
    return {"type": READY}


def load_message(text: str) -> Dict[str, Any]:
    return {"type": LOAD, TEXT_KEY: text}


def update_message(text: str) -> Dict[str, Any]:
    return {"type": UPDATE_SVG, TEXT_KEY: text}


def message_text(message: Mapping[str, Any]) -> Optional[str]:
    """Return the document text carried by *message*, if any."""
    text = message.get(TEXT_KEY)
    return text if isinstance(text, str) else None
