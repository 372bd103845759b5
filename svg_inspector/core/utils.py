from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free apart from :func:`save_text_file`; they can
be used across all layers of the inspector.
"""

from typing import List, Optional, Sequence, Tuple, TypeVar
import logging

__all__ = [
    "local_name",
    "namespace_of",
    "reorder_items",
    "save_text_file",
]

logger = logging.getLogger(__name__)

V = TypeVar("V")

POSITIONS_BEFORE_AFTER = ("before", "after")


def local_name(tag: str) -> str:
    """Return *tag* without its ``{namespace}`` prefix.

    >>> local_name("{http://www.w3.org/2000/svg}rect")
    'rect'
    """
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def namespace_of(tag: str) -> Optional[str]:
    """Return the namespace URI of a Clark-notation *tag*, or None."""
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def reorder_items(
    items: Sequence[Tuple[str, V]],
    dragged: str,
    target: str,
    position: str,
) -> Optional[List[Tuple[str, V]]]:
    """Move the pair named *dragged* next to the pair named *target*.

    The dragged pair is removed first, then reinserted immediately before or
    after the target's resulting position.  Returns None when nothing can be
    done: either name is missing, both names are equal, or *position* is not
    ``before``/``after``.

    >>> reorder_items([("fill", "red"), ("stroke", "blue")], "stroke", "fill", "before")
    [('stroke', 'blue'), ('fill', 'red')]
    """
    if dragged == target or position not in POSITIONS_BEFORE_AFTER:
        return None
    names = [name for name, _ in items]
    if dragged not in names or target not in names:
        return None

    dragged_item = items[names.index(dragged)]
    remaining = [item for item in items if item[0] != dragged]
    target_index = [name for name, _ in remaining].index(target)
    if position == "after":
        target_index += 1
    remaining.insert(target_index, dragged_item)
    return remaining


# ---------------------------------------------------------------------------
# File convenience wrappers
# ---------------------------------------------------------------------------

def save_text_file(path: str, text: str) -> None:
    """Write *text* to *path* as UTF-8, replacing the previous content."""
    try:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("I/O: wrote text path=%s chars=%d", path, len(text))
    except OSError:
        logger.error("I/O FAIL: write text path=%s", path, exc_info=True)
        raise
