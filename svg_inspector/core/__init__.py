from __future__ import annotations

"""Document engine: tree model, addressing, selection, editing and sync.

Free of UI and disk I/O (except :class:`FileTextHost`) so that every piece can
be exercised from unit tests.
"""

from .exceptions import InvalidOperation, ParseError, SvgInspectorError  # noqa: F401
from .models import Node, Tree  # noqa: F401
from .paths import Path, compute_path, resolve_path  # noqa: F401
from .selection import Selection  # noqa: F401
from .styles import StyleBlock  # noqa: F401

__all__: list[str] = [
    "InvalidOperation",
    "ParseError",
    "SvgInspectorError",
    "Node",
    "Tree",
    "Path",
    "compute_path",
    "resolve_path",
    "Selection",
    "StyleBlock",
]
