"""Top-level package for SVG Inspector.

The document engine lives in :mod:`svg_inspector.core`; front-ends (the CLI,
an editor extension host) should only depend on the public API exposed here
and in :mod:`svg_inspector.controllers` rather than importing internal modules
directly.
"""

from .core.models import Node, Tree  # re-export for convenience
from .core.services import MutationService, SyncSession

__all__: list[str] = [
    "Node",
    "Tree",
    "MutationService",
    "SyncSession",
]
