from __future__ import annotations

"""Editing and synchronization services."""

from .mutation_service import MutationService, OperationResult  # noqa: F401
from .sync_service import SyncSession, SyncState  # noqa: F401

__all__: list[str] = [
    "MutationService",
    "OperationResult",
    "SyncSession",
    "SyncState",
]
