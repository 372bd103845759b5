from __future__ import annotations

"""Typed view over the ``editor`` configuration section."""

from dataclasses import dataclass, fields
import logging
from typing import Any, Mapping, Optional

__all__ = ["EditorSettings", "load_editor_settings"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorSettings:
    """Editor behaviour knobs.

    Attributes
    ----------
    group_tag
        Local name of the container created when grouping.
    drop_inside_lower, drop_inside_upper
        Row fractions between which a drop on a node with children means
        "inside".
    drop_split
        Row fraction separating "before" from "after".
    resolve_entities, huge_tree
        lxml parser options.
    pretty_print
        Re-indent pushed text instead of keeping source whitespace.
    """

    group_tag: str = "g"
    drop_inside_lower: float = 0.25
    drop_inside_upper: float = 0.75
    drop_split: float = 0.5
    resolve_entities: bool = False
    huge_tree: bool = False
    pretty_print: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> EditorSettings:
        """Build settings from a config mapping, ignoring unknown or ill-typed keys."""
        if not data:
            return cls()
        defaults = cls()
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            expected = type(getattr(defaults, f.name))
            try:
                if expected is bool:
                    if not isinstance(raw, bool):
                        raise TypeError(f"expected a boolean, got {raw!r}")
                    values[f.name] = raw
                else:
                    values[f.name] = expected(raw)
            except (TypeError, ValueError) as exc:
                logger.warning("Ignoring editor setting %s: %s", f.name, exc)
        return cls(**values)


def load_editor_settings() -> EditorSettings:
    """Read the ``editor`` section through :class:`ConfigManager`."""
    from svg_inspector.config import ConfigManager  # local import to keep core config-free

    return EditorSettings.from_mapping(ConfigManager().get_editor_config())
