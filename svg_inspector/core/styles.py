from __future__ import annotations

"""Ordered view of an inline ``style`` attribute."""

from typing import Iterator, List, Optional, Tuple

from .utils import reorder_items

__all__ = ["StyleBlock"]


class StyleBlock:
    """Ordered (property, value) pairs parsed from a ``style`` value.

    Parsing splits on ``;``, trims, drops empty segments and splits each
    segment on its first ``:``.  Rendering joins ``name: value`` with ``"; "``,
    so the CSS meaning round-trips while the original spacing does not.
    """

    def __init__(self, properties: Optional[List[Tuple[str, str]]] = None) -> None:
        self._properties: List[Tuple[str, str]] = list(properties or [])

    @classmethod
    def parse(cls, value: Optional[str]) -> StyleBlock:
        properties: List[Tuple[str, str]] = []
        for segment in (value or "").split(";"):
            segment = segment.strip()
            if not segment:
                continue
            name, _, rest = segment.partition(":")
            properties.append((name.strip(), rest.strip()))
        return cls(properties)

    @staticmethod
    def is_valid_property(name: str, value: str) -> bool:
        """True when ``name: value`` parses back as exactly that one property."""
        name, value = name.strip(), value.strip()
        if not name or not value:
            return False
        return not any(c in name for c in ":;") and ";" not in value

    def render(self) -> str:
        return "; ".join(f"{name}: {value}" for name, value in self._properties)

    @property
    def properties(self) -> List[Tuple[str, str]]:
        return list(self._properties)

    def names(self) -> List[str]:
        return [name for name, _ in self._properties]

    def get(self, name: str) -> Optional[str]:
        for prop, value in self._properties:
            if prop == name:
                return value
        return None

    def __contains__(self, name: object) -> bool:
        return name in self.names()

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.properties)

    def __len__(self) -> int:
        return len(self._properties)

    def set(self, name: str, value: str) -> None:
        """Update *name* in place, or append it when new."""
        for i, (prop, _) in enumerate(self._properties):
            if prop == name:
                self._properties[i] = (name, value)
                return
        self._properties.append((name, value))

    def delete(self, name: str) -> bool:
        before = len(self._properties)
        self._properties = [p for p in self._properties if p[0] != name]
        return len(self._properties) != before

    def reorder(self, dragged: str, target: str, position: str) -> bool:
        reordered = reorder_items(self._properties, dragged, target, position)
        if reordered is None:
            return False
        self._properties = reordered
        return True
