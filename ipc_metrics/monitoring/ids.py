"""
Immutable measurement identifiers.

An identifier is a metric name plus a tag set and names exactly one time
series. Tag updates never modify an identifier in place; they return a new
one, so an identifier handed to a backend can't change underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Id:
    """Metric name and tags identifying a time series."""

    name: str
    tag_items: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def of(cls, name: str, tags: Optional[Mapping[str, str]] = None) -> Id:
        """Create an identifier from a name and a tag mapping."""
        return cls(name, _freeze(tags or {}))

    @property
    def tags(self) -> Dict[str, str]:
        """Copy of the tag set as a plain dict."""
        return dict(self.tag_items)

    def with_tag(self, key: str, value: str) -> Id:
        """Return a new identifier with ``key`` set to ``value``."""
        return self.with_tags({key: value})

    def with_tags(self, tags: Mapping[str, str]) -> Id:
        """Return a new identifier with ``tags`` merged over the current ones."""
        if not tags:
            return self
        merged = self.tags
        merged.update(tags)
        return Id(self.name, _freeze(merged))

    def __str__(self) -> str:
        if not self.tag_items:
            return self.name
        rendered = ",".join(f"{key}={value}" for key, value in self.tag_items)
        return f"{self.name}|{rendered}"


def _freeze(tags: Mapping[str, str]) -> Tuple[Tuple[str, str], ...]:
    return tuple(sorted((str(key), str(value)) for key, value in tags.items()))
