"""Data models for the tag taxonomy."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Tag:
    """A single taxonomy tag."""
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class TagCategory:
    """An ordered group of tags sharing a display color."""
    title: str
    description: str = ""
    color: str = ""
    tags: tuple[Tag, ...] = field(default_factory=tuple)
    id: Optional[str] = None


@dataclass(frozen=True)
class TagInfo:
    """Tag resolved together with its category for display."""
    id: str
    name: str
    description: str
    color: str
    category: str
