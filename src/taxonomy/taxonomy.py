"""Tag taxonomy loading, lookup, and prompt formatting."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from common.errors import TaxonomyError
from taxonomy.models import Tag, TagCategory, TagInfo

logger = logging.getLogger(__name__)


def _parse_tag(raw: Any, category_title: str) -> Tag:
    if not isinstance(raw, dict):
        raise TaxonomyError(f"Tag in category '{category_title}' is not an object")
    tag_id = raw.get("id")
    if not isinstance(tag_id, str) or not tag_id.strip():
        raise TaxonomyError(f"Tag in category '{category_title}' has a missing or empty id")
    return Tag(
        id=tag_id,
        name=str(raw.get("name") or tag_id),
        description=str(raw.get("description") or ""),
    )


def _parse_category(raw: Any, category_id: Optional[str] = None) -> TagCategory:
    if not isinstance(raw, dict):
        raise TaxonomyError("Category is not an object")

    title = raw.get("title") or raw.get("name") or category_id
    if not title:
        raise TaxonomyError("Category has no title")

    raw_tags = raw.get("tags", [])
    if not isinstance(raw_tags, list):
        raise TaxonomyError(f"Category '{title}' has a non-list 'tags' field")

    return TagCategory(
        title=str(title),
        description=str(raw.get("description") or ""),
        color=str(raw.get("color") or ""),
        tags=tuple(_parse_tag(tag, str(title)) for tag in raw_tags),
        id=category_id,
    )


def _parse_categories(data: Any) -> list[TagCategory]:
    # Current format: ordered list of categories.
    if isinstance(data, list):
        return [_parse_category(raw) for raw in data]

    # Legacy format: {"tagCategories": {<key>: {name, description, color, tags}}}
    if isinstance(data, dict) and isinstance(data.get("tagCategories"), dict):
        return [_parse_category(raw, key) for key, raw in data["tagCategories"].items()]

    raise TaxonomyError("Tag definitions must be a list of categories or a 'tagCategories' object")


class Taxonomy:
    """
    Immutable view of the tag definitions.

    Category and tag order follow the source file so that prompt text is
    reproducible.
    """

    def __init__(self, categories: Iterable[TagCategory]) -> None:
        self._categories = tuple(categories)
        self._tags: dict[str, TagInfo] = {}

        for category in self._categories:
            for tag in category.tags:
                if tag.id in self._tags:
                    raise TaxonomyError(
                        f"Duplicate tag id '{tag.id}' in categories "
                        f"'{self._tags[tag.id].category}' and '{category.title}'"
                    )
                self._tags[tag.id] = TagInfo(
                    id=tag.id,
                    name=tag.name,
                    description=tag.description,
                    color=category.color,
                    category=category.title,
                )

    @classmethod
    def from_data(cls, data: Any) -> "Taxonomy":
        return cls(_parse_categories(data))

    @classmethod
    def load(cls, path: Path) -> "Taxonomy":
        """
        Load tag definitions from a JSON file.

        Raises:
            TaxonomyError: If the file is unreadable, not JSON, malformed, or
                defines the same tag id twice.
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise TaxonomyError(f"Cannot read tag definitions {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise TaxonomyError(f"Tag definitions {path} are not valid JSON: {exc}") from exc

        taxonomy = cls.from_data(data)
        logger.info(
            "Loaded %d tags in %d categories from %s",
            len(taxonomy),
            len(taxonomy.categories),
            path,
        )
        return taxonomy

    @property
    def categories(self) -> tuple[TagCategory, ...]:
        return self._categories

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag_id: object) -> bool:
        return isinstance(tag_id, str) and tag_id in self._tags

    def __iter__(self) -> Iterator[TagInfo]:
        return iter(self._tags.values())

    def tag_ids(self) -> list[str]:
        """All tag ids in file order."""
        return list(self._tags)

    def all_tag_ids(self) -> set[str]:
        return set(self._tags)

    def lookup(self, tag_id: str) -> Optional[TagInfo]:
        return self._tags.get(tag_id)

    def get_tags(self, tag_ids: Iterable[str]) -> list[TagInfo]:
        """Resolve ids to TagInfo, skipping ids not in the taxonomy."""
        return [self._tags[tag_id] for tag_id in tag_ids if tag_id in self._tags]

    def format(self) -> str:
        """Human-readable category/tag listing used in prompts."""
        formatted = ""
        for category in self._categories:
            formatted += f"\n{category.title.upper()}: {category.description}\n"
            for tag in category.tags:
                formatted += f"  - {tag.id}: {tag.description}\n"
        return formatted
