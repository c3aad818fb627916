"""Common utility functions."""

from typing import Any


def get_value(obj: Any, key: str) -> Any:
    """Get value from dict or object attribute."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def article_label(article: Any, limit: int = 80) -> str:
    """Short human-readable label for log lines: the title, else the URL."""
    label = get_value(article, "title") or get_value(article, "url") or "<untitled>"
    label = str(label)
    if len(label) > limit:
        return label[: limit - 3] + "..."
    return label
