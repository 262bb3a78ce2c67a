"""Helpers for turning loosely typed YAML nodes into text."""

import datetime
from typing import Any

YamlScalar = str | int | float | bool | datetime.date | None


def is_scalar(node: Any) -> bool:
    """True for every node PyYAML's safe loader produces that is not a mapping or a sequence."""
    return node is None or isinstance(node, (str, int, float, bool, datetime.date))


def scalar_to_text(node: YamlScalar) -> str:
    """Render a scalar the way it reads in the document.

    Booleans become "true"/"false" and null becomes the empty string.
    """
    if node is None:
        return ""
    if isinstance(node, bool):
        return "true" if node else "false"
    return str(node)
