"""
Dictionary utilities for nested translation trees.

Localization files are loaded as nested dictionaries, and application code
refers to their entries with dotted keys such as "auth.password.reset".
This module provides null-safe navigation through those trees.

License: MIT
"""

from typing import Any, Dict


def safe_get(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Safely navigate through nested dictionaries.

    Args:
        d: The dictionary to navigate.
        *keys: The sequence of keys to follow.
        default: The value to return if any key is missing. Defaults to None.

    Returns:
        The value at the specified path, or the default if not found.

    Example:
        >>> data = {"a": {"b": {"c": 1}}}
        >>> safe_get(data, "a", "b", "c")
        1
        >>> safe_get(data, "a", "x", "y", default="missing")
        'missing'
    """
    current = d

    for key in keys:
        if not isinstance(current, dict):
            return default

        current = current.get(key)

        if current is None:
            return default

    return current


def get_by_dotted_key(tree: Dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Look up a value by dotted key, preferring a literal match.

    Flat JSON files commonly use keys that contain dots themselves
    ("Welcome back."), so an exact top-level match wins before the key is
    split into a path.

    Args:
        tree: The translation tree to search.
        key: A literal key or a dotted path.
        default: Returned when nothing matches.

    Returns:
        The matching value or the default.

    Example:
        >>> get_by_dotted_key({"auth": {"failed": "Wrong password"}}, "auth.failed")
        'Wrong password'
    """
    if not isinstance(tree, dict):
        return default

    if key in tree:
        return tree[key]

    return safe_get(tree, *key.split("."), default=default)
