"""Dot-notation key resolution against a translation tree."""

from typing import Any, List, Mapping, Optional, Tuple

from linguakit.i18n.models import PluralForms

KEY_SEPARATOR = "."


def split_key(key: str) -> List[str]:
    """Split a dotted key into its path segments."""
    return key.split(KEY_SEPARATOR)


def join_key(prefix: Optional[str], key: str) -> str:
    """Prefix a relative key with a namespace, if any."""
    return f"{prefix}{KEY_SEPARATOR}{key}" if prefix else key


def walk(tree: Optional[Mapping[str, Any]], key: str) -> Tuple[bool, Any]:
    """Follow ``key`` segment by segment through nested namespaces.

    Only dict nodes are namespaces: reaching a leaf string or PluralForms
    before the last segment ends the walk.

    Returns:
        (True, node) when every segment was consumed, else (False, None).
    """
    if tree is None:
        return False, None

    current: Any = tree
    for segment in split_key(key):
        if not isinstance(current, Mapping):
            return False, None
        if segment not in current:
            return False, None
        current = current[segment]
        if current is None:
            return False, None
    return True, current


def lookup_text(tree: Optional[Mapping[str, Any]], key: str) -> Optional[str]:
    """Return the leaf string at ``key``, or None.

    Namespaces and plural forms are not text, so they resolve to None.
    """
    found, node = walk(tree, key)
    if found and isinstance(node, str):
        return node
    return None


def lookup_plural(tree: Optional[Mapping[str, Any]], key: str) -> Optional[PluralForms]:
    """Return the PluralForms stored at ``key``, or None."""
    found, node = walk(tree, key)
    if found and isinstance(node, PluralForms):
        return node
    return None


def node_exists(tree: Optional[Mapping[str, Any]], key: str) -> bool:
    """Check whether ``key`` names any node: text, plural forms or a namespace."""
    found, _ = walk(tree, key)
    return found
