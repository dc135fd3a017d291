"""Structural clone and merge for translation trees.

Both operations build new trees and never mutate their inputs. Every mapping
is classified once on the way in: plural-shaped mappings become PluralForms,
other mappings become nested dicts, strings stay leaves. Keys listed in
``reserved_keys`` are dropped at every depth, and None values are skipped.
"""

import copy
from typing import AbstractSet, Any, Dict, Mapping, Optional

from linguakit.i18n.models import PluralForms, TranslationTree

DEFAULT_RESERVED_KEYS: frozenset = frozenset({"__proto__", "constructor", "prototype"})


def _ingest(value: Any, reserved_keys: AbstractSet[str]) -> Any:
    if isinstance(value, str) or isinstance(value, PluralForms):
        return value
    if isinstance(value, Mapping):
        if PluralForms.matches(value):
            return PluralForms.from_mapping(value)
        return clone_tree(value, reserved_keys)
    return copy.deepcopy(value)


def _owned_items(tree: Mapping[Any, Any], reserved_keys: AbstractSet[str]):
    for raw_key, value in tree.items():
        key = raw_key if isinstance(raw_key, str) else str(raw_key)
        if key in reserved_keys or value is None:
            continue
        yield key, value


def clone_tree(
    tree: Mapping[Any, Any],
    reserved_keys: Optional[AbstractSet[str]] = None,
) -> TranslationTree:
    """Deep-copy a translation tree into engine form.

    Args:
        tree: Raw or already-ingested translation mapping.
        reserved_keys: Keys to drop at every level (default: DEFAULT_RESERVED_KEYS).

    Returns:
        A new tree sharing no mutable structure with ``tree``.
    """
    if reserved_keys is None:
        reserved_keys = DEFAULT_RESERVED_KEYS

    result: TranslationTree = {}
    for key, value in _owned_items(tree, reserved_keys):
        result[key] = _ingest(value, reserved_keys)
    return result


def merge_trees(
    target: Mapping[Any, Any],
    source: Mapping[Any, Any],
    reserved_keys: Optional[AbstractSet[str]] = None,
) -> TranslationTree:
    """Deep-merge ``source`` over ``target`` and return the result.

    Nested namespaces present on both sides are merged recursively. Anything
    else from ``source`` (strings, plural forms, or a namespace landing on a
    leaf or plural slot) replaces the target slot wholesale.

    Args:
        target: Existing tree.
        source: Tree whose entries take precedence.
        reserved_keys: Keys to drop at every level (default: DEFAULT_RESERVED_KEYS).

    Returns:
        A new merged tree. Neither argument is modified.
    """
    if reserved_keys is None:
        reserved_keys = DEFAULT_RESERVED_KEYS

    result = clone_tree(target, reserved_keys)

    for key, value in _owned_items(source, reserved_keys):
        if isinstance(value, Mapping) and not PluralForms.matches(value):
            existing = result.get(key)
            if isinstance(existing, dict):
                result[key] = merge_trees(existing, value, reserved_keys)
            else:
                result[key] = clone_tree(value, reserved_keys)
        else:
            result[key] = _ingest(value, reserved_keys)

    return result


def to_plain(tree: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert an engine tree back into plain nested dicts.

    Used for snapshots handed to callers; the result can be mutated freely.
    """
    result: Dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, PluralForms):
            result[key] = value.to_dict()
        elif isinstance(value, Mapping):
            result[key] = to_plain(value)
        elif isinstance(value, str):
            result[key] = value
        else:
            result[key] = copy.deepcopy(value)
    return result
