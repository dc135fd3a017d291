"""Translation models for the i18n engine.

Defines the tagged values stored in a translation tree, the missing-translation
policy, and the callable shapes the engine consumes.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Union,
)

PLURAL_CATEGORIES = ("zero", "one", "two", "few", "many", "other")


@dataclass(frozen=True)
class PluralForms:
    """Count-sensitive text for one key, keyed by CLDR plural category.

    Plural forms are a terminal tree value: they are never walked into as a
    namespace and they are replaced wholesale on merge.

    Attributes:
        zero: Text for an exact zero count (checked before any locale rule).
        one: Text for the "one" category.
        two: Text for the "two" category.
        few: Text for the "few" category.
        many: Text for the "many" category.
        other: Catch-all text used when the selected category has no slot.
    """

    zero: Optional[Any] = None
    one: Optional[Any] = None
    two: Optional[Any] = None
    few: Optional[Any] = None
    many: Optional[Any] = None
    other: Optional[Any] = None

    def get(self, category: str) -> Optional[str]:
        """Return the text for a category, or None if the slot is empty.

        Slots holding anything other than a string are kept for snapshots but
        never resolve as text.
        """
        if category not in PLURAL_CATEGORIES:
            return None
        value = getattr(self, category)
        return value if isinstance(value, str) else None

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dict holding only the slots that are set."""
        return {
            category: copy.deepcopy(getattr(self, category))
            for category in PLURAL_CATEGORIES
            if getattr(self, category) is not None
        }

    @staticmethod
    def matches(value: Any) -> bool:
        """Check whether a raw mapping has the shape of plural forms.

        A mapping qualifies when it has at least one present (non-None) key
        and every key is a plural category name. Values are not inspected.
        """
        if not isinstance(value, Mapping):
            return False
        present = [key for key, item in value.items() if item is not None]
        return bool(present) and all(key in PLURAL_CATEGORIES for key in value)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "PluralForms":
        """Build plural forms from a mapping that passed matches()."""
        return cls(
            **{key: copy.deepcopy(item) for key, item in value.items() if item is not None}
        )


# A tree maps keys to leaf strings, PluralForms, or nested trees.
TranslationValue = Union[str, PluralForms, Dict[str, Any]]
TranslationTree = Dict[str, Any]

InterpolationParams = Mapping[str, Any]

TranslationLoaderFunc = Callable[[str], Awaitable[Mapping[str, Any]]]
PluralSelector = Callable[[str, float], str]
ChangeCallback = Callable[[str, str], Any]
MissingCallback = Callable[[str, str], Any]


class MissingBehavior(str, Enum):
    """What t() does when no translation exists for a key."""

    KEY = "key"
    EMPTY = "empty"
    THROW = "throw"

    @classmethod
    def from_value(cls, value: Union[str, "MissingBehavior"]) -> "MissingBehavior":
        """Convert a string or member to a MissingBehavior.

        Args:
            value: "key", "empty", "throw" or a MissingBehavior member.

        Returns:
            Matching MissingBehavior member.

        Raises:
            ValueError: If value is not one of the supported behaviors.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise ValueError(
                "behavior must be one of: " + ", ".join(m.value for m in cls)
            ) from e
