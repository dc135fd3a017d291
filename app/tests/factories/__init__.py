"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_async_loader,
    make_i18n,
    make_plural_forms,
    make_translations,
)

__all__ = [
    "make_async_loader",
    "make_i18n",
    "make_plural_forms",
    "make_translations",
]
