"""
Naming utilities for blazedialect.
"""

import re


_FIRST_CAP_RE = re.compile("(.)([A-Z][a-z]+)")
_ALL_CAP_RE = re.compile("([a-z0-9])([A-Z])")
_NON_WORD_RE = re.compile(r"[^0-9a-z]+")


def camel_to_snake(name: str) -> str:
    """
    Convert ``camelCase`` option keys (``requiresAliasForFromQuery``) to flag names.
    """
    step1 = _FIRST_CAP_RE.sub(r"\1_\2", name)
    snake = _ALL_CAP_RE.sub(r"\1_\2", step1).lower()
    return snake


def normalize_product_name(name: str | None) -> str:
    """
    Lower-case a product name and collapse punctuation so ``"Microsoft SQL-Server"``
    compares equal to ``"microsoft sql server"``.
    """
    if not name:
        return ""
    return _NON_WORD_RE.sub(" ", name.lower()).strip()
