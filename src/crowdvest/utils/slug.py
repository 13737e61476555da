"""Slug derivation."""

import re
import unicodedata


def slugify(value: str) -> str:
    """Derive a URL slug from a name.

    Deterministic: accents are stripped, "&" becomes "and", anything that is
    not a letter or digit collapses into a single hyphen.

    Examples:
        "Food & Beverages" -> "food-and-beverages"
        "  FinTech / Payments " -> "fintech-payments"
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = value.replace("&", " and ").lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    return value.strip("-")
