"""
PantryChef text helpers shared by the catalog services
"""

from __future__ import annotations
import re
from typing import Iterable, Optional

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def generate_slug(text: str, max_length: int = 100) -> str:
    """URL-safe slug: lowercase, runs of non-alphanumerics collapsed to '-'"""
    s = re.sub(r"[^a-z0-9]+", "-", text.lower().strip())
    return s.strip("-")[:max_length]


def capitalize_words(text: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split(" "))


def is_uuid(value: str) -> bool:
    return bool(value) and UUID_RE.match(value) is not None


def build_search_text(*parts: Optional[str], names: Iterable[str] = ()) -> str:
    """Lower-cased text blob used for substring search over a dish"""
    tokens = [p for p in parts if p]
    tokens.extend(names)
    return " ".join(tokens).lower()
