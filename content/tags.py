"""Tag and slug helpers."""

import re
import unicodedata

from config import TAG_ACRONYMS, TAG_LABEL_OVERRIDES

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_MAX_SLUG_LENGTH = 80


def slugify(text: str | None, max_length: int = _MAX_SLUG_LENGTH) -> str:
    """Lowercase hyphenated slug: 'GPT-5 Ships Today!' -> 'gpt-5-ships-today'."""
    text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG.sub("-", text.lower()).strip("-")
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def normalize_tag(tag: str | None) -> str:
    """Tags are stored as lowercase hyphenated slugs."""
    return slugify(tag)


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Normalize, drop empties, de-dup while preserving order."""
    return list(dict.fromkeys(t for t in (normalize_tag(tag) for tag in tags or []) if t))


def format_tag_label(tag: str) -> str:
    """Display label for a tag slug: "open-source-llm" -> "Open Source LLM"."""
    words = []
    for word in tag.split("-"):
        lower = word.lower()
        if lower in TAG_LABEL_OVERRIDES:
            words.append(TAG_LABEL_OVERRIDES[lower])
        elif lower in TAG_ACRONYMS:
            words.append(word.upper())
        else:
            words.append(word[:1].upper() + word[1:])
    return " ".join(words)


def unique_slug(base: str, taken: set[str]) -> str:
    """base, base-2, base-3, ... whichever is free first."""
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"
