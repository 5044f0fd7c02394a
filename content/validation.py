"""Email checks for newsletter signup."""

import re

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def looks_like_email(email: str | None) -> bool:
    """Cheap pre-check done before any store call: non-empty and has an '@'."""
    return bool(email and email.strip()) and "@" in email


def is_valid_email(email: str) -> bool:
    """Stricter check applied by the store: local@domain.tld."""
    return bool(_EMAIL_RE.match(email))
