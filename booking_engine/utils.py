"""Shared utilities used across the booking engine."""

import re
from datetime import datetime, timezone

_TAG_RE = re.compile(r"<[^>]*>")
_EVENT_HANDLER_RE = re.compile(r"on\w+\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]*)", re.IGNORECASE)
_UNSAFE_PROTOCOL_RE = re.compile(r"javascript:|data:text/html", re.IGNORECASE)

MAX_TEXT_LENGTH = 1000
MAX_NAME_LENGTH = 100
MAX_PHONE_LENGTH = 20
MAX_EMAIL_LENGTH = 254


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(11) 98765-4321")
        '11987654321'
        >>> normalize_phone("+55 11 98765-4321")
        '+5511987654321'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def strip_markup(value: str) -> str:
    """Remove HTML tags, inline event handlers and script-ish protocols."""
    if not value:
        return ""
    cleaned = _TAG_RE.sub("", value.strip())
    cleaned = _EVENT_HANDLER_RE.sub("", cleaned)
    cleaned = _UNSAFE_PROTOCOL_RE.sub("", cleaned)
    return cleaned[:MAX_TEXT_LENGTH]


def sanitize_name(value: str) -> str:
    """Keep letters (accented included), spaces, hyphens and apostrophes.

    Examples:
        >>> sanitize_name("  <b>Ana</b>  Souza 2 ")
        'Ana Souza'
    """
    cleaned = strip_markup(value)
    cleaned = re.sub(r"[^A-Za-zÀ-ÿ\s\-']", "", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()[:MAX_NAME_LENGTH]


def sanitize_phone(value: str) -> str:
    """Keep digits and the usual phone punctuation."""
    if not value:
        return ""
    return re.sub(r"[^0-9()\-\s+]", "", value).strip()[:MAX_PHONE_LENGTH]


def sanitize_email(value: str) -> str:
    """Lower-case, drop whitespace and angle brackets."""
    if not value:
        return ""
    cleaned = re.sub(r"\s", "", value.strip().lower())
    return cleaned.replace("<", "").replace(">", "")[:MAX_EMAIL_LENGTH]


def sanitize_notes(value: str, max_length: int) -> str:
    """Strip markup and collapse runs of blank lines."""
    cleaned = strip_markup(value)
    cleaned = re.sub(r"[^\w\s\-.,!?()\n]", "", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()[:max_length]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
