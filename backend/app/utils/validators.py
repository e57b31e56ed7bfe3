"""
Validators — Rule-based checks for identifiers, domains, durations and formats.
"""
import re
import uuid
from typing import Any, Iterable

DOMAIN_PATTERN = re.compile(r"^(?!://)([a-zA-Z0-9-]+\.)*[a-zA-Z0-9-]+\.[a-zA-Z]{2,}$")


def is_valid_id(value: str | None) -> bool:
    """Validate a record identifier: a canonical UUID string."""
    if not value:
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except (ValueError, AttributeError, TypeError):
        return False


def validate_domain_name(domain: str | None) -> bool:
    """Validate a bare domain name (e.g. example.com), no scheme or path."""
    if not domain:
        return False
    return bool(DOMAIN_PATTERN.match(domain.strip()))


def validate_duration(duration: Any) -> bool:
    """Renewal duration: whole years, at least 1."""
    if isinstance(duration, bool) or not isinstance(duration, int):
        return False
    return duration >= 1


def validate_file_format(file_format: str | None, allowed: Iterable[str]) -> bool:
    """Document format must be one of the configured formats."""
    return bool(file_format) and file_format in allowed


def sanitize_folder_name(title: str | None) -> str:
    """Filesystem-safe folder name derived from a project title."""
    if not title:
        return "untitled"
    cleaned = re.sub(r"[^\w\s-]", "", title.strip())
    cleaned = re.sub(r"\s+", "_", cleaned)
    return cleaned or "untitled"
