"""Neutralize markup in untrusted text before storage or display."""

from __future__ import annotations

from typing import Optional

from markupsafe import escape


def clean_text(value: str) -> str:
    return str(escape(value.strip()))


def clean_optional(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return clean_text(value) or None
