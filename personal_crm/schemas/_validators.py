"""Reusable field normalisers shared by the input schemas."""
from __future__ import annotations

import json
import re
from datetime import date
from typing import Any

_URL_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def clean_optional(value: Any) -> Any:
    """Strip strings and turn blank strings into ``None``."""

    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    return value


def iso_date_string(value: Any) -> str | None:
    value = clean_optional(value)
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError as exc:
        msg = f"Invalid date '{value}': expected YYYY-MM-DD"
        raise ValueError(msg) from exc


def join_tags(value: Any) -> str | None:
    """Accept a comma separated string or a list and return the joined form."""

    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    unique_tags: list[str] = []
    for item in items:
        cleaned = item.strip()
        if cleaned and cleaned not in unique_tags:
            unique_tags.append(cleaned)
    return ",".join(unique_tags) or None


def json_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            json.loads(value)
        except json.JSONDecodeError as exc:
            msg = "custom_fields must be valid JSON"
            raise ValueError(msg) from exc
        return value
    return json.dumps(value)


def sanitize_url(value: Any) -> str | None:
    """Allow only http(s) URLs; bare domains are assumed to be https."""

    value = clean_optional(value)
    if value is None:
        return None
    text = str(value)
    if _URL_SCHEME.match(text):
        return text
    if "://" not in text:
        return f"https://{text}"
    msg = "Invalid URL protocol: only http and https are allowed"
    raise ValueError(msg)
