"""Header cleaning for spreadsheet extracts.

Source workbooks arrive with headers such as ``Mobile User A Username`` or
``DeliveredOn``. They are reduced to lowercase snake_case before the per-site
column mapping is applied, so site configs only ever name cleaned headers.
"""

from __future__ import annotations

import re

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_ALNUM_RE = re.compile(r"[^0-9a-zA-Z]+")


def clean_name(raw: object) -> str:
    text = str(raw).strip()
    text = text.replace("%", "_percent_").replace("#", "_number_")
    text = _CAMEL_BOUNDARY_RE.sub("_", text)
    text = _NON_ALNUM_RE.sub("_", text).strip("_").lower()
    if not text:
        return "x"
    if text[0].isdigit():
        return f"x{text}"
    return text


def clean_names(headers: list) -> list[str]:
    """Clean every header and suffix repeats with ``_2``, ``_3`` and so on."""
    seen: dict[str, int] = {}
    out: list[str] = []
    for header in headers:
        name = clean_name(header)
        seen[name] = seen.get(name, 0) + 1
        out.append(name if seen[name] == 1 else f"{name}_{seen[name]}")
    return out
