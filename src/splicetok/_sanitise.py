"""
Utilities for rendering token text in logs and reprs.
"""

import unicodedata


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_value(s: str, limit: int | None = 40) -> str:
    """
    Escape control characters and shorten long text for display.

    Text longer than ``limit`` characters is cut and suffixed with an ellipsis.
    ``None`` keeps the full text.
    """
    if limit is not None and len(s) > limit:
        s = s[:limit] + "..."
    return _escape_ctrl_chars(s)
