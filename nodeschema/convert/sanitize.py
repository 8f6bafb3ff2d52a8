# nodeschema/convert/sanitize.py
import re
from typing import Any

FALLBACK_NAME = "unknown"

_FORBIDDEN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")
_REPEATED_SEP = re.compile(r"_{2,}")
_EDGE_SEP = re.compile(r"^_+|_+$")


def safe_name(value: Any) -> str:
    """
    Map a display string to an identifier usable as a file name component.
    Never raises and never returns an empty string.
    """
    text = str(value) if value else FALLBACK_NAME
    text = _FORBIDDEN.sub("", text)
    text = _WHITESPACE.sub("_", text)
    text = _REPEATED_SEP.sub("_", text)
    text = _EDGE_SEP.sub("", text).strip()
    return text or FALLBACK_NAME
