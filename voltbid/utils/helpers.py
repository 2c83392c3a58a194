import re
from typing import Any

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9_\- ]")


def safe_filename(name: Any, fallback: str = "Project") -> str:
    """Strip everything but letters, digits, '_', '-' and spaces."""
    cleaned = _UNSAFE_FILENAME_RE.sub("", str(name or "")).strip()
    return cleaned or fallback
