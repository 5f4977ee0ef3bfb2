"""Storage path helpers for uploaded files."""

from __future__ import annotations

import re
import time
import unicodedata

_UNSAFE = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_file_name(name: str) -> str:
    """Strip accents and replace anything outside [A-Za-z0-9.-] with '_'."""
    decomposed = unicodedata.normalize("NFD", name)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _UNSAFE.sub("_", without_marks)


def timestamped_path(prefix: str, file_name: str, now_ms: int | None = None) -> str:
    """``<prefix>/<epoch millis>_<safe name>``."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix.rstrip('/')}/{stamp}_{sanitize_file_name(file_name)}"
