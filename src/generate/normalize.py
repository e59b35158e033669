# Canonical paragraph format for free-text model output:
# one real newline between paragraphs, no surrounding whitespace.

from __future__ import annotations
import re
from typing import Optional

_LITERAL_NEWLINE = re.compile(r"\\n")
_NEWLINE_RUN = re.compile(r"\n+")


def normalize(raw: Optional[str]) -> str:
    """
    Turn literal "\\n" escapes into newlines, collapse newline runs to one,
    and strip. Idempotent; returns "" for None or empty input.
    """
    if not raw:
        return ""
    text = raw if isinstance(raw, str) else str(raw)
    text = _LITERAL_NEWLINE.sub("\n", text)
    text = _NEWLINE_RUN.sub("\n", text)
    return text.strip()
