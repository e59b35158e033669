# Classify a raw backend result into an outcome.
# Order matters: block reason, then safety ratings, then text extraction.
# A flagged candidate is rejected even when its text would parse.

from __future__ import annotations
import json
import re
from typing import Optional

from .normalize import normalize
from .types import (
    Err,
    ErrorKind,
    Expect,
    GenerationError,
    GenerationOutcome,
    Ok,
    RawGenerationResult,
)

# Anything outside this set blocks, including unknown or unspecified labels.
SAFE_PROBABILITIES = frozenset({"NEGLIGIBLE", "LOW"})

_JSON_FENCE = re.compile(r"^\s*```[\w-]*\s*([\s\S]*?)\s*```\s*$")
# A tag only counts as one when the opening fence line ends right after it.
_TEXT_FENCE = re.compile(r"^\s*```(?:[\w-]*[ \t]*\n)?\s*([\s\S]*?)\s*```\s*$")


def _err(kind: ErrorKind, message: str) -> Err:
    return Err(GenerationError(kind=kind, message=message))


def failure_prefix(subject: str = "response") -> str:
    if subject == "response":
        return "AI generation failed"
    return f"AI {subject} generation failed"


def strip_fence(text: str, pattern: re.Pattern = _JSON_FENCE) -> str:
    """Return the interior of a surrounding code fence, or the text itself."""
    stripped = text.strip()
    m = pattern.match(stripped)
    if m and m.group(1):
        return m.group(1).strip()
    return stripped


def classify(
    result: Optional[RawGenerationResult],
    expect: Expect,
    subject: str = "response",
    unfence: bool = False,
) -> GenerationOutcome:
    """unfence: strip a surrounding code fence from text output before normalizing."""
    if result is None:
        return _err(ErrorKind.BACKEND_UNAVAILABLE, f"{failure_prefix(subject)}: No response received.")

    if result.block_reason:
        return _err(ErrorKind.PROMPT_BLOCKED, f"AI {subject} blocked: {result.block_reason}")

    candidate = result.candidates[0] if result.candidates else None
    if candidate is not None and any(
        (r.probability or "").upper() not in SAFE_PROBABILITIES for r in candidate.safety_ratings
    ):
        return _err(ErrorKind.SAFETY_BLOCKED, f"AI {subject} blocked by safety filter")

    if candidate is None or not candidate.text:
        return _err(ErrorKind.MALFORMED_OUTPUT, f"AI {subject} format unexpected (no text part).")

    if expect == "text":
        text = strip_fence(candidate.text, _TEXT_FENCE) if unfence else candidate.text
        return Ok(normalize(text))

    try:
        parsed = json.loads(strip_fence(candidate.text))
    except (ValueError, RecursionError):
        return _err(ErrorKind.MALFORMED_OUTPUT, f"AI {subject} format incorrect (failed to parse JSON).")
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        return _err(ErrorKind.MALFORMED_OUTPUT, f"AI {subject} format incorrect (not an array of strings).")
    return Ok(parsed)
