# Typed dataclasses shared across the generation modules.
# Everything here is request-scoped: built per request, never shared.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

Expect = Literal["text", "string-array"]


@dataclass(frozen=True)
class SamplingConfig:
    """Generation parameters, fixed per operation."""
    temperature: float
    top_p: float
    max_output_tokens: int


@dataclass(frozen=True)
class SafetySetting:
    category: str
    threshold: str


@dataclass(frozen=True)
class PromptSpec:
    """What a prompt builder hands to the backend."""
    prompt: str
    sampling: SamplingConfig
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SafetyRating:
    category: str
    probability: str


@dataclass
class Candidate:
    """One proposed output from the backend."""
    text: Optional[str] = None
    safety_ratings: List[SafetyRating] = field(default_factory=list)


@dataclass
class RawGenerationResult:
    """Backend response envelope, reduced to the parts the classifier reads."""
    block_reason: Optional[str] = None
    candidates: List[Candidate] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RawGenerationResult":
        """Build from a Gemini generateContent JSON body."""
        feedback = data.get("promptFeedback") or {}
        candidates = []
        for c in (data.get("candidates") or [])[:1]:
            parts = (c.get("content") or {}).get("parts") or []
            text = parts[0].get("text") if parts and isinstance(parts[0], dict) else None
            ratings = [
                SafetyRating(category=str(r.get("category", "")), probability=str(r.get("probability", "")))
                for r in (c.get("safetyRatings") or [])
            ]
            candidates.append(Candidate(text=text, safety_ratings=ratings))
        return cls(block_reason=feedback.get("blockReason") or None, candidates=candidates)


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    SAFETY_BLOCKED = "safety_blocked"
    PROMPT_BLOCKED = "prompt_blocked"
    MALFORMED_OUTPUT = "malformed_output"
    BACKEND_UNAVAILABLE = "backend_unavailable"


@dataclass(frozen=True)
class GenerationError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Ok:
    value: Union[str, List[str]]


@dataclass(frozen=True)
class Err:
    error: GenerationError


GenerationOutcome = Union[Ok, Err]


class InvalidInputError(ValueError):
    """Raised by prompt builders when a required argument is unusable."""
