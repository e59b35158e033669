# A fake backend client for local dev and tests: no API calls.
# Replays queued results (or raises queued exceptions) and records each call.

from typing import Any, Dict, List, Optional, Sequence, Union

from ..types import Candidate, RawGenerationResult, SafetyRating, SafetySetting, SamplingConfig

Canned = Union[RawGenerationResult, BaseException, None]


def text_result(text: Optional[str], ratings: Optional[Dict[str, str]] = None) -> RawGenerationResult:
    """Single-candidate result; ratings maps category -> probability."""
    safety = [SafetyRating(category=k, probability=v) for k, v in (ratings or {}).items()]
    return RawGenerationResult(candidates=[Candidate(text=text, safety_ratings=safety)])


def blocked_result(reason: str, text: Optional[str] = None) -> RawGenerationResult:
    result = text_result(text) if text is not None else RawGenerationResult()
    result.block_reason = reason
    return result


class CannedClient:
    def __init__(self, *results: Canned):
        self.model = "canned"
        self._results: List[Canned] = list(results)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *results: Canned) -> None:
        self._results.extend(results)

    def generate(
        self, prompt: str, sampling: SamplingConfig, safety: Sequence[SafetySetting]
    ) -> Optional[RawGenerationResult]:
        self.calls.append({"prompt": prompt, "sampling": sampling, "safety": tuple(safety)})
        if not self._results:
            raise RuntimeError("CannedClient has no result queued")
        nxt = self._results.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt
