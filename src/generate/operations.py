# Generation operations: builder -> backend call -> classifier.
# Accepts any backend client exposing generate(prompt, sampling, safety).

from __future__ import annotations
import random
from typing import Any, Callable, Dict, Optional, Protocol, Sequence

from starlette.concurrency import run_in_threadpool

from src.logging_config import get_logger
from .classifier import classify, failure_prefix
from .prompts import (
    SAFETY_SETTINGS,
    build_comments_prompt,
    build_elaboration_prompt,
    build_post_content_prompt,
    build_reply_prompt,
)
from .types import (
    Err,
    ErrorKind,
    Expect,
    GenerationError,
    GenerationOutcome,
    InvalidInputError,
    PromptSpec,
    RawGenerationResult,
    SafetySetting,
    SamplingConfig,
)

logger = get_logger(__name__)

FAULT_MESSAGE_CHARS = 100


class BackendClient(Protocol):
    def generate(
        self, prompt: str, sampling: SamplingConfig, safety: Sequence[SafetySetting]
    ) -> Optional[RawGenerationResult]:
        ...


class GenerationOperation:
    def __init__(
        self,
        name: str,
        client: BackendClient,
        builder: Callable[..., PromptSpec],
        expect: Expect,
        subject: str = "response",
        unfence: bool = False,
    ):
        self.name = name
        self.client = client
        self.builder = builder
        self.expect = expect
        self.subject = subject
        self.unfence = unfence

    async def run(self, *args: Any, **kwargs: Any) -> GenerationOutcome:
        """Main entry point. Never raises for input or backend faults."""
        try:
            spec = self.builder(*args, **kwargs)
        except InvalidInputError as e:
            return Err(GenerationError(ErrorKind.INVALID_INPUT, str(e)))

        logger.info(
            "generate op=%s temp=%s max_tokens=%s",
            self.name, spec.sampling.temperature, spec.sampling.max_output_tokens,
        )
        try:
            raw = await run_in_threadpool(self.client.generate, spec.prompt, spec.sampling, SAFETY_SETTINGS)
        except Exception as e:
            logger.exception("backend call failed op=%s", self.name)
            detail = str(e)[:FAULT_MESSAGE_CHARS] or "Unknown error"
            return Err(GenerationError(ErrorKind.BACKEND_UNAVAILABLE, f"{failure_prefix(self.subject)}: {detail}"))

        outcome = classify(raw, self.expect, subject=self.subject, unfence=self.unfence)
        if isinstance(outcome, Err):
            logger.warning("op=%s outcome=%s: %s", self.name, outcome.error.kind.value, outcome.error.message)
        return outcome


def build_operations(client: BackendClient, rng: Optional[random.Random] = None) -> Dict[str, GenerationOperation]:
    """The four operations keyed by operation id."""

    def comments(post_context: Any) -> PromptSpec:
        return build_comments_prompt(post_context, rng=rng)

    return {
        "comments": GenerationOperation("comments", client, comments, "string-array"),
        "post_content": GenerationOperation("post_content", client, build_post_content_prompt, "text"),
        "elaboration": GenerationOperation("elaboration", client, build_elaboration_prompt, "text"),
        "reply": GenerationOperation("reply", client, build_reply_prompt, "text", subject="reply", unfence=True),
    }
