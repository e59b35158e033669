# Prompt builders, one per operation.
# Each validates its required argument before any prompt text is built
# and returns a PromptSpec with the operation's fixed sampling config.

from __future__ import annotations
import random
from typing import Any, Optional

from .types import InvalidInputError, PromptSpec, SafetySetting, SamplingConfig

TOP_P = 0.95

MIN_COMMENTS = 10
MAX_COMMENTS = 25
CONTEXT_PREVIEW_CHARS = 100

SAFETY_SETTINGS = (
    SafetySetting("HARM_CATEGORY_HARASSMENT", "BLOCK_MEDIUM_AND_ABOVE"),
    SafetySetting("HARM_CATEGORY_HATE_SPEECH", "BLOCK_MEDIUM_AND_ABOVE"),
    SafetySetting("HARM_CATEGORY_SEXUALLY_EXPLICIT", "BLOCK_MEDIUM_AND_ABOVE"),
    SafetySetting("HARM_CATEGORY_DANGEROUS_CONTENT", "BLOCK_MEDIUM_AND_ABOVE"),
)

COMMENTS_SAMPLING = SamplingConfig(temperature=0.9, top_p=TOP_P, max_output_tokens=2048)
POST_CONTENT_SAMPLING = SamplingConfig(temperature=0.7, top_p=TOP_P, max_output_tokens=512)
ELABORATION_SAMPLING = SamplingConfig(temperature=0.6, top_p=TOP_P, max_output_tokens=1024)
REPLY_SAMPLING = SamplingConfig(temperature=0.75, top_p=TOP_P, max_output_tokens=64)

PARAGRAPH_RULES = """\
The output should be plain text. Separate paragraphs with a single newline character (\\n). Do NOT use double newlines (\\n\\n) or any other escape sequences for newlines."""


def _require_text(value: Any, message: str) -> str:
    if not value or not isinstance(value, str) or not value.strip():
        raise InvalidInputError(message)
    return value


def build_comments_prompt(post_context: Any, rng: Optional[random.Random] = None) -> PromptSpec:
    post_context = _require_text(post_context, "Invalid context provided")
    count = (rng or random).randint(MIN_COMMENTS, MAX_COMMENTS)
    prompt = f"""Based on the following online post snippet: "{post_context}"
Generate exactly {count} **highly distinct and varied** comments reacting to the post. Ensure each comment offers a **unique perspective or angle** compared to the others. Comments should be short (10-25 words each), realistic, relevant, constructive, and creative.
Comments should aim to be **thought-provoking**, supportive, curious, **offer an insightful perspective,** or provide a brief related thought that **builds upon the post's idea**.
**Crucially, avoid repeating similar phrases or sentence structures across the comments.**
Do not use hashtags. Do not introduce yourself (e.g., "As an AI..."). Avoid generic questions unless they genuinely add significant value or insight.
Output ONLY a valid JSON array containing exactly {count} strings, where each string is one comment. Example format: ["Comment 1 text.", "Comment 2 text.", ..., "Comment {count} text."]"""
    return PromptSpec(prompt=prompt, sampling=COMMENTS_SAMPLING, meta={"count": count})


def build_post_content_prompt(theme: Any) -> PromptSpec:
    theme = _require_text(theme, "Invalid theme provided for post content generation")
    prompt = f"""Generate a community update post of about 250-350 characters, consisting of 2-3 paragraphs, expanding on the theme: "{theme}".
Focus on constructive engagement, community building, or upcoming initiatives.
{PARAGRAPH_RULES}
Do not include a title or any preambles like "Here's a post:". Just the post content."""
    return PromptSpec(prompt=prompt, sampling=POST_CONTENT_SAMPLING)


def build_elaboration_prompt(theme: Any, original_post_context: Optional[str] = "") -> PromptSpec:
    theme = _require_text(theme, "Invalid theme provided for elaboration")
    lines = [f'A community post was made with the theme: "{theme}".']
    if original_post_context:
        lines.append(f'The post started with: "{original_post_context[:CONTEXT_PREVIEW_CHARS]}...".')
    lines.append(
        "Please provide a detailed explanation or elaboration (2-3 substantial paragraphs, "
        "around 400-600 characters total) on this theme to help someone understand it better."
    )
    lines.append(
        "Focus on clarifying concepts, providing context, or offering different perspectives related to the theme."
    )
    lines.append(PARAGRAPH_RULES)
    lines.append('Do not include a title or any preambles like "Here\'s an elaboration:". Just the elaboration content.')
    return PromptSpec(prompt="\n".join(lines), sampling=ELABORATION_SAMPLING)


def build_reply_prompt(parent_comment_text: Any) -> PromptSpec:
    parent_comment_text = _require_text(
        parent_comment_text, "Invalid parent comment text provided for reply generation"
    )
    prompt = f"""Given the following comment from an online discussion:
"{parent_comment_text}"
Generate a short, relevant, and engaging reply to this comment (around 5-15 words).
The reply should be conversational and constructive.
Do not introduce yourself (e.g., "As an AI...").
Output ONLY the reply text as a single string. Do not use JSON, arrays, or any other formatting. Just the plain text of the reply."""
    return PromptSpec(prompt=prompt, sampling=REPLY_SAMPLING)
