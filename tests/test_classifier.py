import json

from src.generate.classifier import classify, strip_fence
from src.generate.clients.canned_client import blocked_result, text_result
from src.generate.types import Candidate, Err, ErrorKind, Ok, RawGenerationResult

COMMENTS = ["Great idea for the neighbourhood.", "Can't wait to bring the kids along."]


def _kind(outcome):
    assert isinstance(outcome, Err)
    return outcome.error.kind


def test_absent_result_is_backend_unavailable():
    out = classify(None, "text")
    assert _kind(out) == ErrorKind.BACKEND_UNAVAILABLE
    assert out.error.message == "AI generation failed: No response received."


def test_block_reason_wins_over_candidate_content():
    out = classify(blocked_result("SAFETY", text=json.dumps(COMMENTS)), "string-array")
    assert _kind(out) == ErrorKind.PROMPT_BLOCKED
    assert out.error.message == "AI response blocked: SAFETY"


def test_block_reason_wins_over_flagged_candidate():
    result = text_result("hi", ratings={"HARM_CATEGORY_HARASSMENT": "HIGH"})
    result.block_reason = "OTHER"
    assert _kind(classify(result, "text")) == ErrorKind.PROMPT_BLOCKED


def test_high_rating_blocks_even_with_text():
    result = text_result(json.dumps(COMMENTS), ratings={"HARM_CATEGORY_HATE_SPEECH": "HIGH"})
    out = classify(result, "string-array")
    assert _kind(out) == ErrorKind.SAFETY_BLOCKED
    assert out.error.message == "AI response blocked by safety filter"


def test_unknown_probability_label_blocks():
    result = text_result("ok", ratings={"HARM_CATEGORY_HARASSMENT": "HARM_PROBABILITY_UNSPECIFIED"})
    assert _kind(classify(result, "text")) == ErrorKind.SAFETY_BLOCKED


def test_negligible_and_low_pass():
    result = text_result(
        "fine",
        ratings={"HARM_CATEGORY_HARASSMENT": "NEGLIGIBLE", "HARM_CATEGORY_HATE_SPEECH": "LOW"},
    )
    assert classify(result, "text") == Ok("fine")


def test_missing_text_is_malformed():
    for result in (RawGenerationResult(), RawGenerationResult(candidates=[Candidate(text=None)])):
        out = classify(result, "text")
        assert _kind(out) == ErrorKind.MALFORMED_OUTPUT
        assert "no text part" in out.error.message


def test_subject_label_in_messages():
    out = classify(text_result(None), "text", subject="reply")
    assert out.error.message == "AI reply format unexpected (no text part)."


def test_text_is_normalized():
    out = classify(text_result("Para one.\\n\\nPara two.\n\n"), "text")
    assert out == Ok("Para one.\nPara two.")


def test_text_fence_is_stripped_when_unfencing():
    out = classify(text_result("```text\nSounds great!\n```"), "text", unfence=True)
    assert out == Ok("Sounds great!")


def test_unfence_drops_any_language_tag():
    out = classify(text_result("```python\nSee you there!\n```"), "text", unfence=True)
    assert out == Ok("See you there!")


def test_unfence_keeps_first_word_of_single_line_fence():
    out = classify(text_result("```Sounds great!```"), "text", unfence=True)
    assert out == Ok("Sounds great!")


def test_text_fence_kept_by_default():
    out = classify(text_result("```\nPara A\n\nPara B\n```"), "text")
    assert out == Ok("```\nPara A\nPara B\n```")


def test_deeply_nested_array_is_malformed():
    out = classify(text_result("[" * 200000 + "]" * 200000), "string-array")
    assert _kind(out) == ErrorKind.MALFORMED_OUTPUT


def test_fenced_array_with_language_tag_matches_bare_array():
    bare = classify(text_result(json.dumps(COMMENTS)), "string-array")
    fenced = classify(text_result("```json\n" + json.dumps(COMMENTS) + "\n```"), "string-array")
    assert bare == fenced == Ok(COMMENTS)


def test_fence_without_tag():
    out = classify(text_result("```\n" + json.dumps(COMMENTS) + "\n```"), "string-array")
    assert out == Ok(COMMENTS)


def test_unparsable_array_is_malformed():
    out = classify(text_result("here are your comments: [oops"), "string-array")
    assert _kind(out) == ErrorKind.MALFORMED_OUTPUT
    assert "failed to parse JSON" in out.error.message


def test_array_of_non_strings_is_malformed():
    for payload in ('["a", 2]', '{"comments": ["a"]}', '"just a string"'):
        out = classify(text_result(payload), "string-array")
        assert _kind(out) == ErrorKind.MALFORMED_OUTPUT
        assert "not an array of strings" in out.error.message


def test_strip_fence_leaves_plain_text():
    assert strip_fence("  [1, 2]  ") == "[1, 2]"
