import pytest
import requests

from src.generate.clients import gemini_client
from src.generate.clients.gemini_client import BackendError, GeminiClient
from src.generate.prompts import REPLY_SAMPLING, SAFETY_SETTINGS


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


def _patch_post(monkeypatch, response=None, exc=None):
    seen = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        seen.update(url=url, headers=headers, json=json, timeout=timeout)
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(gemini_client.requests, "post", fake_post)
    return seen


def test_payload_and_headers(monkeypatch):
    data = {
        "candidates": [{
            "content": {"parts": [{"text": "Nice one!"}]},
            "safetyRatings": [{"category": "HARM_CATEGORY_HARASSMENT", "probability": "NEGLIGIBLE"}],
            "finishReason": "STOP",
        }],
    }
    seen = _patch_post(monkeypatch, FakeResponse(data=data))
    client = GeminiClient(api_key=' "secret" ', model="gemini-2.0-flash", timeout=5)
    result = client.generate("prompt text", REPLY_SAMPLING, SAFETY_SETTINGS)

    assert seen["url"].endswith("/models/gemini-2.0-flash:generateContent")
    assert seen["headers"]["x-goog-api-key"] == "secret"
    assert seen["timeout"] == 5
    body = seen["json"]
    assert body["contents"] == [{"parts": [{"text": "prompt text"}]}]
    assert body["generationConfig"] == {"temperature": 0.75, "topP": 0.95, "maxOutputTokens": 64}
    assert len(body["safetySettings"]) == 4
    assert body["safetySettings"][0] == {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"}

    assert result.block_reason is None
    assert result.candidates[0].text == "Nice one!"
    assert result.candidates[0].safety_ratings[0].probability == "NEGLIGIBLE"


def test_prompt_feedback_block_reason(monkeypatch):
    _patch_post(monkeypatch, FakeResponse(data={"promptFeedback": {"blockReason": "SAFETY"}}))
    result = GeminiClient(api_key="k").generate("p", REPLY_SAMPLING, SAFETY_SETTINGS)
    assert result.block_reason == "SAFETY"
    assert result.candidates == []


def test_empty_body_is_no_response(monkeypatch):
    _patch_post(monkeypatch, FakeResponse(data={}))
    assert GeminiClient(api_key="k").generate("p", REPLY_SAMPLING, SAFETY_SETTINGS) is None


def test_http_error_raises(monkeypatch):
    _patch_post(monkeypatch, FakeResponse(status_code=429, text="Resource has been exhausted"))
    with pytest.raises(BackendError, match="http 429"):
        GeminiClient(api_key="k").generate("p", REPLY_SAMPLING, SAFETY_SETTINGS)


def test_transport_error_raises(monkeypatch):
    _patch_post(monkeypatch, exc=requests.ConnectionError("connection refused"))
    with pytest.raises(BackendError, match="request failed"):
        GeminiClient(api_key="k").generate("p", REPLY_SAMPLING, SAFETY_SETTINGS)


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        GeminiClient(api_key="  ")
