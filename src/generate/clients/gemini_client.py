# Client for the Gemini generateContent REST API.
# Exposes generate(prompt, sampling, safety) like every backend client.

import requests
from typing import Any, Dict, Optional, Sequence

from src.logging_config import get_logger
from ..types import RawGenerationResult, SafetySetting, SamplingConfig

logger = get_logger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class BackendError(RuntimeError):
    """Transport or HTTP-level failure talking to the backend."""


def _sanitize_api_key(raw: str) -> str:
    return (raw or "").strip().strip(" \"'`")


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 120.0,
    ):
        self.api_key = _sanitize_api_key(api_key)
        if not self.api_key:
            raise ValueError("Gemini API key is empty")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _payload(self, prompt: str, sampling: SamplingConfig, safety: Sequence[SafetySetting]) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": sampling.temperature,
                "topP": sampling.top_p,
                "maxOutputTokens": sampling.max_output_tokens,
            },
            "safetySettings": [{"category": s.category, "threshold": s.threshold} for s in safety],
        }

    def generate(
        self, prompt: str, sampling: SamplingConfig, safety: Sequence[SafetySetting]
    ) -> Optional[RawGenerationResult]:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        try:
            resp = requests.post(url, headers=headers, json=self._payload(prompt, sampling, safety), timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendError(f"request failed: {e}") from e

        if resp.status_code != 200:
            raise BackendError(f"http {resp.status_code}: {resp.text[:800]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise BackendError("invalid JSON from backend") from e
        if not data:
            return None
        logger.debug("gemini usage=%s", data.get("usageMetadata"))
        return RawGenerationResult.from_api(data)
