from __future__ import annotations
import logging
import httpx
from dataclasses import dataclass, field
from app.core.config import settings
from app.core.errors import LLMInvocationError, LLMTimeoutError

log = logging.getLogger(__name__)

@dataclass
class GeminiClient:
    api_key: str | None = settings.gemini_api_key
    model: str = settings.gemini_model
    api_base: str = settings.gemini_api_base
    timeout: float = settings.llm_timeout_seconds
    generation_config: dict = field(default_factory=lambda: {
        "temperature": settings.llm_temperature,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": settings.llm_max_output_tokens,
    })

    def _headers(self) -> dict:
        return {
            "x-goog-api-key": self.api_key or "",
            "Content-Type": "application/json",
        }

    async def generate_code(self, prompt: str) -> str:
        if not self.api_key:
            raise LLMInvocationError("GEMINI_API_KEY is not configured")

        url = f"{self.api_base}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config,
        }
        log.debug("Sending prompt to Gemini (%d chars)", len(prompt))
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(url, headers=self._headers(), json=payload)
                r.raise_for_status()
                data = r.json()
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(f"Gemini request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise LLMInvocationError(
                f"Gemini returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise LLMInvocationError(f"Gemini request failed: {e}") from e

        text = extract_text(data)
        if not text.strip():
            raise LLMInvocationError("Empty response from Gemini API")
        return text


def extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate of a generateContent response."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
