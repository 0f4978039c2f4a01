"""Gemini client for structured recipe generation and short text rewrites.

The google-genai client is synchronous, so calls run in a worker thread via
asyncio.to_thread. The caller owns the deadline; nothing here times out.
"""

import asyncio
import json
import re
from typing import Any, Optional

from google import genai
from google.genai import types

from src.utils.errors import GenerationFailure, safe_execute_sync
from src.utils.logger import logger


def parse_json_response(response_text: Optional[str]) -> Any:
    """Parse JSON from a model response, tolerating text around it.

    Tries multiple parsing strategies:
    1. Direct json.loads() on the full response
    2. Regex extraction of the outermost object or array

    Args:
        response_text: Raw response text (may include prose or code fences).

    Returns:
        Parsed JSON value, or None when nothing parseable was found.
    """
    if not response_text:
        return None

    def _parse_json_direct():
        return json.loads(response_text)

    def _parse_json_regex():
        json_match = re.search(r"(\{.*\}|\[.*\])", response_text, re.DOTALL)
        if json_match:
            return json.loads(json_match.group())
        return None

    parsed = safe_execute_sync(_parse_json_direct, "Direct JSON parse", log_level="debug", default_return=None)
    if parsed is None:
        parsed = safe_execute_sync(_parse_json_regex, "Regex JSON extraction", log_level="debug", default_return=None)
    return parsed


class GeminiClient:
    """Async facade over genai.Client.

    Args:
        api_key: Gemini API key.
        model: Model id for structured generation.
        query_model: Smaller model id for short rewrites.
    """

    def __init__(self, api_key: str, model: str, query_model: Optional[str] = None) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required")
        self.model = model
        self.query_model = query_model or model
        self._client = genai.Client(api_key=api_key)

    async def generate_json(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 2048,
    ) -> Any:
        """Single structured-generation call returning parsed JSON.

        Raises:
            GenerationFailure: If the call fails or returns nothing parseable.
        """
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            raise GenerationFailure(f"Gemini call failed: {e}") from e

        parsed = parse_json_response(getattr(response, "text", None))
        if parsed is None:
            logger.warning("Failed to parse JSON from Gemini response")
            raise GenerationFailure("Gemini returned no parseable JSON")
        return parsed

    async def generate_text(self, prompt: str, temperature: float = 0.3, max_output_tokens: int = 100) -> str:
        """Short free-text completion on the query model.

        Raises:
            GenerationFailure: If the call fails or returns empty text.
        """
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.query_model,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=temperature, max_output_tokens=max_output_tokens),
            )
        except Exception as e:
            raise GenerationFailure(f"Gemini call failed: {e}") from e

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise GenerationFailure("Gemini returned empty text")
        return text
