"""Ollama-backed intent compiler.

Translates a free-text "vibe" request into a structured IntentObject by
asking a local Ollama model for a JSON answer.
"""

import json
import logging
from typing import Protocol

import requests
from pydantic import ValidationError

from overture.config import OllamaConfig
from overture.exceptions import IntentAnalysisError
from overture.models.domain import IntentObject

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the Overture Music Intent Engine. Your goal is to translate "
    "abstract human desires into a structured JSON 'IntentObject'.\n\n"
    "Rules:\n"
    "Reasoning: Use your internal logic to map stylistic requests "
    "(e.g., 'no auto-tune') to technical constraints "
    "(e.g., 'acousticness.min: 0.8').\n"
    "Entities: Extract specific artists or genres mentioned.\n"
    "Output: Return ONLY a valid JSON object. No conversational text.\n"
    "Vibe Scaling: Energy and Valence are 0.0 to 1.0.\n"
    "Example Mapping: 'I want a sad acoustic set' -> "
    "{ 'vibe_constraints': { 'valence': {'target': 0.2}, "
    "'acousticness': {'min': 0.7} } }"
)


class IntentCompilerProtocol(Protocol):
    """Protocol for free-text intent extraction."""

    def analyze_intent(self, message: str) -> IntentObject:
        """Extract a structured intent from a user message."""
        ...


class OllamaIntentCompiler:
    """Intent compiler using the Ollama chat API.

    Implements IntentCompilerProtocol.
    """

    def __init__(
        self,
        config: OllamaConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or OllamaConfig()
        self._base_url = self._config.base_url.rstrip("/") or OllamaConfig.base_url
        self._session = session or requests.Session()

    def analyze_intent(self, message: str) -> IntentObject:
        """Extract an IntentObject from a free-text message.

        Args:
            message: User request, e.g. "chill acoustic Willie Nelson".

        Returns:
            Parsed intent. Unknown keys in the model output are ignored.

        Raises:
            IntentAnalysisError: On transport failure, non-2xx status, an
                error payload, empty content or unparsable JSON.
        """
        payload = {
            "model": self._config.model,
            "stream": False,
            "format": "json",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
        }

        logger.debug("Analyzing intent with %s", self._config.model)
        try:
            response = self._session.post(
                f"{self._base_url}/api/chat",
                json=payload,
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            raise IntentAnalysisError(f"request failed: {e}", "chat") from e

        if not 200 <= response.status_code < 300:
            raise IntentAnalysisError(
                f"unexpected status {response.status_code}", "chat"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise IntentAnalysisError(f"decode response: {e}", "chat") from e
        if not isinstance(data, dict):
            raise IntentAnalysisError("unexpected response shape", "chat")
        if data.get("error"):
            raise IntentAnalysisError(str(data["error"]), "chat")

        content = (data.get("message") or {}).get("content") or ""
        if not content.strip():
            raise IntentAnalysisError("empty response", "chat")

        try:
            intent = IntentObject.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            raise IntentAnalysisError(f"decode intent: {e}", "chat") from e

        logger.info(
            "Extracted intent '%s' with %d artist(s)",
            intent.intent_type,
            len(intent.entities.artists),
        )
        return intent
