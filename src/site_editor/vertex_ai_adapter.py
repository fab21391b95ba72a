from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

import vertexai
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .errors import GenerationFailure

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence from a model response."""
    return _FENCE.sub("", text.strip())


class VertexAIAdapter:
    """Gemini on Vertex AI, used in JSON mode by the content generator."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-2.5-flash",
    ) -> None:
        self.project_id = project_id
        self.location = location
        self.model_name = model_name

        vertexai.init(project=project_id, location=location)
        self.model = GenerativeModel(model_name)

    def generate_json(
        self,
        prompt: str,
        *,
        response_schema: Mapping[str, Any] | None = None,
        temperature: float = 0.7,
        max_output_tokens: int = 8192,
    ) -> Any:
        """Run ``prompt`` and parse the response as JSON.

        Args:
            prompt: Input prompt
            response_schema: Optional OpenAPI-style schema the response must follow
            temperature: Sampling temperature
            max_output_tokens: Maximum output tokens

        Raises:
            GenerationFailure: the response is not valid JSON
        """
        generation_config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json",
            response_schema=dict(response_schema) if response_schema else None,
        )
        response = self.model.generate_content(prompt, generation_config=generation_config)
        text = strip_code_fence(response.text)

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "temperature": temperature,
                "input_length": len(prompt),
                "output_length": len(text),
            },
        )

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse JSON response", extra={"response": text[:500]})
            raise GenerationFailure(f"Invalid JSON response: {exc}") from exc


__all__ = ["VertexAIAdapter", "strip_code_fence"]
