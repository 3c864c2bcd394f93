"""LLM Client Module: Upstream Call Wrapper
========================================
Single-provider client for an OpenAI-compatible chat-completions API.

One GenerationClient is built from ramblin.config at import time and
shared read-only by every request. Each call issues exactly one HTTP
request and classifies the outcome:

    transport / auth / config failure  → Err(UPSTREAM_UNAVAILABLE)
    call succeeded, no usable content  → Err(EMPTY_RESPONSE)
    call succeeded with content        → Ok(content)

Content is returned unvalidated; cleaning, JSON extraction and schema
coercion happen in ramblin.core. There are no retries and no fallback
providers: a failed call is reported straight back to the caller.

Request and response bodies are never logged, only sizes and statuses.
"""

import logging
from dataclasses import dataclass, field

import requests

from ramblin import config
from ramblin.core.result import Err, ErrorKind, NormalizedResult, Ok

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """
    One call to the generation API.

    Args:
        instructions: System prompt, including the expected output schema
        payload: User content to analyze
        temperature: Sampling temperature for this call site
        max_tokens: Token ceiling sized to the expected response
        json_output: Whether the call site expects a JSON object back
        history: Earlier chat turns placed between system and user message
        label: Call-site name used in log lines
    """
    instructions: str
    payload: str
    temperature: float = 0.3
    max_tokens: int = 500
    json_output: bool = True
    history: tuple[dict[str, str], ...] = field(default_factory=tuple)
    label: str = "generation"

    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.instructions},
            *[dict(m) for m in self.history],
            {"role": "user", "content": self.payload},
        ]


@dataclass(frozen=True)
class GenerationClient:
    api_url: str
    api_key: str
    model: str
    timeout: float | None = None
    structured_output: bool = True

    @classmethod
    def from_config(cls) -> "GenerationClient":
        return cls(
            api_url=config.GENERATION_API_URL,
            api_key=config.OPENAI_API_KEY,
            model=config.GENERATION_MODEL,
            timeout=config.GENERATION_TIMEOUT,
            structured_output=config.STRUCTURED_OUTPUT,
        )

    def build_payload(self, request: GenerationRequest) -> dict:
        payload = {
            "model": self.model,
            "messages": request.messages(),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_output and self.structured_output:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def call(self, request: GenerationRequest) -> NormalizedResult[str]:
        """
        Issue one chat-completions request.

        Args:
            request: Prompt, payload and sampling settings for this call site

        Returns:
            Ok(raw content) or Err(UPSTREAM_UNAVAILABLE / EMPTY_RESPONSE)
        """
        if not self.api_key:
            logger.error(f"[{request.label}] generation API key is not configured")
            return Err(ErrorKind.UPSTREAM_UNAVAILABLE, "Generation API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        try:
            response = requests.post(
                self.api_url,
                headers=headers,
                json=self.build_payload(request),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"[{request.label}] {self.model} timeout ({self.timeout}s)")
            return Err(ErrorKind.UPSTREAM_UNAVAILABLE, f"{self.model} timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"[{request.label}] {self.model} request failed: {e}")
            return Err(ErrorKind.UPSTREAM_UNAVAILABLE, f"{self.model} request failed: {e}")

        if response.status_code >= 400:
            logger.warning(f"[{request.label}] {self.model} returned HTTP {response.status_code}")
            return Err(
                ErrorKind.UPSTREAM_UNAVAILABLE,
                f"{self.model} returned HTTP {response.status_code}",
            )

        try:
            body = response.json()
        except ValueError:
            logger.error(f"[{request.label}] {self.model} returned a non-JSON envelope")
            return Err(ErrorKind.UPSTREAM_UNAVAILABLE, f"{self.model} returned a non-JSON envelope")

        content = _first_message_content(body)
        if content is None or not content.strip():
            logger.warning(f"[{request.label}] {self.model} returned empty content")
            return Err(ErrorKind.EMPTY_RESPONSE, f"{self.model} returned no content")

        logger.info(f"[{request.label}] response from {self.model}, {len(content)} chars")
        return Ok(content)


def _first_message_content(body) -> str | None:
    """Pull choices[0].message.content out of the envelope, tolerating missing pieces."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices") or []
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


client = GenerationClient.from_config()


def get_client() -> GenerationClient:
    """FastAPI dependency returning the shared process-wide client."""
    return client
