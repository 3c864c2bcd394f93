"""
Structured Generation
======================
The one path every call site takes:

    upstream call → clean → extract JSON → coerce to domain shape

Any stage may short-circuit with an Err, which is returned unchanged so
the caller sees the first failure's kind.
"""

import logging
from typing import Iterable

from pydantic import BaseModel

from ramblin.core.coercion import SchemaTag, coerce
from ramblin.core.prompts import CallSite
from ramblin.core.response_parser import clean, extract
from ramblin.core.result import Err, ErrorKind, NormalizedResult
from ramblin.llm.llm_client import GenerationClient, GenerationRequest

logger = logging.getLogger(__name__)


def generate(
    client: GenerationClient,
    site: CallSite,
    payload: str,
    shape: SchemaTag,
    history: Iterable[dict[str, str]] = (),
) -> NormalizedResult[BaseModel]:
    """
    Run one call site end to end.

    Args:
        client: Shared generation client
        site: Prompt and sampling settings for this call site
        payload: User content sent as the final user message
        shape: Domain shape the response is coerced into
        history: Earlier chat turns, oldest first

    Returns:
        Ok(coerced model) or the first Err produced along the way
    """
    request = GenerationRequest(
        instructions=site.instructions,
        payload=payload,
        temperature=site.temperature,
        max_tokens=site.max_tokens,
        json_output=site.json_output,
        history=tuple(history),
        label=site.label,
    )

    raw = client.call(request)
    if isinstance(raw, Err):
        return raw

    cleaned = clean(raw.value)
    if not cleaned:
        logger.warning(f"[{site.label}] response was empty after cleaning")
        return Err(ErrorKind.EMPTY_RESPONSE, "Response contained only fence markers or whitespace")

    if site.json_output:
        parsed = extract(cleaned)
        if isinstance(parsed, Err):
            logger.warning(f"[{site.label}] {parsed.kind.value}: {parsed.message}")
            return parsed
        value = parsed.value
    else:
        value = cleaned

    return coerce(value, shape)
