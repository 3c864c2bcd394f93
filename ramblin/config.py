"""
Configuration Module
=====================
Loads environment variables from .env file for:
- OPENAI_API_KEY: Bearer token for the generation API
- GENERATION_API_URL / GENERATION_MODEL: OpenAI-compatible endpoint and model
- GENERATION_TIMEOUT: Client-side timeout in seconds (unset = wait for upstream)
- STRUCTURED_OUTPUT: Ask JSON call sites for response_format=json_object
- REDIRECT_TIMEOUT: Timeout for the URL redirect resolver
- SERVICE_API_KEY: Optional shared secret for incoming requests
- MAX_RECOMMENDED_COMPANIES: How many merchants get investment opinions

A missing OPENAI_API_KEY does not stop the app from starting: PDF
extraction still works, and every generation call reports the service
as unavailable instead.
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


def _optional_float(name: str) -> float | None:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
GENERATION_API_URL: str = os.getenv(
    "GENERATION_API_URL", "https://api.openai.com/v1/chat/completions"
)
GENERATION_MODEL: str = os.getenv("GENERATION_MODEL", "gpt-4o-mini-2024-07-18")
GENERATION_TIMEOUT: float | None = _optional_float("GENERATION_TIMEOUT")
STRUCTURED_OUTPUT: bool = os.getenv("STRUCTURED_OUTPUT", "true").strip().lower() in TRUTHY

REDIRECT_TIMEOUT: float = float(os.getenv("REDIRECT_TIMEOUT", "10"))

SERVICE_API_KEY: str = os.getenv("SERVICE_API_KEY", "")

MAX_RECOMMENDED_COMPANIES: int = int(os.getenv("MAX_RECOMMENDED_COMPANIES", "3"))

if not OPENAI_API_KEY:
    logger.warning("OPENAI_API_KEY not set in environment, generation calls will fail")
