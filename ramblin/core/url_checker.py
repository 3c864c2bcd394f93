"""
URL Security Check
===================
Assesses whether a link is safe to open:

1. **Validation**: only absolute http(s) URLs with a host are accepted.
   Localhost and private or link-local IP literals are refused before
   any request is made.
2. **Redirect resolution**: follows redirects (URL shorteners such as
   bit.ly) to the final destination. Resolution failures are not fatal;
   the original URL is assessed instead.
3. **LLM risk assessment**: the *resolved* URL is scored 1-100 and
   classified low / medium / high with reasons, threats and
   recommendations.
"""

import ipaddress
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

import requests

from ramblin import config
from ramblin.core import prompts
from ramblin.core.coercion import SchemaTag
from ramblin.core.generation import generate
from ramblin.core.result import Err, NormalizedResult, Ok, invalid_input
from ramblin.llm.llm_client import GenerationClient
from ramblin.schemas import UrlCheckResponse

logger = logging.getLogger(__name__)

# Some shorteners refuse requests without a browser user agent
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass(frozen=True)
class ResolvedUrl:
    url: str
    redirect_count: int = 0


def is_valid_url(url: str) -> bool:
    """True for absolute http/https URLs that name a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_internal_host(url: str) -> bool:
    """True when the host is localhost or a private, loopback, link-local or reserved IP literal."""
    host = (urlparse(url).hostname or "").rstrip(".")
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
        or address.is_unspecified
    )


def resolve_redirects(url: str, timeout: float | None = None) -> ResolvedUrl:
    """
    Follow HTTP redirects to the final URL.

    Args:
        url: Candidate URL, possibly shortened
        timeout: Seconds to wait, defaults to REDIRECT_TIMEOUT

    Returns:
        ResolvedUrl with the final URL and number of redirects followed,
        or the original URL with zero redirects if resolution fails
    """
    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            allow_redirects=True,
            timeout=timeout or config.REDIRECT_TIMEOUT,
            stream=True,
        )
    except requests.exceptions.RequestException as e:
        logger.warning(f"Redirect resolution failed for {url}: {e}")
        return ResolvedUrl(url=url)

    try:
        return ResolvedUrl(url=response.url or url, redirect_count=len(response.history))
    finally:
        response.close()


def check_url(
    url: str,
    client: GenerationClient,
    resolver=resolve_redirects,
) -> NormalizedResult[UrlCheckResponse]:
    """
    Validate, resolve and risk-score a URL.

    Args:
        url: URL submitted by the user
        client: Shared generation client
        resolver: Redirect resolver, swappable in tests

    Returns:
        Ok(UrlCheckResponse) or Err
    """
    url = (url or "").strip()
    if not url:
        return invalid_input("No URL provided")
    if not is_valid_url(url):
        return invalid_input("Invalid URL format. Please provide a valid HTTP or HTTPS URL.")
    if is_internal_host(url):
        logger.warning(f"Refusing to fetch internal host: {url}")
        return invalid_input("URLs pointing to private or local network addresses cannot be checked.")

    resolved = resolver(url)
    if resolved.redirect_count:
        logger.info(f"URL resolved through {resolved.redirect_count} redirect(s)")

    payload = f"Analyze this URL for security: {resolved.url}"
    if resolved.redirect_count:
        payload += f"\nThe link was reached through {resolved.redirect_count} redirect(s)."

    result = generate(client, prompts.URL_RISK, payload, SchemaTag.URL_RISK)
    if isinstance(result, Err):
        return result

    assessment = result.value
    return Ok(UrlCheckResponse(
        originalUrl=url,
        resolvedUrl=resolved.url,
        redirectCount=resolved.redirect_count,
        score=assessment.score,
        riskLevel=assessment.riskLevel,
        reasons=assessment.reasons,
        threats=assessment.threats,
        recommendations=assessment.recommendations,
        isSafe=assessment.isSafe,
    ))
