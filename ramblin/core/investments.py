"""
Investment Opinions
====================
Buy / hold / sell opinions for companies found among a user's merchants.
Only the first few merchants are analyzed to keep the response short.
"""

import json
import logging

from ramblin import config
from ramblin.core import prompts
from ramblin.core.coercion import SchemaTag
from ramblin.core.generation import generate
from ramblin.core.result import Err, NormalizedResult, Ok, invalid_input
from ramblin.llm.llm_client import GenerationClient
from ramblin.schemas import InvestmentResponse

logger = logging.getLogger(__name__)


def select_companies(merchants: list[str], limit: int) -> list[str]:
    """First ``limit`` distinct, non-blank merchant names in their original order."""
    selected: list[str] = []
    for name in merchants:
        if len(selected) >= limit:
            break
        name = (name or "").strip()
        if name and name not in selected:
            selected.append(name)
    return selected


def recommend_investments(
    merchants: list[str],
    client: GenerationClient,
    limit: int | None = None,
) -> NormalizedResult[InvestmentResponse]:
    companies = select_companies(
        merchants, config.MAX_RECOMMENDED_COMPANIES if limit is None else limit
    )
    if not companies:
        return invalid_input("No valid merchants provided")

    logger.info(f"Requesting investment opinions for {len(companies)} companies")

    payload = "Provide a quick analysis for these companies:\n" + json.dumps(companies)
    result = generate(client, prompts.INVESTMENT_OPINIONS, payload, SchemaTag.INVESTMENT_RECOMMENDATIONS)
    if isinstance(result, Err):
        return result

    return Ok(InvestmentResponse(recommendations=result.value.recommendations))
