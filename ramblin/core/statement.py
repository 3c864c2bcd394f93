"""
Bank Statement Analysis
========================
Sequential three-stage pipeline over the statement text:

1. **Validity check**: is this a bank statement at all? A negative
   verdict stops the pipeline and the model's reason goes back to the
   user verbatim.
2. **Analysis**: spending by category, monthly totals, merchants,
   income vs expenses, insights and savings suggestions.
3. **Merchant extraction**: publicly traded companies among the
   merchants, used later for investment opinions.

Each stage only runs if the previous one succeeded. A failure in the
merchant stage does not throw away a successful analysis: the report is
returned with an empty merchant list and the stage marked as degraded.
"""

import logging

from ramblin.core import prompts
from ramblin.core.coercion import SchemaTag
from ramblin.core.generation import generate
from ramblin.core.result import Err, NormalizedResult, Ok, invalid_input
from ramblin.llm.llm_client import GenerationClient
from ramblin.schemas import StatementResponse

logger = logging.getLogger(__name__)

MERCHANT_STAGE = "merchants"


def analyze_statement(text: str, client: GenerationClient) -> NormalizedResult[StatementResponse]:
    """
    Run the validity → analysis → merchants pipeline.

    Args:
        text: Plain text of the uploaded statement
        client: Shared generation client

    Returns:
        Ok(StatementResponse), possibly with degraded stages, or the Err
        of the first stage that failed before analysis completed
    """
    if not text or not text.strip():
        return invalid_input("No valid text provided")

    logger.info(f"Analyzing statement ({len(text)} chars)")

    verdict = generate(client, prompts.VALIDITY_CHECK, text, SchemaTag.VALIDITY_CHECK)
    if isinstance(verdict, Err):
        if verdict.rejected:
            logger.info("Statement rejected by validity check")
        return verdict

    analysis = generate(client, prompts.STATEMENT_ANALYSIS, text, SchemaTag.STATEMENT_ANALYSIS)
    if isinstance(analysis, Err):
        return analysis

    degraded: list[str] = []
    companies: list[str] = []

    merchants = generate(client, prompts.MERCHANT_EXTRACTION, text, SchemaTag.MERCHANT_LIST)
    if isinstance(merchants, Err):
        logger.warning(f"Merchant extraction degraded: {merchants.kind.value}")
        degraded.append(MERCHANT_STAGE)
    else:
        companies = merchants.value.companies

    return Ok(StatementResponse(
        analysis=analysis.value,
        merchants=companies,
        degraded=degraded,
    ))
