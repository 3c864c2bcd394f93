"""
Schema Coercion Module
=======================
Maps a loosely-typed JSON value onto the domain shape a call site
expects, using the pydantic models in ramblin.schemas.

- Missing or wrongly-typed required fields → Err(SCHEMA_MISMATCH)
  naming the offending field path.
- Missing optional lists → empty lists.
- A statement validity verdict of isValid=false → a rejected Err
  carrying the model's reason verbatim.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from ramblin.core.result import Err, ErrorKind, NormalizedResult, Ok
from ramblin.schemas import (
    ChatReply,
    InvestmentRecommendations,
    MerchantList,
    StatementAnalysis,
    UrlRiskAssessment,
    ValidityCheck,
)

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "The uploaded document does not look like a bank statement."


class SchemaTag(str, Enum):
    VALIDITY_CHECK = "validity_check"
    STATEMENT_ANALYSIS = "statement_analysis"
    MERCHANT_LIST = "merchant_list"
    INVESTMENT_RECOMMENDATIONS = "investment_recommendations"
    URL_RISK = "url_risk"
    CHAT_REPLY = "chat_reply"


SHAPES: dict[SchemaTag, type[BaseModel]] = {
    SchemaTag.VALIDITY_CHECK: ValidityCheck,
    SchemaTag.STATEMENT_ANALYSIS: StatementAnalysis,
    SchemaTag.MERCHANT_LIST: MerchantList,
    SchemaTag.INVESTMENT_RECOMMENDATIONS: InvestmentRecommendations,
    SchemaTag.URL_RISK: UrlRiskAssessment,
    SchemaTag.CHAT_REPLY: ChatReply,
}


def _describe(exc: ValidationError) -> str:
    """Render validation errors as 'field.path: problem' pairs."""
    problems = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{path}: {error['msg']}")
    return "; ".join(problems)


def _prepare(value: Any, shape: SchemaTag) -> Any:
    """Shape-specific adjustments applied before validation."""
    # Some models answer the merchant prompt with a bare array
    if shape is SchemaTag.MERCHANT_LIST and isinstance(value, list):
        return {"companies": value}
    if shape is SchemaTag.CHAT_REPLY and isinstance(value, str):
        return {"content": value}
    return value


def coerce(value: Any, shape: SchemaTag) -> NormalizedResult[BaseModel]:
    """
    Validate a parsed JSON value against the expected domain shape.

    Args:
        value: Output of the JSON extractor
        shape: Which domain shape the call site expects

    Returns:
        Ok(model instance) or Err(SCHEMA_MISMATCH)
    """
    model = SHAPES[shape]
    value = _prepare(value, shape)

    if not isinstance(value, dict):
        return Err(
            ErrorKind.SCHEMA_MISMATCH,
            f"{shape.value}: expected a JSON object, got {type(value).__name__}",
        )

    try:
        result = model.model_validate(value)
    except ValidationError as exc:
        message = f"{shape.value}: {_describe(exc)}"
        logger.warning(f"Schema mismatch: {message}")
        return Err(ErrorKind.SCHEMA_MISMATCH, message)

    if isinstance(result, ValidityCheck) and not result.isValid:
        reason = (result.reason or "").strip() or DEFAULT_REJECTION_REASON
        return Err(
            ErrorKind.SCHEMA_MISMATCH,
            f"Input rejected by validity check: {reason}",
            reason=reason,
            rejected=True,
        )

    return Ok(result)
