"""
Pydantic Schema Definitions
============================
Defines the request/response models for the API and the domain shapes
that generation output is coerced into.

Domain shapes keep the camelCase field names the dashboard renders.
Optional list fields default to empty lists so the UI's rendering
loops never receive a missing value. Amounts reject NaN/infinity and
non-numeric strings instead of silently becoming zero.
"""

from typing import Annotated, Literal, Optional, List

from pydantic import BaseModel, BeforeValidator, Field, field_validator


def _reject_bool(value):
    # JSON true/false would otherwise pass as 1.0/0.0
    if isinstance(value, bool):
        raise ValueError("Input should be a number, not a boolean")
    return value


Amount = Annotated[float, BeforeValidator(_reject_bool), Field(allow_inf_nan=False)]
RiskLevel = Literal["low", "medium", "high"]
Opinion = Literal["buy", "hold", "sell"]


# ---------- STATEMENT ANALYSIS ----------

class ValidityCheck(BaseModel):
    """Gate deciding whether the uploaded text is a bank statement."""
    isValid: bool = Field(description="Whether the text looks like a bank statement")
    reason: Optional[str] = Field(default="", description="Model's explanation of the verdict")

    @field_validator("reason", mode="before")
    @classmethod
    def _null_reason_to_empty(cls, value):
        return "" if value is None else value


class CategorySpend(BaseModel):
    category: str
    amount: Amount


class MonthlySpend(BaseModel):
    month: str
    amount: Amount


class WeeklyAverage(BaseModel):
    week: str
    amount: Amount


class MerchantSpend(BaseModel):
    merchant: str
    amount: Amount
    frequency: Amount


class RecurringPayment(BaseModel):
    merchant: str
    amount: Amount
    frequency: str = Field(description="Cadence such as 'monthly' or 'weekly'")


class IncomeVsExpenses(BaseModel):
    totalIncome: Amount
    totalExpenses: Amount
    savings: Amount


class TransactionPattern(BaseModel):
    pattern: str
    frequency: Amount


class StatementAnalysis(BaseModel):
    """
    Full spending analysis of a bank statement.

    spendingByCategory, monthlySpending, topMerchants and incomeVsExpenses
    are required; everything else is optional and defaults to empty.
    """
    spendingByCategory: List[CategorySpend]
    monthlySpending: List[MonthlySpend]
    topMerchants: List[MerchantSpend]
    incomeVsExpenses: IncomeVsExpenses
    weeklyAverages: List[WeeklyAverage] = Field(default_factory=list)
    recurringPayments: List[RecurringPayment] = Field(default_factory=list)
    transactionPatterns: List[TransactionPattern] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    savingsSuggestions: List[str] = Field(default_factory=list)


class MerchantList(BaseModel):
    """Merchants from a statement that are likely publicly traded companies."""
    companies: List[str] = Field(default_factory=list)

    @field_validator("companies")
    @classmethod
    def _drop_blank_and_duplicates(cls, value: List[str]) -> List[str]:
        seen: list[str] = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


# ---------- INVESTMENTS ----------

class CompanyRecommendation(BaseModel):
    company: str
    opinion: Opinion = Field(description="buy, hold or sell")
    rationale: str = Field(default="", description="Short justification")

    @field_validator("opinion", mode="before")
    @classmethod
    def _lowercase_opinion(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class InvestmentRecommendations(BaseModel):
    recommendations: List[CompanyRecommendation]


# ---------- URL RISK ----------

class UrlRiskAssessment(BaseModel):
    score: Annotated[float, BeforeValidator(_reject_bool), Field(ge=1, le=100, allow_inf_nan=False)]
    riskLevel: RiskLevel
    reasons: List[str] = Field(default_factory=list)
    threats: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    isSafe: Optional[bool] = None

    @field_validator("riskLevel", mode="before")
    @classmethod
    def _lowercase_risk(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


# ---------- CHAT ----------

class ChatReply(BaseModel):
    content: str = Field(min_length=1)


# ---------- HTTP REQUESTS ----------

class StatementRequest(BaseModel):
    text: str = Field(description="Plain text of the bank statement")


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(description="Conversation so far, oldest first")


class UrlCheckRequest(BaseModel):
    url: str


class InvestmentRequest(BaseModel):
    merchants: List[str]


# ---------- HTTP RESPONSES ----------

class StatementResponse(BaseModel):
    analysis: StatementAnalysis
    merchants: List[str] = Field(default_factory=list)
    degraded: List[str] = Field(default_factory=list, description="Pipeline stages that failed after analysis succeeded")


class ChatResponse(BaseModel):
    content: str


class UrlCheckResponse(BaseModel):
    originalUrl: str
    resolvedUrl: str
    redirectCount: int = 0
    score: float
    riskLevel: RiskLevel
    reasons: List[str] = Field(default_factory=list)
    threats: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    isSafe: Optional[bool] = None


class InvestmentResponse(BaseModel):
    recommendations: List[CompanyRecommendation]


class PdfTextResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str = Field(description="User-safe error message")
    kind: str = Field(description="Error kind from the API error taxonomy")
