"""
Pytest fixtures for the Ramblin' Returns API tests.
"""

import json
import os

# Must be set before ramblin.config is imported
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ["SERVICE_API_KEY"] = ""

import pytest

from ramblin.core.result import Err, Ok


class ScriptedClient:
    """
    Stand-in for GenerationClient that replays queued outcomes in order.

    Strings become Ok(content); Err instances are returned as-is. Every
    request is recorded so tests can assert on prompts and settings.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def call(self, request):
        self.requests.append(request)
        if not self.outcomes:
            raise AssertionError(f"Unexpected upstream call: {request.label}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Err):
            return outcome
        return Ok(outcome)

    @property
    def labels(self):
        return [r.label for r in self.requests]


@pytest.fixture
def scripted():
    """Factory for ScriptedClient instances."""
    return ScriptedClient


@pytest.fixture
def sample_analysis():
    """A complete statement analysis as the model would return it."""
    return {
        "spendingByCategory": [
            {"category": "Groceries", "amount": 412.55},
            {"category": "Dining", "amount": 188.20},
        ],
        "monthlySpending": [{"month": "2024-05", "amount": 1820.75}],
        "weeklyAverages": [{"week": "Week 1", "amount": 455.10}],
        "topMerchants": [
            {"merchant": "Starbucks", "amount": 64.30, "frequency": 11},
            {"merchant": "Amazon", "amount": 230.99, "frequency": 4},
        ],
        "recurringPayments": [{"merchant": "Netflix", "amount": 15.49, "frequency": "monthly"}],
        "incomeVsExpenses": {"totalIncome": 3200, "totalExpenses": 1820.75, "savings": 1379.25},
        "transactionPatterns": [{"pattern": "Weekend dining", "frequency": 6}],
        "insights": ["Dining spend rose 12% month over month."],
        "savingsSuggestions": ["Brew coffee at home twice a week."],
    }


@pytest.fixture
def sample_analysis_json(sample_analysis):
    return json.dumps(sample_analysis)


@pytest.fixture
def valid_statement_text():
    return (
        "CHECKING ACCOUNT STATEMENT  May 2024\n"
        "05/02 STARBUCKS #1123        -6.45\n"
        "05/03 AMAZON MKTPLACE        -58.20\n"
        "05/15 PAYROLL DEPOSIT      +1600.00\n"
    )
