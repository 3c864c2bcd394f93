"""
Tests for merchant selection and investment opinions.
"""

from ramblin import config
from ramblin.core.investments import recommend_investments, select_companies
from ramblin.core.result import ErrorKind, Ok

OPINIONS = '{"recommendations": [{"company": "Apple", "opinion": "buy", "rationale": "Strong services growth"}]}'


class TestSelectCompanies:
    """Tests for picking the companies to analyze."""

    def test_first_distinct_names_in_order(self):
        assert select_companies([" Apple", "", "Apple", "Amazon", "Netflix"], 2) == ["Apple", "Amazon"]

    def test_zero_limit_selects_nothing(self):
        assert select_companies(["Apple", "Amazon"], 0) == []


class TestRecommendInvestments:
    """Tests for the investment opinion flow."""

    def test_default_limit(self, scripted):
        client = scripted(OPINIONS)
        merchants = ["Apple", "Amazon", "Netflix", "Target", "Costco"]
        result = recommend_investments(merchants, client)

        assert isinstance(result, Ok)
        payload = client.requests[0].payload
        for name in merchants[:config.MAX_RECOMMENDED_COMPANIES]:
            assert name in payload
        assert "Costco" not in payload

    def test_explicit_limit_respected(self, scripted):
        client = scripted(OPINIONS)
        recommend_investments(["Apple", "Amazon"], client, limit=1)
        assert "Amazon" not in client.requests[0].payload

    def test_zero_limit_is_invalid_input(self, scripted):
        client = scripted()
        result = recommend_investments(["Apple"], client, limit=0)

        assert result.kind is ErrorKind.INVALID_USER_INPUT
        assert result.status_code == 400
        assert client.requests == []
