"""
Tests for the statement analysis pipeline and shared generation path.
"""

import json

from ramblin.core import prompts
from ramblin.core.coercion import SchemaTag
from ramblin.core.generation import generate
from ramblin.core.result import Err, ErrorKind, Ok
from ramblin.core.statement import MERCHANT_STAGE, analyze_statement

VALID = '{"isValid": true, "reason": "Contains dated transactions"}'
COMPANIES = '{"companies": ["Starbucks", "Amazon"]}'


class TestGenerate:
    """Tests for the call → clean → extract → coerce path."""

    def test_fenced_response(self, scripted):
        client = scripted('```json\n{"companies": ["Apple"]}\n```')
        result = generate(client, prompts.MERCHANT_EXTRACTION, "text", SchemaTag.MERCHANT_LIST)
        assert result.value.companies == ["Apple"]

    def test_prose_wrapped_response(self, scripted):
        client = scripted('Sure! Here is the list: {"companies": ["Apple"]} Hope that helps.')
        result = generate(client, prompts.MERCHANT_EXTRACTION, "text", SchemaTag.MERCHANT_LIST)
        assert result.value.companies == ["Apple"]

    def test_upstream_error_passed_through(self, scripted):
        failure = Err(ErrorKind.UPSTREAM_UNAVAILABLE, "down")
        result = generate(scripted(failure), prompts.VALIDITY_CHECK, "text", SchemaTag.VALIDITY_CHECK)
        assert result is failure

    def test_fence_only_response_is_empty(self, scripted):
        result = generate(scripted("```json\n```"), prompts.VALIDITY_CHECK, "text", SchemaTag.VALIDITY_CHECK)
        assert result.kind is ErrorKind.EMPTY_RESPONSE

    def test_unparsable_response(self, scripted):
        result = generate(scripted("I cannot do that."), prompts.VALIDITY_CHECK, "text", SchemaTag.VALIDITY_CHECK)
        assert result.kind is ErrorKind.UNPARSABLE_CONTENT

    def test_call_site_settings_forwarded(self, scripted):
        client = scripted(VALID)
        generate(client, prompts.VALIDITY_CHECK, "payload", SchemaTag.VALIDITY_CHECK)
        request = client.requests[0]
        assert request.payload == "payload"
        assert request.temperature == 0.3
        assert request.max_tokens == 500
        assert request.json_output is True
        assert request.instructions == prompts.VALIDITY_PROMPT


class TestAnalyzeStatement:
    """Tests for the validity → analysis → merchants pipeline."""

    def test_full_success(self, scripted, sample_analysis_json, valid_statement_text):
        client = scripted(VALID, sample_analysis_json, COMPANIES)
        result = analyze_statement(valid_statement_text, client)

        assert isinstance(result, Ok)
        assert result.value.merchants == ["Starbucks", "Amazon"]
        assert result.value.degraded == []
        assert result.value.analysis.incomeVsExpenses.savings == 1379.25
        assert client.labels == ["validity_check", "statement_analysis", "merchant_extraction"]

    def test_temperatures_per_stage(self, scripted, sample_analysis_json, valid_statement_text):
        client = scripted(VALID, sample_analysis_json, COMPANIES)
        analyze_statement(valid_statement_text, client)
        assert [r.temperature for r in client.requests] == [0.3, 0.7, 0.3]

    def test_rejected_statement_short_circuits(self, scripted):
        client = scripted('{"isValid": false, "reason": "no transaction data found"}')
        result = analyze_statement("Dear diary, today was sunny.", client)

        assert isinstance(result, Err)
        assert result.rejected
        assert result.user_message == "no transaction data found"
        assert client.labels == ["validity_check"]

    def test_empty_text_never_calls_upstream(self, scripted):
        client = scripted()
        result = analyze_statement("   ", client)
        assert result.kind is ErrorKind.INVALID_USER_INPUT
        assert client.requests == []

    def test_analysis_failure_fails_request(self, scripted, valid_statement_text):
        client = scripted(VALID, "Your spending looks healthy!")
        result = analyze_statement(valid_statement_text, client)
        assert result.kind is ErrorKind.UNPARSABLE_CONTENT
        assert client.labels == ["validity_check", "statement_analysis"]

    def test_analysis_missing_required_field(self, scripted, sample_analysis, valid_statement_text):
        del sample_analysis["spendingByCategory"]
        client = scripted(VALID, json.dumps(sample_analysis))
        result = analyze_statement(valid_statement_text, client)
        assert result.kind is ErrorKind.SCHEMA_MISMATCH
        assert "spendingByCategory" in result.message

    def test_merchant_failure_keeps_analysis(self, scripted, sample_analysis_json, valid_statement_text):
        client = scripted(VALID, sample_analysis_json, Err(ErrorKind.UPSTREAM_UNAVAILABLE, "down"))
        result = analyze_statement(valid_statement_text, client)

        assert isinstance(result, Ok)
        assert result.value.merchants == []
        assert result.value.degraded == [MERCHANT_STAGE]
        assert result.value.analysis.topMerchants[0].merchant == "Starbucks"

    def test_upstream_down_at_validity(self, scripted, valid_statement_text):
        client = scripted(Err(ErrorKind.UPSTREAM_UNAVAILABLE, "down"))
        result = analyze_statement(valid_statement_text, client)
        assert result.kind is ErrorKind.UPSTREAM_UNAVAILABLE
        assert result.status_code == 500
