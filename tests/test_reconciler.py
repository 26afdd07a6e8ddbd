import json

import pytest

from conftest import StubModel, echo_results, results_json
from labelscan.exceptions import AnalysisModelError, EmptyBatch
from labelscan.models.analysis import RiskLevel
from labelscan.services.normalization import normalize_record
from labelscan.services.reconciler import (
    SKIPPED_RESULT,
    AnalysisReconciler,
    parse_results,
)


def full_result(i: int) -> dict:
    return {
        "category": "Cosmetic",
        "risk_level": "Caution",
        "verdict": f"Product {i}",
        "reasoning": f"Reasoning {i}",
        "legal_issues": None,
        "estimated_weight": None,
        "nutrition": None,
        "search_query": f"query {i}",
        "ingredients": [],
    }


@pytest.mark.parametrize("count", [1, 2, 5, 10])
def test_length_invariant_when_model_matches(image_parts, count):
    reconciler = AnalysisReconciler(StubModel(echo_results))
    assert len(reconciler.analyze(image_parts(count))) == count


def test_order_correspondence(image_parts):
    records = AnalysisReconciler(StubModel(echo_results)).analyze(image_parts(4))
    assert [r.verdict for r in records] == ["item-0", "item-1", "item-2", "item-3"]


def test_single_model_call_per_batch(image_parts):
    model = StubModel(echo_results)
    AnalysisReconciler(model).analyze(image_parts(3))

    assert model.calls == 1
    request = model.requests[0]
    assert len(request.images) == 3
    assert "exactly 3 results" in request.directive
    assert "results" in request.response_schema["properties"]


def test_padding_with_skipped_records(image_parts):
    model = StubModel(lambda request: results_json([full_result(0)]))
    records = AnalysisReconciler(model).analyze(image_parts(3))

    skipped = normalize_record(dict(SKIPPED_RESULT))
    assert len(records) == 3
    assert records[0].verdict == "Product 0"
    assert records[1] == skipped
    assert records[2] == skipped
    assert skipped.verdict == "Analysis Skipped"
    assert skipped.reasoning == "The AI did not return a result."
    assert skipped.risk_level == RiskLevel.UNKNOWN
    assert skipped.category == "Other"


def test_truncation_keeps_first_records(image_parts):
    model = StubModel(lambda request: results_json([full_result(i) for i in range(5)]))
    records = AnalysisReconciler(model).analyze(image_parts(2))

    assert len(records) == 2
    assert records == [normalize_record(full_result(0)), normalize_record(full_result(1))]


def test_total_failure_returns_failed_records(image_parts):
    def boom(request):
        raise AnalysisModelError("upstream exploded with 503")

    records = AnalysisReconciler(StubModel(boom)).analyze(image_parts(2))

    assert len(records) == 2
    for record in records:
        assert record.verdict == "Analysis Failed"
        assert record.risk_level == RiskLevel.UNKNOWN
        assert "upstream exploded with 503" in record.reasoning
        assert record.reasoning.startswith("The scan failed. Details: ")
        assert record.search_query is None
        assert record.ingredients == []


def test_unexpected_exception_is_also_recovered(image_parts):
    def boom(request):
        raise ConnectionError("connection reset")

    records = AnalysisReconciler(StubModel(boom)).analyze(image_parts(3))
    assert [r.verdict for r in records] == ["Analysis Failed"] * 3


@pytest.mark.parametrize(
    "text",
    ["", "   ", "not json at all", json.dumps({"items": []}), json.dumps({"results": "nope"}), "[1, 2]"],
)
def test_malformed_response_falls_back(image_parts, text):
    records = AnalysisReconciler(StubModel(lambda request: text)).analyze(image_parts(2))

    assert len(records) == 2
    assert all(r.verdict == "Analysis Failed" for r in records)


def test_empty_batch_is_rejected_without_calling_model():
    model = StubModel(echo_results)

    with pytest.raises(EmptyBatch):
        AnalysisReconciler(model).analyze([])
    assert model.calls == 0


def test_parse_results_strips_code_fences():
    text = "```json\n" + results_json([{"verdict": "Apple"}]) + "\n```"
    assert parse_results(text) == [{"verdict": "Apple"}]


def test_normalization_applied_to_model_output(image_parts):
    raw = {
        "category": "",
        "risk_level": "Contains TOXIC dyes",
        "verdict": "Candy",
        "reasoning": "",
        "legal_issues": "None",
        "ingredients": [{"name": "Red 3", "description": "Dye", "risk": "banned, toxic"}],
    }
    records = AnalysisReconciler(StubModel(lambda request: results_json([raw]))).analyze(image_parts(1))

    record = records[0]
    assert record.category == "Other"
    assert record.risk_level == RiskLevel.TOXIC
    assert record.reasoning == "No details provided."
    assert record.legal_issues is None
    assert record.search_query == "Candy"
    assert record.ingredients[0].risk == RiskLevel.TOXIC
    assert record.ingredients[0].quantity is None
