"""Batch analysis with a guaranteed one-record-per-image result."""

import json
import re
from typing import Any

from labelscan.exceptions import EmptyBatch, MalformedResponse
from labelscan.logger import get_logger
from labelscan.models.analysis import AnalysisRecord, ProductCategory, RiskLevel
from labelscan.models.scan import ImagePart
from labelscan.services.analysis_model import AnalysisModel, AnalysisRequest
from labelscan.services.normalization import normalize_record
from labelscan.services.prompts import RESPONSE_SCHEMA, SYSTEM_PROMPT, build_count_directive

logger = get_logger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")

SKIPPED_RESULT = {
    "category": ProductCategory.OTHER.value,
    "risk_level": RiskLevel.UNKNOWN.value,
    "verdict": "Analysis Skipped",
    "reasoning": "The AI did not return a result.",
    "legal_issues": None,
    "ingredients": [],
}


def failed_record(error_message: str) -> AnalysisRecord:
    """Record returned for every image when the batch call fails outright."""
    return AnalysisRecord(
        category=ProductCategory.OTHER.value,
        risk_level=RiskLevel.UNKNOWN,
        verdict="Analysis Failed",
        reasoning=f"The scan failed. Details: {error_message}",
        legal_issues=None,
        estimated_weight=None,
        nutrition=None,
        search_query=None,
        ingredients=[],
    )


def parse_results(text: str | None) -> list[Any]:
    """Extract the raw results array from the model's text output.

    Raises:
        MalformedResponse: empty text, invalid JSON, or no results array
    """
    if not text or not text.strip():
        raise MalformedResponse("No response from the AI model")

    cleaned = CODE_FENCE_PATTERN.sub("", text).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON from the AI model: {e}") from e

    results = parsed.get("results") if isinstance(parsed, dict) else None
    if not isinstance(results, list):
        raise MalformedResponse("Invalid response format: missing results array")
    return results


def reconcile_count(results: list[Any], expected: int) -> list[Any]:
    """Pad with skipped results or truncate so there is one result per image."""
    if len(results) == expected:
        return results

    logger.warning(f"Mismatch: sent {expected} images, got {len(results)} results")
    if len(results) > expected:
        return results[:expected]

    missing = expected - len(results)
    return results + [dict(SKIPPED_RESULT) for _ in range(missing)]


class AnalysisReconciler:
    """Analyzes a whole batch with one model call and always returns one record per image."""

    def __init__(self, model: AnalysisModel):
        self.model = model

    def build_request(self, images: list[ImagePart]) -> AnalysisRequest:
        return AnalysisRequest(
            system_instruction=SYSTEM_PROMPT,
            images=images,
            directive=build_count_directive(len(images)),
            response_schema=RESPONSE_SCHEMA,
        )

    def analyze(self, images: list[ImagePart]) -> list[AnalysisRecord]:
        """Analyze an ordered batch; record i describes image i.

        Model failures never escape: they become "Analysis Failed" records.

        Raises:
            EmptyBatch: no images were given (the model is not called)
        """
        if not images:
            raise EmptyBatch()

        expected = len(images)
        logger.info(f"=== Analyzing batch of {expected} images ===")

        try:
            text = self.model.generate(self.build_request(images))
            logger.debug(f"Raw model response: {text}")
            results = reconcile_count(parse_results(text), expected)
            records = [normalize_record(result) for result in results]
        except Exception as e:
            logger.error(f"Batch analysis failed: {e}", exc_info=True)
            return [failed_record(str(e)) for _ in range(expected)]

        logger.info(
            "Analysis complete: "
            + ", ".join(f"{r.verdict} ({r.risk_level.value})" for r in records)
        )
        return records
