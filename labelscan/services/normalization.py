"""Coerce free-form model output into AnalysisRecord fields."""

from typing import Any

from labelscan.models.analysis import (
    AnalysisRecord,
    IngredientAnalysis,
    NutritionInfo,
    ProductCategory,
    RiskLevel,
)

# Checked in order; the first keyword hit wins.
RISK_KEYWORDS: list[tuple[tuple[str, ...], RiskLevel]] = [
    (("toxic", "unhealthy"), RiskLevel.TOXIC),
    (("caution", "warn"), RiskLevel.CAUTION),
    (("safe", "healthy"), RiskLevel.SAFE),
]

EMPTY_LEGAL_ISSUES = ("None", "")

_CATEGORIES_BY_NAME = {c.value.lower(): c.value for c in ProductCategory}


def normalize_risk(value: Any) -> RiskLevel:
    """Map free text onto a RiskLevel by keyword.

    "toxic" is matched before "healthy" so that "Toxic/Unhealthy" stays toxic.
    """
    text = str(value).lower() if value else ""
    for keywords, level in RISK_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return level
    return RiskLevel.UNKNOWN


def normalize_legal_issues(value: Any) -> str | None:
    if value is None or value in EMPTY_LEGAL_ISSUES:
        return None
    return str(value)


def normalize_category(value: Any) -> str:
    if not value:
        return ProductCategory.OTHER.value
    text = str(value)
    return _CATEGORIES_BY_NAME.get(text.strip().lower(), text)


def _optional_text(value: Any) -> str | None:
    return str(value) if value else None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_ingredients(value: Any) -> list[IngredientAnalysis]:
    if not isinstance(value, list):
        return []

    ingredients = []
    for item in value:
        if not isinstance(item, dict):
            continue
        ingredients.append(
            IngredientAnalysis(
                name=_text(item.get("name")),
                quantity=_optional_text(item.get("quantity")),
                description=_text(item.get("description")),
                risk=normalize_risk(item.get("risk")),
            )
        )
    return ingredients


def normalize_nutrition(value: Any) -> NutritionInfo | None:
    if not value or not isinstance(value, dict):
        return None

    vitamins = value.get("vitamins")
    return NutritionInfo(
        calories=_text(value.get("calories")),
        protein=_text(value.get("protein")),
        carbs=_text(value.get("carbs")),
        fat=_text(value.get("fat")),
        vitamins=[str(v) for v in vitamins] if isinstance(vitamins, list) else [],
    )


def normalize_record(raw: Any) -> AnalysisRecord:
    """Build an AnalysisRecord from one raw result object, filling every gap."""
    if not isinstance(raw, dict):
        raw = {}

    verdict = raw.get("verdict")
    return AnalysisRecord(
        category=normalize_category(raw.get("category")),
        risk_level=normalize_risk(raw.get("risk_level")),
        verdict=str(verdict) if verdict else "Unknown Item",
        reasoning=str(raw.get("reasoning") or "No details provided."),
        legal_issues=normalize_legal_issues(raw.get("legal_issues")),
        estimated_weight=_optional_text(raw.get("estimated_weight")),
        nutrition=normalize_nutrition(raw.get("nutrition")),
        search_query=_optional_text(raw.get("search_query") or verdict),
        ingredients=normalize_ingredients(raw.get("ingredients")),
    )
