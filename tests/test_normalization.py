import pytest

from labelscan.models.analysis import RiskLevel
from labelscan.services.normalization import (
    normalize_category,
    normalize_legal_issues,
    normalize_nutrition,
    normalize_record,
    normalize_risk,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Safe", RiskLevel.SAFE),
        ("TOXIC ingredient", RiskLevel.TOXIC),
        ("mild caution advised", RiskLevel.CAUTION),
        ("sparkly", RiskLevel.UNKNOWN),
        ("Toxic/Unhealthy", RiskLevel.TOXIC),
        ("Unhealthy in large amounts", RiskLevel.TOXIC),
        ("Warning: allergen", RiskLevel.CAUTION),
        ("Healthy choice", RiskLevel.SAFE),
        ("", RiskLevel.UNKNOWN),
        (None, RiskLevel.UNKNOWN),
    ],
)
def test_normalize_risk(text, expected):
    assert normalize_risk(text) == expected


def test_normalize_risk_is_idempotent():
    for level in RiskLevel:
        assert normalize_risk(normalize_risk(level.value).value) == normalize_risk(level.value)
    assert normalize_risk("Safe") == RiskLevel.SAFE


def test_toxic_wins_over_safe_when_both_appear():
    assert normalize_risk("safe in small doses, toxic otherwise") == RiskLevel.TOXIC
    assert normalize_risk("safe but use caution") == RiskLevel.CAUTION


@pytest.mark.parametrize("value", ["None", "", None])
def test_empty_legal_issues_become_null(value):
    assert normalize_legal_issues(value) is None


def test_legal_issues_text_is_kept_verbatim():
    assert normalize_legal_issues("Banned in EU 2019") == "Banned in EU 2019"


def test_normalize_category():
    assert normalize_category(None) == "Other"
    assert normalize_category("") == "Other"
    assert normalize_category("food") == "Food"
    assert normalize_category("Household Chemical") == "Household Chemical"
    assert normalize_category("Garden Tool") == "Garden Tool"


def test_record_defaults_for_missing_fields():
    record = normalize_record({})

    assert record.category == "Other"
    assert record.risk_level == RiskLevel.UNKNOWN
    assert record.verdict == "Unknown Item"
    assert record.reasoning == "No details provided."
    assert record.legal_issues is None
    assert record.estimated_weight is None
    assert record.nutrition is None
    assert record.search_query is None
    assert record.ingredients == []


def test_search_query_falls_back_to_verdict():
    record = normalize_record({"verdict": "Organic Tomatoes", "search_query": ""})
    assert record.search_query == "Organic Tomatoes"

    record = normalize_record({"verdict": "Organic Tomatoes", "search_query": "tomato benefits"})
    assert record.search_query == "tomato benefits"


def test_ingredients_are_normalized():
    record = normalize_record(
        {
            "verdict": "Soda",
            "ingredients": [
                {"name": "Sugar", "quantity": "39g", "description": "Added sugar", "risk": "Unhealthy"},
                {"name": "Water", "quantity": "", "description": "Base", "risk": "safe"},
                "not an ingredient",
            ],
        }
    )

    assert [i.name for i in record.ingredients] == ["Sugar", "Water"]
    assert record.ingredients[0].quantity == "39g"
    assert record.ingredients[0].risk == RiskLevel.TOXIC
    assert record.ingredients[1].quantity is None
    assert record.ingredients[1].risk == RiskLevel.SAFE


def test_non_list_ingredients_become_empty():
    assert normalize_record({"ingredients": "sugar, water"}).ingredients == []


def test_nutrition_is_coerced():
    nutrition = normalize_nutrition(
        {"calories": 120, "protein": "2g", "vitamins": ["Vitamin C", "Potassium"]}
    )

    assert nutrition.calories == "120"
    assert nutrition.protein == "2g"
    assert nutrition.carbs == ""
    assert nutrition.vitamins == ["Vitamin C", "Potassium"]
    assert normalize_nutrition(None) is None
    assert normalize_nutrition("lots") is None
