"""Data models for LabelScan."""

from labelscan.models.analysis import (
    AnalysisRecord,
    IngredientAnalysis,
    NutritionInfo,
    ProductCategory,
    RiskLevel,
)
from labelscan.models.scan import ImagePart, ScanResult

__all__ = [
    "RiskLevel",
    "ProductCategory",
    "IngredientAnalysis",
    "NutritionInfo",
    "AnalysisRecord",
    "ImagePart",
    "ScanResult",
]
