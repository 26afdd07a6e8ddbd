"""Per-image analysis data models."""

from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """Risk rating shown to the user. Drives the UI color coding."""

    SAFE = "Safe"
    CAUTION = "Caution"
    TOXIC = "Toxic/Unhealthy"
    UNKNOWN = "Unknown"


class ProductCategory(str, Enum):
    """Kind of item that was photographed."""

    FOOD = "Food"
    COSMETIC = "Cosmetic"
    CHEMICAL = "Household Chemical"
    MATERIAL = "Material/Fabric"
    KITCHENWARE = "Kitchenware/Utensil"
    ELECTRONIC = "Electronic"
    TOY = "Toy"
    OTHER = "Other"


class IngredientAnalysis(BaseModel):
    """A single ingredient, component or nutrient line item."""

    name: str = Field(description="Ingredient or component name")
    quantity: str | None = Field(default=None, description="Amount if listed (e.g., '10g', '5%')")
    description: str = Field(default="", description="What it is and why it matters")
    risk: RiskLevel = Field(default=RiskLevel.UNKNOWN, description="Normalized risk rating")


class NutritionInfo(BaseModel):
    """Approximate nutrition for the estimated amount of a fresh food item."""

    calories: str = Field(default="", description="e.g. '120 kcal'")
    protein: str = Field(default="", description="e.g. '2g'")
    carbs: str = Field(default="", description="e.g. '25g'")
    fat: str = Field(default="", description="e.g. '0.5g'")
    vitamins: list[str] = Field(default_factory=list, description="e.g. ['Vitamin C', 'Potassium']")


class AnalysisRecord(BaseModel):
    """Normalized analysis of one submitted image."""

    category: str = Field(
        default=ProductCategory.OTHER.value,
        description="ProductCategory value, or the model's own label when it matches none",
    )
    risk_level: RiskLevel = Field(default=RiskLevel.UNKNOWN)
    verdict: str = Field(description="Short, punchy title")
    reasoning: str = Field(description="Explanation of the verdict")
    legal_issues: str | None = Field(default=None, description="Lawsuits, bans or scandals")
    estimated_weight: str | None = Field(default=None, description="e.g. 'Approx. 1kg'")
    nutrition: NutritionInfo | None = None
    search_query: str | None = Field(default=None, description="Query for health benefits")
    ingredients: list[IngredientAnalysis] = Field(default_factory=list)
