"""Instructions and response schema sent with every analysis request."""

SYSTEM_PROMPT = """You are an expert product safety, material, and nutritional analyst.
Your goal is to analyze ANY consumer item: packaged goods, fresh food, utensils,
clothes, toys, and so on.

**MODES OF OPERATION:**
1. **Label/Text Visible:** Read the ingredients, composition, or nutritional info.
   - **QUANTITY EXTRACTION:** Extract specific quantities if listed (e.g., "10g Sugar", "5% Niacin").
   - **COMPLIANCE CHECK:** Analyze compliance with health standards.
2. **No Label / Visual Only (Objects):** Visually identify the object and infer its
   material (e.g., "Aluminum Pot").
3. **Fresh Food (Fruits, Veg, Meat):**
   - **WEIGHT ESTIMATION:** Estimate the TOTAL VISIBLE weight or count
     (e.g., "Approx. 1kg", "6 Bananas", "500g Steak").
   - **NUTRITION CALCULATION:** Provide approximate nutritional values (Calories,
     Protein, Carbs, Fat, Vitamins) for that ESTIMATED amount.
4. **Legal & Controversy Check:** Identify lawsuits, bans, or health scandals.

**OUTPUT INSTRUCTIONS:**
- You will receive a specific number of images.
- **CRITICAL:** Return exactly one result object per image, in the same order as the images.
- **Verdict:** Short, punchy title.
- **Ingredients:** List ingredients found. If fresh food, list key nutrients as ingredients.
- **Nutrition:** For fresh food/meat, fill the nutrition object. For others, return null.
- **Estimated Weight:** Best guess of the quantity shown.
- **Search Query:** A search term to find health benefits (e.g., "Benefits of eating organic tomatoes").
- **Risk Level:** Strictly 'Safe', 'Caution', or 'Toxic/Unhealthy'.
- **Category:** One of Food, Cosmetic, Household Chemical, Material/Fabric,
  Kitchenware/Utensil, Electronic, Toy, Other.

Return strict JSON."""


def build_count_directive(image_count: int) -> str:
    """Text sent after the images, restating how many results are expected."""
    return (
        f"Analyze these {image_count} images. Return exactly {image_count} results. "
        "For fresh food, estimate weight and nutrition."
    )


NUTRITION_SCHEMA = {
    "type": ["object", "null"],
    "description": "Nutritional info for the estimated weight. Null for non-food.",
    "properties": {
        "calories": {"type": "string"},
        "protein": {"type": "string"},
        "carbs": {"type": "string"},
        "fat": {"type": "string"},
        "vitamins": {"type": "array", "items": {"type": "string"}},
    },
}

INGREDIENT_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "quantity": {"type": "string", "description": "Amount if listed (e.g., '10g', '5%')"},
        "description": {"type": "string"},
        "risk": {"type": "string"},
    },
    "required": ["name", "description", "risk"],
}

# Risk and category are open strings here; they are normalized after parsing.
RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "results": {
            "type": "array",
            "description": "Exactly one result per image, in image order",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "risk_level": {"type": "string"},
                    "verdict": {"type": "string"},
                    "reasoning": {"type": "string"},
                    "legal_issues": {"type": "string"},
                    "estimated_weight": {
                        "type": "string",
                        "description": "Approximate weight visible (e.g., '1.5kg'). Null if not applicable.",
                    },
                    "search_query": {
                        "type": "string",
                        "description": "Query for health benefits (e.g., 'Health benefits of ...')",
                    },
                    "nutrition": NUTRITION_SCHEMA,
                    "ingredients": {"type": "array", "items": INGREDIENT_SCHEMA},
                },
                "required": ["category", "risk_level", "verdict", "reasoning", "ingredients"],
            },
        },
    },
    "required": ["results"],
}
