"""Nutrition domain models."""

from dataclasses import dataclass, field

NUTRITION_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "total_fat",
    "carbohydrates",
    "sodium",
    "cholesterol",
)


@dataclass(frozen=True)
class NutritionRecord:
    """Six resolved nutrition values plus the raw text they came from."""

    calories: int = 0
    protein: int = 0
    total_fat: int = 0
    carbohydrates: int = 0
    sodium: int = 0
    cholesterol: int = 0
    ranges: dict[str, str] = field(default_factory=dict)

    def values(self) -> dict[str, int]:
        """Return the resolved values keyed by field name."""
        return {name: getattr(self, name) for name in NUTRITION_FIELDS}

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload persisted alongside a food item."""
        return {**self.values(), "ranges": dict(self.ranges)}


@dataclass(frozen=True)
class FoodItem:
    """Food item identified from a photo."""

    id: int
    name: str
    nutrition: NutritionRecord
    embedding: list[float] | None
