"""Food item persistence."""

from dataclasses import dataclass
from typing import Protocol

from food_recommender.domain.errors import NotFoundError
from food_recommender.domain.nutrition import FoodItem, NutritionRecord
from food_recommender.services.store_calls import call_store


class FoodRepository(Protocol):
    """Persistence interface for analyzed food items."""

    def create_food(
        self, name: str, embedding: list[float] | None, nutrition: NutritionRecord
    ) -> FoodItem:
        """Insert name, embedding and nutrition as one row and return it."""

    def get_food(self, food_item_id: int) -> FoodItem | None:
        """Return the food item for an id, if present."""


@dataclass
class FoodService:
    """Application service for storing and loading food items."""

    repository: FoodRepository
    store_timeout_seconds: float = 30.0

    async def save(
        self, name: str, embedding: list[float] | None, nutrition: NutritionRecord
    ) -> FoodItem:
        """Persist a food item in a single write."""
        return await call_store(
            self.repository.create_food,
            name,
            embedding,
            nutrition,
            timeout_seconds=self.store_timeout_seconds,
            action="insert food item",
        )

    async def get(self, food_item_id: int) -> FoodItem:
        """Return a stored food item or raise NotFoundError."""
        food = await call_store(
            self.repository.get_food,
            food_item_id,
            timeout_seconds=self.store_timeout_seconds,
            action="load food item",
        )
        if food is None:
            raise NotFoundError(f"Food item {food_item_id} not found")
        return food
