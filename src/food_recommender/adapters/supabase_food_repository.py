"""Supabase-backed food item repository."""

from dataclasses import dataclass

from supabase import Client

from food_recommender.domain.errors import PersistenceError
from food_recommender.domain.nutrition import FoodItem, NutritionRecord
from food_recommender.services.codec import encode_vector, normalize_embedding
from food_recommender.services.foods import FoodRepository
from food_recommender.services.nutrition import nutrition_record_from_payload


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for food item persistence."""

    client: Client

    def create_food(
        self, name: str, embedding: list[float] | None, nutrition: NutritionRecord
    ) -> FoodItem:
        """Insert a food item row; a missing vector is stored as NULL."""
        response = (
            self.client.table("food_items")
            .insert(
                {
                    "name": name,
                    "embedding": (
                        encode_vector(embedding) if embedding is not None else None
                    ),
                    "nutrition_info": nutrition.to_payload(),
                }
            )
            .execute()
        )
        if not response.data:
            raise PersistenceError("Failed to create food item in Supabase")
        row = response.data[0]
        return FoodItem(
            id=int(row["id"]),
            name=name,
            nutrition=nutrition,
            embedding=embedding,
        )

    def get_food(self, food_item_id: int) -> FoodItem | None:
        """Return the food item for an id, if present."""
        response = (
            self.client.table("food_items")
            .select("id, name, embedding, nutrition_info")
            .eq("id", food_item_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        embedding = row.get("embedding")
        return FoodItem(
            id=int(row["id"]),
            name=row.get("name") or "Unknown",
            nutrition=nutrition_record_from_payload(row.get("nutrition_info")),
            embedding=normalize_embedding(embedding) if embedding is not None else None,
        )
