"""Supabase-backed user repository."""

from dataclasses import dataclass

from supabase import Client

from food_recommender.domain.errors import PersistenceError
from food_recommender.domain.models import UserProfile, UserRecord
from food_recommender.services.codec import (
    coerce_tags,
    encode_vector,
    normalize_embedding,
)
from food_recommender.services.users import UserRepository

_USER_COLUMNS = (
    "id, age, height, weight, caloric_target, protein_target, "
    "dietary_preferences, complications, embedding"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def create_user(self, profile: UserProfile, embedding: list[float]) -> UserRecord:
        """Insert the profile and its vector in one row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "age": profile.age,
                    "height": profile.height,
                    "weight": profile.weight,
                    "caloric_target": profile.caloric_target,
                    "protein_target": profile.protein_target,
                    "dietary_preferences": ",".join(profile.dietary_preferences),
                    "complications": ",".join(profile.complications),
                    "embedding": encode_vector(embedding),
                }
            )
            .execute()
        )
        if not response.data:
            raise PersistenceError("Failed to create user in Supabase")
        row = response.data[0]
        return UserRecord(id=int(row["id"]), profile=profile, embedding=embedding)

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserRecord(
            id=int(row["id"]),
            profile=UserProfile(
                age=row.get("age"),
                height=row.get("height"),
                weight=row.get("weight"),
                caloric_target=row.get("caloric_target"),
                protein_target=row.get("protein_target"),
                dietary_preferences=coerce_tags(row.get("dietary_preferences")),
                complications=coerce_tags(row.get("complications")),
            ),
            embedding=normalize_embedding(row.get("embedding")),
        )
