"""Request and response models for the HTTP boundary."""

from pydantic import BaseModel, Field

from food_recommender.domain.analysis import AnalysisResult, Recommendation
from food_recommender.domain.models import UserProfile
from food_recommender.domain.nutrition import FoodItem


class EnrollmentRequest(BaseModel):
    """Profile fields submitted at sign-up."""

    age: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    caloric_target: float | None = Field(default=None, ge=0)
    protein_target: float | None = Field(default=None, ge=0)
    dietary_preferences: list[str] = Field(default_factory=list)
    complications: list[str] = Field(default_factory=list)

    def to_profile(self) -> UserProfile:
        """Convert the request into a domain profile."""
        return UserProfile(**self.model_dump())


class RecommendationRequest(BaseModel):
    """Identifiers of a stored user and food item."""

    user_id: int
    food_item_id: int


def food_item_payload(food: FoodItem) -> dict[str, object]:
    """Render a food item for API responses."""
    return {
        "food_item_id": food.id,
        "food_name": food.name,
        "nutrition": food.nutrition.to_payload(),
    }


def analysis_payload(result: AnalysisResult) -> dict[str, object]:
    """Render a completed analysis for API responses."""
    return {
        **food_item_payload(result.food_item),
        "caption": result.caption,
        "food_analysis": result.fields,
        "similarity_score": result.similarity_score,
        "recommendation": result.recommendation,
    }


def recommendation_payload(recommendation: Recommendation) -> dict[str, object]:
    """Render a standalone recommendation for API responses."""
    return {
        "user_id": recommendation.user_id,
        **food_item_payload(recommendation.food_item),
        "similarity_score": recommendation.similarity_score,
        "recommendation": recommendation.text,
    }
