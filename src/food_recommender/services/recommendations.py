"""Scoring a food item against a user and generating advice."""

import logging
from dataclasses import dataclass

from food_recommender.domain.analysis import Recommendation
from food_recommender.domain.models import UserRecord
from food_recommender.domain.nutrition import FoodItem
from food_recommender.services.foods import FoodService
from food_recommender.services.llm import LanguageModelService
from food_recommender.services.prompts import recommendation_prompt
from food_recommender.services.similarity import cosine_similarity
from food_recommender.services.users import UserService

_logger = logging.getLogger(__name__)


@dataclass
class RecommendationService:
    """Service combining similarity scoring with a text-model recommendation."""

    user_service: UserService
    food_service: FoodService
    models: LanguageModelService

    def score(self, user: UserRecord, food: FoodItem) -> float:
        """Return the similarity of the user and food embeddings."""
        score = cosine_similarity(user.embedding, food.embedding)
        _logger.info(
            "Similarity score: user=%s food_item=%s score=%.4f",
            user.id,
            food.id,
            score,
        )
        return score

    async def advise(self, user: UserRecord, food: FoodItem, score: float) -> str:
        """Ask the text model how well the food fits the user."""
        prompt = recommendation_prompt(
            profile=user.profile,
            food_name=food.name,
            nutrition=food.nutrition,
            similarity_score=score,
        )
        return await self.models.complete(prompt)

    async def recommend(self, user_id: int, food_item_id: int) -> Recommendation:
        """Score and describe an already stored food item for a stored user."""
        user = await self.user_service.get_user(user_id)
        food = await self.food_service.get(food_item_id)
        score = self.score(user, food)
        text = await self.advise(user, food, score)
        return Recommendation(
            user_id=user.id,
            food_item=food,
            similarity_score=score,
            text=text,
        )
