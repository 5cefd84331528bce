"""State machine for photo-based food analysis."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_recommender.domain.analysis import AnalysisResult, AnalysisRun, AnalysisStage
from food_recommender.domain.errors import InputError, PipelineError, UpstreamModelError
from food_recommender.services.codec import is_numeric_vector, normalize_embedding
from food_recommender.services.foods import FoodService
from food_recommender.services.llm import LanguageModelService
from food_recommender.services.nutrition import (
    build_nutrition_record,
    dish_name,
    extract_fields,
)
from food_recommender.services.prompts import nutrition_prompt
from food_recommender.services.recommendations import RecommendationService
from food_recommender.services.users import UserService

_logger = logging.getLogger(__name__)

_MODEL_STAGES = frozenset(
    {
        AnalysisStage.CAPTIONED,
        AnalysisStage.NUTRITION_EXTRACTED,
        AnalysisStage.EMBEDDED,
        AnalysisStage.RECOMMENDED,
    }
)


@dataclass
class AnalysisService:
    """Drives an image through captioning, extraction, storage and advice.

    Each transition moves a run one stage forward. A failure stops the run in
    the failed state with the stage that was being entered; anything already
    persisted stays persisted.
    """

    user_service: UserService
    food_service: FoodService
    recommendation_service: RecommendationService
    models: LanguageModelService

    async def analyze(
        self, user_id: int | None, image_bytes: bytes | None
    ) -> AnalysisResult:
        """Analyze an image for a user and return the completed result."""
        if not image_bytes:
            raise InputError(
                "No image file provided", stage=AnalysisStage.RECEIVED.value
            )
        if user_id is None:
            raise InputError("Missing user id", stage=AnalysisStage.RECEIVED.value)
        user = await self.user_service.get_user(user_id)

        run = AnalysisRun(user=user, image_bytes=image_bytes)
        await self.execute(run)
        if run.error is not None:
            raise run.error
        return run.result()

    async def execute(self, run: AnalysisRun) -> AnalysisRun:
        """Advance a run until it completes or fails."""
        while not run.finished:
            target, transition = self._transitions()[run.stage]
            try:
                await transition(run)
            except PipelineError as exc:
                _logger.warning("Analysis failed at %s: %s", target, exc.detail)
                run.fail(target, exc)
                break
            except Exception as exc:
                _logger.exception("Analysis failed at %s", target)
                error_type = (
                    UpstreamModelError if target in _MODEL_STAGES else PipelineError
                )
                error = error_type(f"Unexpected failure: {exc}")
                error.__cause__ = exc
                run.fail(target, error)
                break
            run.stage = target
            _logger.info("Analysis stage: %s", target)
        return run

    def _transitions(
        self,
    ) -> dict[
        AnalysisStage,
        tuple[AnalysisStage, Callable[[AnalysisRun], Awaitable[None]]],
    ]:
        return {
            AnalysisStage.RECEIVED: (AnalysisStage.CAPTIONED, self.caption),
            AnalysisStage.CAPTIONED: (
                AnalysisStage.NUTRITION_EXTRACTED,
                self.extract_nutrition,
            ),
            AnalysisStage.NUTRITION_EXTRACTED: (AnalysisStage.EMBEDDED, self.embed),
            AnalysisStage.EMBEDDED: (AnalysisStage.PERSISTED, self.persist),
            AnalysisStage.PERSISTED: (AnalysisStage.SCORED, self.score),
            AnalysisStage.SCORED: (AnalysisStage.RECOMMENDED, self.recommend),
            AnalysisStage.RECOMMENDED: (AnalysisStage.COMPLETE, self.complete),
        }

    async def caption(self, run: AnalysisRun) -> None:
        """Describe the dish in the image with the vision model."""
        run.caption = await self.models.caption(run.image_bytes)

    async def extract_nutrition(self, run: AnalysisRun) -> None:
        """Ask for nutrition facts and parse them into a record."""
        text = await self.models.complete(nutrition_prompt(run.caption))
        fields = extract_fields(text)
        name = dish_name(fields)
        if name is None:
            raise UpstreamModelError("Nutrition response did not name the dish")
        run.fields = fields
        run.food_name = name
        run.nutrition = build_nutrition_record(fields)

    async def embed(self, run: AnalysisRun) -> None:
        """Embed the parsed nutrition mapping; an unusable vector is dropped."""
        raw = await self.models.embed(json.dumps(run.fields))
        embedding = normalize_embedding(raw)
        if embedding is not None and not is_numeric_vector(embedding):
            _logger.warning("Food embedding has non-numeric values; storing none")
            embedding = None
        run.embedding = embedding

    async def persist(self, run: AnalysisRun) -> None:
        """Store the food item in a single write."""
        run.food_item = await self.food_service.save(
            run.food_name or "Unknown",
            run.embedding,
            run.nutrition or build_nutrition_record(run.fields),
        )
        _logger.info("Food item stored: id=%s", run.food_item.id)

    async def score(self, run: AnalysisRun) -> None:
        """Compare the food embedding to the user's; never fails."""
        run.similarity_score = self.recommendation_service.score(
            run.user, run.food_item
        )

    async def recommend(self, run: AnalysisRun) -> None:
        """Generate the recommendation paragraph."""
        run.recommendation = await self.recommendation_service.advise(
            run.user, run.food_item, run.similarity_score or 0.0
        )

    async def complete(self, run: AnalysisRun) -> None:
        """Final transition; the result is assembled by the run itself."""
