"""Domain models for food analysis runs."""

from dataclasses import dataclass, field
from enum import StrEnum

from food_recommender.domain.errors import PipelineError
from food_recommender.domain.models import UserRecord
from food_recommender.domain.nutrition import FoodItem, NutritionRecord


class AnalysisStage(StrEnum):
    """Stages of a single image analysis."""

    RECEIVED = "received"
    CAPTIONED = "captioned"
    NUTRITION_EXTRACTED = "nutrition_extracted"
    EMBEDDED = "embedded"
    PERSISTED = "persisted"
    SCORED = "scored"
    RECOMMENDED = "recommended"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class Recommendation:
    """Similarity score and generated advice for a user and a food item."""

    user_id: int
    food_item: FoodItem
    similarity_score: float
    text: str


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of a completed analysis."""

    food_item: FoodItem
    similarity_score: float
    recommendation: str
    caption: str
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class AnalysisRun:
    """Mutable state carried through one analysis."""

    user: UserRecord
    image_bytes: bytes
    stage: AnalysisStage = AnalysisStage.RECEIVED
    caption: str | None = None
    fields: dict[str, str] = field(default_factory=dict)
    food_name: str | None = None
    nutrition: NutritionRecord | None = None
    embedding: list[float] | None = None
    food_item: FoodItem | None = None
    similarity_score: float | None = None
    recommendation: str | None = None
    failed_stage: AnalysisStage | None = None
    error: PipelineError | None = None

    @property
    def finished(self) -> bool:
        """Return True once the run is complete or failed."""
        return self.stage in {AnalysisStage.COMPLETE, AnalysisStage.FAILED}

    def fail(self, stage: AnalysisStage, error: PipelineError) -> None:
        """Move the run to the failed state."""
        if error.stage is None:
            error.stage = stage.value
        if error.food_item_id is None and self.food_item is not None:
            error.food_item_id = self.food_item.id
        self.failed_stage = stage
        self.error = error
        self.stage = AnalysisStage.FAILED

    def result(self) -> AnalysisResult:
        """Return the assembled result of a completed run."""
        if self.stage is not AnalysisStage.COMPLETE or self.food_item is None:
            raise RuntimeError(f"Analysis is not complete (stage={self.stage})")
        return AnalysisResult(
            food_item=self.food_item,
            similarity_score=self.similarity_score or 0.0,
            recommendation=self.recommendation or "",
            caption=self.caption or "",
            fields=dict(self.fields),
        )
