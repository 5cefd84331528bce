"""Error taxonomy for the analysis and enrollment pipelines."""


class PipelineError(Exception):
    """Base error carrying a machine-readable kind and the failing stage."""

    kind = "pipeline_error"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        food_item_id: int | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.stage = stage
        self.food_item_id = food_item_id

    def to_payload(self) -> dict[str, object]:
        """Return the caller-facing error body."""
        return {
            "error": self.kind,
            "detail": self.detail,
            "stage": self.stage,
            "food_item_id": self.food_item_id,
        }


class InputError(PipelineError):
    """Missing or invalid caller input."""

    kind = "input_error"


class NotFoundError(InputError):
    """A referenced user or food item does not exist."""

    kind = "not_found"


class UpstreamModelError(PipelineError):
    """A generation or embedding call returned no usable output."""

    kind = "upstream_model_error"


class EmbeddingFormatError(PipelineError):
    """An embedding could not be normalized into a numeric vector."""

    kind = "embedding_format_error"


class PersistenceError(PipelineError):
    """A store read or write failed."""

    kind = "persistence_error"
