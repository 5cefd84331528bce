"""Normalization of embeddings and tag lists coming from models or the store."""

import json
import logging
import math
from collections.abc import Mapping, Sequence

from food_recommender.domain.errors import EmbeddingFormatError

_VECTOR_KEYS = ("vector", "embedding")

_logger = logging.getLogger(__name__)


def decode_embedding(raw: object) -> list:
    """Return the embedding as a list or raise EmbeddingFormatError."""
    if isinstance(raw, list):
        return _unwrap_single(raw)
    if isinstance(raw, tuple):
        return _unwrap_single(list(raw))
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            raise EmbeddingFormatError(f"Unparseable embedding text: {exc}") from exc
        if not isinstance(parsed, list):
            raise EmbeddingFormatError(
                f"Embedding text decoded to {type(parsed).__name__}, expected a list"
            )
        return _unwrap_single(parsed)
    if isinstance(raw, Mapping):
        for key in _VECTOR_KEYS:
            if key in raw:
                return decode_embedding(raw[key])
    raise EmbeddingFormatError(f"Unknown embedding format: {type(raw).__name__}")


def normalize_embedding(raw: object) -> list | None:
    """Return the embedding as a list, or None if it cannot be decoded."""
    try:
        return decode_embedding(raw)
    except EmbeddingFormatError as exc:
        _logger.warning("Embedding unavailable: %s", exc.detail)
        return None


def is_numeric_vector(values: object) -> bool:
    """Return True for a non-empty list of finite real numbers."""
    if not isinstance(values, list) or not values:
        return False
    return all(
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        for value in values
    )


def encode_vector(vector: Sequence[float]) -> str:
    """Render a vector as a pgvector literal."""
    return "[" + ",".join(str(float(value)) for value in vector) + "]"


def coerce_tags(raw: object) -> list[str]:
    """Materialize a tag list stored either as a list or a delimited string."""
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, Sequence):
        items = [str(item) for item in raw if item is not None]
    else:
        return []
    return [item.strip() for item in items if item.strip()]


def _unwrap_single(values: list) -> list:
    """Unwrap a batch response holding exactly one vector."""
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        return list(values[0])
    return values
