"""Cosine similarity between a user embedding and a food embedding."""

import logging
import math

from food_recommender.services.codec import normalize_embedding

_logger = logging.getLogger(__name__)


def cosine_similarity(first: object, second: object) -> float:
    """Return the cosine similarity of two embeddings, or 0.0 when undefined.

    Both operands go through the embedding codec first. Missing or mismatched
    vectors score 0.0. Coordinates that cannot be read as numbers are skipped
    rather than failing the comparison, and a zero-norm vector scores 0.0.
    """
    vec1 = normalize_embedding(first)
    vec2 = normalize_embedding(second)
    if vec1 is None or vec2 is None:
        _logger.warning("Similarity skipped: embedding unavailable")
        return 0.0
    if len(vec1) != len(vec2):
        _logger.warning(
            "Embedding length mismatch: %s vs %s", len(vec1), len(vec2)
        )
        return 0.0

    dot_product = 0.0
    norm1 = 0.0
    norm2 = 0.0
    skipped = 0
    for left, right in zip(vec1, vec2, strict=True):
        v1 = _to_number(left)
        v2 = _to_number(right)
        if v1 is None or v2 is None:
            skipped += 1
            continue
        dot_product += v1 * v2
        norm1 += v1 * v1
        norm2 += v2 * v2

    if skipped:
        _logger.debug("Skipped %s invalid embedding coordinates", skipped)

    denominator = math.sqrt(norm1) * math.sqrt(norm2)
    if denominator == 0.0:
        return 0.0
    similarity = dot_product / denominator
    if not math.isfinite(similarity):
        return 0.0
    return similarity


def _to_number(value: object) -> float | None:
    """Coerce an embedding coordinate to a finite float."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
