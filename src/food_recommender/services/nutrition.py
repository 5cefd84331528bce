"""Parsing of model-generated nutrition text into nutrition records."""

import logging
import re
from collections.abc import Mapping

from food_recommender.domain.nutrition import NUTRITION_FIELDS, NutritionRecord

DISH_LABEL = "Food Item"

NUTRITION_LABELS: dict[str, str] = {
    "Calories": "calories",
    "Protein": "protein",
    "Total Fat": "total_fat",
    "Carbohydrates": "carbohydrates",
    "Sodium": "sodium",
    "Cholesterol": "cholesterol",
}

# Keys used by payloads written before values were resolved upstream.
_LEGACY_PAYLOAD_KEYS: dict[str, str] = {
    "totalFat": "total_fat",
}

_INTEGER_PATTERN = re.compile(r"\d+")
_LABEL_DECORATION = " \t-*•#_"

_logger = logging.getLogger(__name__)


def extract_fields(text: str) -> dict[str, str]:
    """Split `Label: Value` lines into a mapping; the last duplicate wins."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        label, separator, value = line.partition(":")
        if not separator:
            continue
        label = label.strip()
        if not label:
            continue
        fields[label] = value.strip()
    return fields


def resolve_range(value: str | None) -> str:
    """Resolve `370-400 calories` style values to one representative integer."""
    if not value:
        return "0"
    numbers = _INTEGER_PATTERN.findall(value)
    if not numbers:
        return "0"
    if len(numbers) == 1:
        return numbers[0]
    total = int(numbers[0]) + int(numbers[1])
    return str((total + 1) // 2)


def dish_name(fields: Mapping[str, str]) -> str | None:
    """Return the dish name reported by the model, if any."""
    for label, value in fields.items():
        if _canonical_label(label) == DISH_LABEL.lower() and value.strip():
            return value.strip()
    return None


def build_nutrition_record(fields: Mapping[str, str]) -> NutritionRecord:
    """Resolve the six nutrition labels of a parsed mapping into a record."""
    by_label = {_canonical_label(label): value for label, value in fields.items()}
    values: dict[str, int] = {}
    ranges: dict[str, str] = {}
    for label, name in NUTRITION_LABELS.items():
        raw = by_label.get(label.lower())
        if raw is None:
            _logger.debug("Nutrition label missing from model output: %s", label)
            values[name] = 0
            continue
        ranges[name] = raw
        values[name] = int(resolve_range(raw))
    return NutritionRecord(**values, ranges=ranges)


def nutrition_record_from_payload(payload: object) -> NutritionRecord:
    """Rebuild a nutrition record from a stored payload."""
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    if not isinstance(payload, Mapping):
        return NutritionRecord()
    stored_ranges = payload.get("ranges")
    ranges: dict[str, str] = (
        {str(key): str(value) for key, value in stored_ranges.items()}
        if isinstance(stored_ranges, Mapping)
        else {}
    )
    values: dict[str, int] = {}
    for key, raw in payload.items():
        name = _LEGACY_PAYLOAD_KEYS.get(key, key)
        if name not in NUTRITION_FIELDS or raw is None:
            continue
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            values[name] = round(raw)
        else:
            ranges.setdefault(name, str(raw))
            values[name] = int(resolve_range(str(raw)))
    return NutritionRecord(**values, ranges=ranges)


def _canonical_label(label: str) -> str:
    return label.strip(_LABEL_DECORATION).lower()
