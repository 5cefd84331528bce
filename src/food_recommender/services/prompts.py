"""Prompt templates for captioning, nutrition extraction and recommendations."""

from collections.abc import Sequence

from food_recommender.domain.models import UserProfile
from food_recommender.domain.nutrition import NutritionRecord
from food_recommender.services.nutrition import DISH_LABEL, NUTRITION_LABELS

NOT_SPECIFIED = "Not specified"
NONE_SPECIFIED = "None specified"

CAPTION_PROMPT = (
    "Please analyze this image and describe the food dish present. Include: "
    "the name of the dish, the main ingredients visible, the type of cuisine, "
    "and whether it appears to be a complete dish or part of a larger meal. "
    "Be as specific and short as possible about the dish identity and the "
    "characteristics you can observe."
)

NUTRITION_EXAMPLE = "\n".join(
    [
        f"{DISH_LABEL}: Cheesecake",
        "Calories: 370-400",
        "Total Fat: 26-30g",
        "Cholesterol: 125mg",
        "Sodium: 300-350mg",
        "Carbohydrates: 30-35g",
        "Protein: 7-8g",
    ]
)


def caption_prompt() -> str:
    """Return the prompt sent with the image to the vision model."""
    return CAPTION_PROMPT


def nutrition_prompt(caption: str | None) -> str:
    """Return the prompt asking for nutrition facts of a captioned dish."""
    labels = ", ".join([DISH_LABEL, *NUTRITION_LABELS])
    return (
        f"Provide only the nutrition stats for the following dish: "
        f"{_text(caption)}\n\n"
        "Answer with exactly one 'Label: Value' pair per line, using exactly "
        f"these labels in this order: {labels}. Follow this example format:\n"
        f"{NUTRITION_EXAMPLE}\n\n"
        "No additional information is needed. Do not add any other text. "
        "Follow this rule strictly."
    )


def recommendation_prompt(
    profile: UserProfile,
    food_name: str | None,
    nutrition: NutritionRecord,
    similarity_score: float,
) -> str:
    """Return the prompt asking how well a food fits the user's profile."""
    values = nutrition.values()
    return f"""Analyze if this food item is suitable for the user based on their profile:

User Profile:
- Age: {_scalar(profile.age)}
- Caloric Target: {_scalar(profile.caloric_target)} calories
- Protein Target: {_scalar(profile.protein_target)}g
- Dietary Preferences: {_tags(profile.dietary_preferences)}
- Health Complications: {_tags(profile.complications)}

Food Item ({food_name or "Unknown"}):
- Calories: {values["calories"]} calories
- Protein: {values["protein"]}g
- Total Fat: {values["total_fat"]}g
- Carbohydrates: {values["carbohydrates"]}g
- Sodium: {values["sodium"]}mg
- Cholesterol: {values["cholesterol"]}mg

Embedding Similarity Score: {similarity_score * 100:.2f}%

Provide a concise analysis of how well this food aligns with the dietary needs \
and preferences above. Include the alignment percentage, explain any mismatches \
with the dietary requirements or health complications, and suggest 2-3 \
alternative dishes that would be a better match. Keep the response to a \
single, focused paragraph. Address the reader directly as "you" and "your" \
instead of referring to "the user"."""


def _scalar(value: float | None) -> str:
    if value is None:
        return NOT_SPECIFIED
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _tags(values: Sequence[str]) -> str:
    cleaned = [value for value in values if value]
    return ", ".join(cleaned) if cleaned else NONE_SPECIFIED


def _text(value: str | None) -> str:
    if value is None or not value.strip():
        return NOT_SPECIFIED
    return value.strip()
