"""ASGI entrypoint for the food recommender API."""

from food_recommender.api.app import create_app
from food_recommender.containers import build_container

app = create_app(build_container())
