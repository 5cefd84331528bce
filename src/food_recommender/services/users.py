"""User enrollment and lookup."""

import logging
from dataclasses import dataclass
from typing import Protocol

from food_recommender.domain.errors import (
    InputError,
    NotFoundError,
    PipelineError,
    UpstreamModelError,
)
from food_recommender.domain.models import EnrollmentStage, UserProfile, UserRecord
from food_recommender.services.codec import is_numeric_vector, normalize_embedding
from food_recommender.services.llm import LanguageModelService
from food_recommender.services.store_calls import call_store

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def create_user(self, profile: UserProfile, embedding: list[float]) -> UserRecord:
        """Insert the profile and its embedding as one row and return it."""

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""


@dataclass
class UserService:
    """Application service for enrolling and resolving users."""

    repository: UserRepository
    models: LanguageModelService
    store_timeout_seconds: float = 30.0

    async def enroll(self, profile: UserProfile) -> UserRecord:
        """Embed a profile and persist it; no user is stored without a vector."""
        if profile.is_empty():
            raise InputError("Profile has no fields", stage=EnrollmentStage.RECEIVED)

        try:
            embedding = await self._embed(profile)
        except PipelineError as exc:
            exc.stage = exc.stage or EnrollmentStage.EMBEDDED
            raise

        try:
            user = await call_store(
                self.repository.create_user,
                profile,
                embedding,
                timeout_seconds=self.store_timeout_seconds,
                action="insert user",
            )
        except PipelineError as exc:
            exc.stage = exc.stage or EnrollmentStage.PERSISTED
            raise
        _logger.info("User stored: id=%s dimensions=%s", user.id, len(embedding))
        return user

    async def get_user(self, user_id: int) -> UserRecord:
        """Return a stored user or raise NotFoundError."""
        user = await call_store(
            self.repository.get_user,
            user_id,
            timeout_seconds=self.store_timeout_seconds,
            action="load user",
        )
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def _embed(self, profile: UserProfile) -> list[float]:
        raw = await self.models.embed(profile.to_embedding_input())
        embedding = normalize_embedding(raw)
        if not is_numeric_vector(embedding):
            raise UpstreamModelError(
                "Embedding service returned no usable vector for the profile"
            )
        return embedding
