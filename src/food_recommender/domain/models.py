"""Domain models for users and their nutritional profiles."""

import json
from dataclasses import asdict, dataclass, field
from enum import StrEnum


class EnrollmentStage(StrEnum):
    """Stages of enrolling a user."""

    RECEIVED = "received"
    EMBEDDED = "embedded"
    PERSISTED = "persisted"


@dataclass(frozen=True)
class UserProfile:
    """Nutritional profile captured at enrollment."""

    age: float | None = None
    height: float | None = None
    weight: float | None = None
    caloric_target: float | None = None
    protein_target: float | None = None
    dietary_preferences: list[str] = field(default_factory=list)
    complications: list[str] = field(default_factory=list)

    def provided_fields(self) -> dict[str, object]:
        """Return the fields that were supplied, in declaration order."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def is_empty(self) -> bool:
        """Return True when no scalar or tag was supplied."""
        return not any(value not in (None, []) for value in asdict(self).values())

    def to_embedding_input(self) -> str:
        """Serialize the supplied fields as the text sent to the embedder."""
        return json.dumps(self.provided_fields())


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: int
    profile: UserProfile
    embedding: list[float] | None
