"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from food_recommender.config import Settings
from food_recommender.containers import AppContainer, build_services
from food_recommender.domain.errors import PersistenceError
from food_recommender.domain.models import UserProfile, UserRecord
from food_recommender.domain.nutrition import FoodItem, NutritionRecord
from food_recommender.services.foods import FoodRepository, FoodService
from food_recommender.services.llm import LanguageModelClient, LanguageModelService
from food_recommender.services.users import UserRepository, UserService

NUTRITION_TEXT = """Food Item: Cheesecake
Calories: 370-400
Total Fat: 26-30g
Cholesterol: 125mg
Sodium: 300-350mg
Carbohydrates: 30-35g (Sugars: 24-28g)
Protein: 7-8g
"""

CAPTION_TEXT = "New York cheesecake slice with a graham cracker crust, American."

RECOMMENDATION_TEXT = (
    "This cheesecake aligns about 100% with your profile, but its sugar is high "
    "for your goals; try Greek yogurt with berries or a chia pudding instead."
)


@dataclass
class FakeLanguageModelClient(LanguageModelClient):
    """Scripted language model client that records every call."""

    captions: list[str | None] = field(default_factory=lambda: [CAPTION_TEXT])
    completions: list[str | None] = field(
        default_factory=lambda: [NUTRITION_TEXT, RECOMMENDATION_TEXT]
    )
    embeddings: list[object] = field(default_factory=lambda: [[0.1, 0.2, 0.3]])
    generate_calls: list[dict[str, object]] = field(default_factory=list)
    embed_calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str | None:
        self.generate_calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        queue = self.captions if image_data_url else self.completions
        return queue.pop(0) if queue else None

    async def embed(self, *, model: str, text: str) -> object:
        self.embed_calls.append({"model": model, "text": text})
        return self.embeddings.pop(0) if self.embeddings else None


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Chainable stand-in for a Supabase table query builder."""

    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": []}
    )
    last_payload: object | None = None
    last_columns: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    inserts: int = 0

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, columns: str) -> "FakeTable":
        self._action = "select"
        self.last_columns = columns
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        self.inserts += 1
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[int, UserRecord] = field(default_factory=dict)

    def create_user(self, profile: UserProfile, embedding: list[float]) -> UserRecord:
        user = UserRecord(id=len(self.users) + 1, profile=profile, embedding=embedding)
        self.users[user.id] = user
        return user

    def get_user(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food item repository for tests."""

    foods: dict[int, FoodItem] = field(default_factory=dict)
    fail_writes: bool = False

    def create_food(
        self, name: str, embedding: list[float] | None, nutrition: NutritionRecord
    ) -> FoodItem:
        if self.fail_writes:
            raise PersistenceError("database unavailable")
        food = FoodItem(
            id=len(self.foods) + 1,
            name=name,
            nutrition=nutrition,
            embedding=embedding,
        )
        self.foods[food.id] = food
        return food

    def get_food(self, food_item_id: int) -> FoodItem | None:
        return self.foods.get(food_item_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="test-key",
    )


@pytest.fixture
def llm_client() -> FakeLanguageModelClient:
    return FakeLanguageModelClient()


@pytest.fixture
def models(llm_client: FakeLanguageModelClient) -> LanguageModelService:
    return LanguageModelService(
        client=llm_client,
        vision_model="llava:7b",
        text_model="mistral",
        embedding_model="mistral",
        timeout_seconds=5,
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def stored_user(user_repository: InMemoryUserRepository) -> UserRecord:
    profile = UserProfile(
        age=30,
        caloric_target=2000,
        protein_target=120,
        dietary_preferences=["vegetarian"],
        complications=["diabetes"],
    )
    return user_repository.create_user(profile, [0.1, 0.2, 0.3])


@pytest.fixture
def container(
    settings: Settings,
    models: LanguageModelService,
    user_repository: InMemoryUserRepository,
    food_repository: InMemoryFoodRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return build_services(
        settings=settings,
        models=models,
        user_service=UserService(repository=user_repository, models=models),
        food_service=FoodService(repository=food_repository),
        close_resources=close_resources,
    )
