"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from food_recommender.adapters.openai_llm_client import OpenAILanguageModelClient
from food_recommender.adapters.supabase_food_repository import SupabaseFoodRepository
from food_recommender.adapters.supabase_user_repository import SupabaseUserRepository
from food_recommender.config import Settings
from food_recommender.services.analysis import AnalysisService
from food_recommender.services.foods import FoodService
from food_recommender.services.llm import LanguageModelService
from food_recommender.services.recommendations import RecommendationService
from food_recommender.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    food_service: FoodService
    recommendation_service: RecommendationService
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings,
    models: LanguageModelService,
    user_service: UserService,
    food_service: FoodService,
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Assemble the pipeline services around already built dependencies."""
    recommendation_service = RecommendationService(
        user_service=user_service,
        food_service=food_service,
        models=models,
    )
    analysis_service = AnalysisService(
        user_service=user_service,
        food_service=food_service,
        recommendation_service=recommendation_service,
        models=models,
    )
    return AppContainer(
        settings=settings,
        user_service=user_service,
        food_service=food_service,
        recommendation_service=recommendation_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )


def supabase_options(settings: Settings) -> ClientOptions:
    """Client options whose HTTP timeout matches the store call deadline."""
    return ClientOptions(postgrest_client_timeout=settings.store_timeout_seconds)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=supabase_options(resolved_settings),
    )
    llm_client = OpenAILanguageModelClient.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )
    models = LanguageModelService(
        client=llm_client,
        vision_model=resolved_settings.vision_model,
        text_model=resolved_settings.text_model,
        embedding_model=resolved_settings.embedding_model,
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )
    user_service = UserService(
        repository=SupabaseUserRepository(supabase_client),
        models=models,
        store_timeout_seconds=resolved_settings.store_timeout_seconds,
    )
    food_service = FoodService(
        repository=SupabaseFoodRepository(supabase_client),
        store_timeout_seconds=resolved_settings.store_timeout_seconds,
    )

    async def close_resources() -> None:
        await llm_client.close()

    return build_services(
        settings=resolved_settings,
        models=models,
        user_service=user_service,
        food_service=food_service,
        close_resources=close_resources,
    )
