"""Shared fixtures for unit tests."""

import pytest

from src.models.models import RecipeSuggestion
from src.orchestrator.recipe_book import RecipeBook
from src.utils.errors import ImageGenerationFailed, ImageSearchFailed

from fakes import FakeImageGenerator, FakeStockPhotos, FakeSuggester, InMemoryRecipeStore


@pytest.fixture
def tacos() -> RecipeSuggestion:
    return RecipeSuggestion(
        title="Tacos Vegetarianos",
        ingredients=["2 tortillas", "1 taza frijoles"],
        steps=["Calentar tortillas", "Rellenar con frijoles"],
    )


@pytest.fixture
def store() -> InMemoryRecipeStore:
    return InMemoryRecipeStore()


@pytest.fixture
def image_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def stock_photos() -> FakeStockPhotos:
    return FakeStockPhotos()


@pytest.fixture
def suggester(tacos) -> FakeSuggester:
    return FakeSuggester(tacos)


@pytest.fixture
def recipe_book(store, image_generator, stock_photos) -> RecipeBook:
    return RecipeBook(store, image_generator=image_generator, stock_photos=stock_photos)


@pytest.fixture
def failing_image_sources(image_generator, stock_photos):
    """Make every image source fail."""
    image_generator.failures["generate_image"] = ImageGenerationFailed("quota exceeded")
    stock_photos.failures["search"] = ImageSearchFailed("HTTP 503")


@pytest.fixture
def env(monkeypatch):
    """Minimal valid environment for Config."""
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test_supabase_key")
    monkeypatch.setenv("GEMINI_API_KEY", "test_gemini_key")
    return monkeypatch
