"""Unit tests for Pydantic data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.models.models import (
    ActionResult,
    ChatMessage,
    MessageState,
    Notice,
    Recipe,
    RecipeDraft,
    RecipeSuggestion,
    Role,
)
from src.utils.errors import ErrorKind


class TestRecipe:
    """Test the persisted Recipe model."""

    def test_row_from_store(self):
        """A Supabase row maps onto the model."""
        recipe = Recipe.model_validate(
            {
                "id": 7,
                "title": "Pancakes",
                "ingredients": "2 eggs\n1 cup flour",
                "steps": None,
                "image_url": None,
                "created_at": "2024-05-01T10:00:00+00:00",
            }
        )

        assert recipe.id == "7"
        assert recipe.steps == ""
        assert recipe.image_url is None
        assert recipe.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_uuid_id_is_opaque(self):
        recipe = Recipe(id="0b7c7a8e-5d1c-4c8e-9f59-7a8c2b1d3e4f", title="Soup")
        assert recipe.id == "0b7c7a8e-5d1c-4c8e-9f59-7a8c2b1d3e4f"

    def test_title_required(self):
        with pytest.raises(ValidationError):
            Recipe(id="1", title="")

    def test_recipe_is_immutable(self):
        recipe = Recipe(id="1", title="Soup")

        with pytest.raises(ValidationError):
            recipe.title = "Stew"


class TestRecipeDraft:
    """Test form input model."""

    def test_whitespace_is_stripped(self):
        draft = RecipeDraft(title="  Pancakes  ", ingredients=" eggs \n", steps="")

        assert draft.title == "Pancakes"
        assert draft.ingredients == "eggs"

    def test_blank_title_allowed_in_draft(self):
        """Drafts may be incomplete; the orchestrator rejects them."""
        assert RecipeDraft(title="   ").title == ""


class TestRecipeSuggestion:
    """Test oracle suggestion model."""

    def test_valid_suggestion(self):
        suggestion = RecipeSuggestion(title="Tacos", ingredients=["tortillas"], steps=["Heat"])

        assert suggestion.ingredients == ["tortillas"]

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            RecipeSuggestion(title="  ", ingredients=[], steps=[])

    def test_lists_required(self):
        with pytest.raises(ValidationError):
            RecipeSuggestion(title="Tacos", ingredients="tortillas", steps=["Heat"])

    def test_title_length_limit(self):
        with pytest.raises(ValidationError):
            RecipeSuggestion(title="x" * 201, ingredients=[], steps=[])

    def test_json_schema_has_descriptions(self):
        """The schema is sent to the model, descriptions included."""
        schema = RecipeSuggestion.model_json_schema()

        assert set(schema["required"]) == {"title", "ingredients", "steps"}
        assert "description" in schema["properties"]["ingredients"]


class TestChatMessage:
    def test_awaiting_decision(self):
        message = ChatMessage(id="1", role=Role.ASSISTANT, content="...", state=MessageState.AWAITING_DECISION)

        assert message.awaiting_decision
        message.state = None
        assert not message.awaiting_decision


class TestActionResult:
    """Test notice levels and the ok property."""

    @pytest.mark.parametrize("level,ok", [("success", True), ("warning", True), ("error", False)])
    def test_ok(self, level, ok):
        assert ActionResult(notice=Notice(level=level, message="m")).ok is ok

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            Notice(level="info", message="m")

    def test_notice_kind(self):
        notice = Notice(level="error", message="m", kind=ErrorKind.PERMISSION_DENIED)
        assert notice.kind == "permission_denied"
