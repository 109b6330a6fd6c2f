"""Data access protocol used by the RecipeBook orchestrator."""

from typing import Optional, Protocol

from src.models.models import Recipe, RecipeDraft


class RecipeStore(Protocol):
    """Record + blob store behaviour required by the orchestrator."""

    async def list_recipes(self) -> list[Recipe]:
        """Return stored recipes ordered newest first."""

    async def create_recipe(self, draft: RecipeDraft, image_url: Optional[str] = None) -> Recipe:
        """Persist a new recipe; the store assigns id and created_at."""

    async def update_recipe(self, recipe_id: str, **fields) -> Recipe:
        """Apply a partial update and return the stored row, or raise NotFound."""

    async def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe row, or raise NotFound."""

    async def upload_blob(self, data: bytes, suggested_name: str, overwrite: bool = False) -> str:
        """Store image bytes and return an immediately resolvable public URL."""

    async def delete_blob(self, url: Optional[str]) -> None:
        """Best-effort removal of a stored image. Never raises."""


__all__ = ["RecipeStore"]
