"""RecipeBook: owner of the in-memory recipe collection.

Sequences every write against the store and keeps local state in line with it:

- New recipes are created without an image first, so a stable id exists before
  any blob is uploaded. The image is attached afterwards with a second write; if
  that fails the recipe stays, without image.
- Refresh rule: refetch the whole list after a multi-step write (create then
  attach), merge the returned row directly after a single-step write.
- Replacing an image uploads the new blob and updates the record before the
  old blob is removed, so the record never references a deleted image.
- Deleting removes the record first and only then, best-effort, its image.
- Chat suggestions are illustrated by the image model, else by a stock photo,
  else not at all; the fallback chain never prevents the save.

Every public action returns an ActionResult; store and oracle failures are
logged and turned into notices here, never re-raised.
"""

from typing import Optional

from src.models.models import ActionResult, ImageUpload, Notice, Recipe, RecipeDraft, RecipeSuggestion
from src.oracle.gemini import ImageGenerator
from src.oracle.stock_photos import StockPhotoSearch
from src.orchestrator.lines import decode_lines, encode_lines
from src.store.base import RecipeStore
from src.utils.errors import (
    FallbackExhausted,
    NotFound,
    PermissionDenied,
    RecipeBookError,
    RecipeValidationError,
)
from src.utils.images import compress_image, validate_image_format, validate_image_size
from src.utils.logger import logger


def describe_error(error: RecipeBookError, action: str, subject: str = "the recipe") -> Notice:
    """Map a typed error to the notice shown to the user.

    Args:
        error: Typed failure from the store or an oracle.
        action: Verb for the failed action ("save", "delete", "load").
        subject: What the action was applied to.
    """
    if isinstance(error, PermissionDenied):
        message = (
            f"Permission denied by backend policy: could not {action} {subject}. "
            "Check the row-level security and storage policies."
        )
    elif isinstance(error, RecipeValidationError):
        message = error.message
    else:
        message = f"Could not {action} {subject}: {error.message}"
    return Notice(level="error", message=message, kind=error.kind)


class RecipeBook:
    """Recipe collection state and save/delete orchestration."""

    def __init__(
        self,
        store: RecipeStore,
        image_generator: Optional[ImageGenerator] = None,
        stock_photos: Optional[StockPhotoSearch] = None,
        *,
        max_image_size_mb: int = 5,
        compress_images: bool = True,
        compress_threshold_kb: int = 300,
    ) -> None:
        self.store = store
        self.image_generator = image_generator
        self.stock_photos = stock_photos
        self.max_image_size_mb = max_image_size_mb
        self.compress_images = compress_images
        self.compress_threshold_kb = compress_threshold_kb
        # Newest first, same order as the store lists them
        self.recipes: list[Recipe] = []

    # ------------------------------------------------------------------
    # Local state
    # ------------------------------------------------------------------

    def find(self, recipe_id: str) -> Optional[Recipe]:
        return next((recipe for recipe in self.recipes if recipe.id == recipe_id), None)

    def search(self, text: str) -> list[Recipe]:
        """Case-insensitive filter over titles and ingredients."""
        needle = (text or "").strip().lower()
        if not needle:
            return list(self.recipes)
        return [
            recipe
            for recipe in self.recipes
            if needle in recipe.title.lower()
            or any(needle in item.lower() for item in decode_lines(recipe.ingredients))
        ]

    def _merge(self, recipe: Recipe) -> None:
        for index, existing in enumerate(self.recipes):
            if existing.id == recipe.id:
                self.recipes[index] = recipe
                return
        self.recipes.insert(0, recipe)

    def _remove(self, recipe_id: str) -> None:
        self.recipes = [recipe for recipe in self.recipes if recipe.id != recipe_id]

    async def _refetch(self, written: Recipe) -> None:
        """Reload the list after a multi-step write, merging locally if that fails."""
        try:
            self.recipes = await self.store.list_recipes()
        except RecipeBookError as e:
            logger.warning(f"Refresh after write failed, merging locally: {e.message}")
            self._merge(written)

    def _fail(self, error: RecipeBookError, action: str, subject: str = "the recipe") -> ActionResult:
        logger.error(f"Recipe {action} failed ({error.kind.value}): {error.message}")
        return ActionResult(notice=describe_error(error, action, subject))

    # ------------------------------------------------------------------
    # Public actions
    # ------------------------------------------------------------------

    async def refresh(self) -> ActionResult:
        """Replace local state with the store's authoritative list."""
        try:
            self.recipes = await self.store.list_recipes()
        except RecipeBookError as e:
            return self._fail(e, "load", "the recipes")
        logger.info(f"Loaded {len(self.recipes)} recipes")
        return ActionResult(notice=Notice(level="success", message=f"Loaded {len(self.recipes)} recipes."))

    async def save_recipe(
        self,
        draft: RecipeDraft,
        image: Optional[ImageUpload] = None,
        recipe_id: Optional[str] = None,
    ) -> ActionResult:
        """Create a recipe, or update one when recipe_id is given.

        Args:
            draft: Title, ingredients and steps as entered by the user.
            image: Optional new image file.
            recipe_id: Id of the recipe being edited, None to create.
        """
        if not draft.title:
            return self._fail(RecipeValidationError("Please provide a recipe title."), "save")

        image_data = None
        if image is not None:
            try:
                image_data = self._prepare_image(image.data)
            except RecipeValidationError as e:
                return self._fail(e, "save")

        if recipe_id:
            return await self._update_existing(recipe_id, draft, image_data, image.filename if image else "")
        return await self._create(draft, image_data=image_data, image_name=image.filename if image else "")

    async def delete_recipe(self, recipe_id: str) -> ActionResult:
        """Delete the record, then its image (best-effort)."""
        current = self.find(recipe_id)
        try:
            await self.store.delete_recipe(recipe_id)
        except NotFound as e:
            # Already gone from the store: drop the stale local copy too
            self._remove(recipe_id)
            return self._fail(e, "delete")
        except RecipeBookError as e:
            return self._fail(e, "delete")

        if current is None:
            logger.warning(
                "Deleted recipe was not loaded locally, its image will not be cleaned up",
                extra={"recipe_id": recipe_id},
            )
        elif current.image_url:
            await self.store.delete_blob(current.image_url)

        self._remove(recipe_id)
        return ActionResult(recipe=current, notice=Notice(level="success", message="Recipe deleted."))

    async def save_suggestion(self, suggestion: RecipeSuggestion) -> ActionResult:
        """Persist an accepted chat suggestion, illustrated when possible."""
        draft = RecipeDraft(
            title=suggestion.title,
            ingredients=encode_lines(suggestion.ingredients),
            steps=encode_lines(suggestion.steps),
        )
        if not draft.title:
            return self._fail(RecipeValidationError("The suggestion has no title."), "save")

        try:
            image_data, image_url = await self._illustrate(suggestion.title)
        except FallbackExhausted as e:
            logger.warning(f"Saving suggestion without image: {e.message}")
            image_data, image_url = None, None

        return await self._create(draft, image_data=image_data, image_name=suggestion.title, image_url=image_url)

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def _prepare_image(self, data: bytes) -> bytes:
        if not data or not validate_image_format(data):
            raise RecipeValidationError("Unsupported image format. Allowed formats: JPEG, PNG, WEBP, GIF.")
        if not validate_image_size(data, self.max_image_size_mb):
            raise RecipeValidationError(f"Image is too large. Maximum size is {self.max_image_size_mb}MB.")
        if self.compress_images:
            data = compress_image(data, self.compress_threshold_kb)
        return data

    async def _create(
        self,
        draft: RecipeDraft,
        *,
        image_data: Optional[bytes] = None,
        image_name: str = "",
        image_url: Optional[str] = None,
    ) -> ActionResult:
        try:
            recipe = await self.store.create_recipe(draft, image_url=None)
        except RecipeBookError as e:
            return self._fail(e, "save")

        if image_data is None and image_url is None:
            self._merge(recipe)
            return ActionResult(recipe=recipe, notice=Notice(level="success", message=f"Recipe '{recipe.title}' saved."))

        attached = await self._attach_image(recipe, image_data, image_name, image_url)
        if attached is None:
            self._merge(recipe)
            return ActionResult(
                recipe=recipe,
                notice=Notice(level="warning", message=f"Recipe '{recipe.title}' saved, but its image could not be stored."),
            )

        await self._refetch(attached)
        return ActionResult(recipe=attached, notice=Notice(level="success", message=f"Recipe '{attached.title}' saved."))

    async def _attach_image(
        self,
        recipe: Recipe,
        image_data: Optional[bytes],
        image_name: str,
        image_url: Optional[str],
    ) -> Optional[Recipe]:
        """Upload (if bytes) and point the recipe at the image. None on failure."""
        uploaded_url = None
        try:
            if image_data is not None:
                uploaded_url = await self.store.upload_blob(image_data, image_name or recipe.title)
                image_url = uploaded_url
            return await self.store.update_recipe(recipe.id, image_url=image_url)
        except RecipeBookError as e:
            logger.warning(
                f"Recipe kept without image ({e.kind.value}): {e.message}",
                extra={"recipe_id": recipe.id},
            )
            if uploaded_url:
                await self.store.delete_blob(uploaded_url)
            return None

    async def _update_existing(
        self,
        recipe_id: str,
        draft: RecipeDraft,
        image_data: Optional[bytes],
        image_name: str,
    ) -> ActionResult:
        fields: dict = {"title": draft.title, "ingredients": draft.ingredients, "steps": draft.steps}
        degraded = False
        uploaded_url = None
        old_url = None

        if image_data is not None:
            current = self.find(recipe_id)
            if current is None:
                logger.warning(
                    "Recipe not loaded locally, its previous image will not be cleaned up",
                    extra={"recipe_id": recipe_id},
                )
            else:
                old_url = current.image_url
            try:
                uploaded_url = await self.store.upload_blob(image_data, image_name or draft.title)
                fields["image_url"] = uploaded_url
            except RecipeBookError as e:
                logger.warning(f"New image not stored ({e.kind.value}): {e.message}", extra={"recipe_id": recipe_id})
                degraded = True

        try:
            recipe = await self.store.update_recipe(recipe_id, **fields)
        except RecipeBookError as e:
            if uploaded_url:
                await self.store.delete_blob(uploaded_url)
            if isinstance(e, NotFound):
                self._remove(recipe_id)
            return self._fail(e, "save")

        # The old image goes only once the record points at the new one
        if uploaded_url and old_url and old_url != uploaded_url:
            await self.store.delete_blob(old_url)

        self._merge(recipe)
        if degraded:
            return ActionResult(
                recipe=recipe,
                notice=Notice(level="warning", message=f"Recipe '{recipe.title}' updated, but its new image could not be stored."),
            )
        return ActionResult(recipe=recipe, notice=Notice(level="success", message=f"Recipe '{recipe.title}' updated."))

    async def _illustrate(self, title: str) -> tuple[Optional[bytes], Optional[str]]:
        """Find an image for a suggestion: generated bytes, else a stock photo URL.

        Raises:
            FallbackExhausted: If every image source failed.
        """
        if self.image_generator is not None:
            try:
                generated = await self.image_generator.generate_image(title)
                return self._prepare_image(generated), None
            except RecipeBookError as e:
                logger.warning(f"Image generation unavailable, trying stock photo: {e.message}")

        if self.stock_photos is not None:
            try:
                return None, await self.stock_photos.search(title)
            except RecipeBookError as e:
                logger.warning(f"Stock photo search failed: {e.message}")

        raise FallbackExhausted(f"No image source produced an image for '{title}'")


__all__ = ["RecipeBook", "describe_error"]
