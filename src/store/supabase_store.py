"""Supabase-backed recipe storage: a `recipes` table plus an image bucket.

The supabase-py client is synchronous, so every call runs in a worker thread
via asyncio.to_thread. Backend exceptions never leave this module raw: they are
classified into typed RecipeBookError subclasses by classify_store_error.
"""

import asyncio
import re
import time
import uuid
from typing import Callable, Optional, TypeVar

import httpx
import pydantic
from postgrest.exceptions import APIError
from supabase import Client, create_client

from src.models.models import Recipe, RecipeDraft
from src.utils.config import Config
from src.utils.errors import (
    NotFound,
    PermissionDenied,
    RecipeBookError,
    RecipeValidationError,
    StoreUnavailable,
    safe_execute_async,
)
from src.utils.images import detect_image_type
from src.utils.logger import logger


T = TypeVar("T")

UPDATABLE_FIELDS = ("title", "ingredients", "steps", "image_url")

# PostgREST: insufficient_privilege (RLS) and JWT errors
PERMISSION_CODES = {"42501", "PGRST301", "PGRST302"}
PERMISSION_STATUSES = {401, 403}
POLICY_MESSAGE = re.compile(r"row-level security|security policy|permission denied", re.IGNORECASE)


def classify_store_error(exc: Exception) -> RecipeBookError:
    """Map a backend exception to a typed RecipeBookError.

    Args:
        exc: Exception raised by supabase-py, postgrest, storage or httpx.

    Returns:
        PermissionDenied for authorization/policy rejections, StoreUnavailable
        for everything else. Already-typed errors are returned unchanged.
    """
    if isinstance(exc, RecipeBookError):
        return exc
    if isinstance(exc, httpx.TransportError):
        return StoreUnavailable(f"Recipe store unreachable: {exc}")

    message = getattr(exc, "message", None) or str(exc)
    code = str(getattr(exc, "code", "") or "")
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    if code in PERMISSION_CODES or status in PERMISSION_STATUSES or POLICY_MESSAGE.search(message):
        return PermissionDenied(message)
    if isinstance(exc, APIError):
        return StoreUnavailable(f"Recipe store rejected the request: {message}")
    return StoreUnavailable(message)


def _row_to_recipe(row: dict) -> Recipe:
    try:
        return Recipe.model_validate(row)
    except pydantic.ValidationError as e:
        raise StoreUnavailable(f"Recipe store returned a malformed row: {e.error_count()} invalid field(s)") from e


def _safe_object_name(name: str) -> str:
    stem = name.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    stem = re.sub(r"[^A-Za-z0-9_-]+", "-", stem).strip("-").lower()
    return stem or "image"


class SupabaseRecipeStore:
    """Recipe store backed by a Supabase table and storage bucket."""

    def __init__(self, config: Config, client: Optional[Client] = None) -> None:
        """Initialize the store.

        Args:
            config: Validated configuration (URL, key, table and bucket names).
            client: Optional pre-built supabase client, mainly for tests.
        """
        self.table_name = config.RECIPES_TABLE
        self.bucket_name = config.IMAGE_BUCKET
        self.client = client if client is not None else create_client(config.SUPABASE_URL, config.SUPABASE_KEY)

    async def _run(self, operation_name: str, func: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(func)
        except Exception as e:
            error = classify_store_error(e)
            logger.error(f"{operation_name} failed ({error.kind.value}): {error.message}")
            raise error from e

    def _table(self):
        return self.client.table(self.table_name)

    def _bucket(self):
        return self.client.storage.from_(self.bucket_name)

    async def list_recipes(self) -> list[Recipe]:
        response = await self._run(
            "List recipes",
            lambda: self._table().select("*").order("created_at", desc=True).execute(),
        )
        recipes = []
        for row in response.data or []:
            try:
                recipes.append(_row_to_recipe(row))
            except StoreUnavailable as e:
                logger.warning(f"Skipping recipe row {row.get('id')!r}: {e.message}")
        return recipes

    async def create_recipe(self, draft: RecipeDraft, image_url: Optional[str] = None) -> Recipe:
        if not draft.title:
            raise RecipeValidationError("A recipe needs a title.")

        row = {
            "title": draft.title,
            "ingredients": draft.ingredients,
            "steps": draft.steps,
            "image_url": image_url,
        }
        response = await self._run("Create recipe", lambda: self._table().insert(row).execute())
        if not response.data:
            raise StoreUnavailable("Recipe store returned no row for the new recipe.")

        recipe = _row_to_recipe(response.data[0])
        logger.info(f"Created recipe '{recipe.title}'", extra={"recipe_id": recipe.id})
        return recipe

    async def update_recipe(self, recipe_id: str, **fields) -> Recipe:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise RecipeValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "title" in fields and not (fields["title"] or "").strip():
            raise RecipeValidationError("A recipe needs a title.")
        if not fields:
            raise RecipeValidationError("Nothing to update.")

        response = await self._run(
            "Update recipe",
            lambda: self._table().update(fields).eq("id", recipe_id).execute(),
        )
        if not response.data:
            raise NotFound(f"Recipe '{recipe_id}' does not exist.")
        return _row_to_recipe(response.data[0])

    async def delete_recipe(self, recipe_id: str) -> None:
        response = await self._run(
            "Delete recipe",
            lambda: self._table().delete().eq("id", recipe_id).execute(),
        )
        if not response.data:
            raise NotFound(f"Recipe '{recipe_id}' does not exist.")
        logger.info("Deleted recipe", extra={"recipe_id": recipe_id})

    async def upload_blob(self, data: bytes, suggested_name: str, overwrite: bool = False) -> str:
        """Upload image bytes to the bucket and return its public URL.

        Args:
            data: Raw image bytes (type detected from magic bytes).
            suggested_name: Original file name; only used as the object name when overwriting.
            overwrite: Reuse the sanitized suggested name instead of a fresh unique key.

        Returns:
            Public URL. Overwritten objects get a cache-busting token so the new
            content is served immediately.
        """
        detected = detect_image_type(data)
        if detected is None:
            raise RecipeValidationError("Unsupported image format. Allowed formats: JPEG, PNG, WEBP, GIF.")
        extension, mime_type = detected

        if overwrite:
            object_name = f"{_safe_object_name(suggested_name)}.{extension}"
        else:
            object_name = f"{uuid.uuid4().hex}.{extension}"

        file_options = {"content-type": mime_type, "upsert": "true" if overwrite else "false"}
        await self._run(
            "Upload image",
            lambda: self._bucket().upload(object_name, data, file_options),
        )
        url = await self._run("Resolve image URL", lambda: self._bucket().get_public_url(object_name))
        url = url.rstrip("?")

        if overwrite:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}t={int(time.time() * 1000)}"

        logger.debug(f"Uploaded image {object_name} ({len(data) / 1024:.1f}KB)")
        return url

    def object_name_from_url(self, url: Optional[str]) -> Optional[str]:
        """Extract the object name from a public URL of this bucket, else None."""
        marker = f"/{self.bucket_name}/"
        if not url or marker not in url:
            return None
        object_name = url.split(marker, 1)[1].split("?", 1)[0]
        return object_name or None

    async def delete_blob(self, url: Optional[str]) -> None:
        object_name = self.object_name_from_url(url)
        if object_name is None:
            # Not stored by us (stock photo or external URL)
            return

        await safe_execute_async(
            asyncio.to_thread(lambda: self._bucket().remove([object_name])),
            f"Delete image blob {object_name}",
            log_level="warning",
        )


__all__ = ["SupabaseRecipeStore", "classify_store_error"]
