"""Gemini clients: structured recipe suggestions and illustrative images.

RecipeSuggester asks the text model for a JSON recipe matching the
RecipeSuggestion schema. Responses are parsed leniently and then validated;
anything that does not validate is a SuggestionFailed, never a partial result.

ImageGenerator asks the image model for one picture of a recipe title. Callers
treat it as optional (see RecipeBook.save_suggestion).
"""

import asyncio
import json
import re
from typing import Optional

import pydantic
from google import genai
from google.genai import types

from src.models.models import RecipeSuggestion
from src.prompts.prompts import SUGGESTION_ERROR, get_image_prompt, get_system_instructions
from src.utils.config import Config
from src.utils.errors import ImageGenerationFailed, SuggestionFailed, safe_execute_sync
from src.utils.logger import logger


def create_genai_client(config: Config) -> genai.Client:
    return genai.Client(api_key=config.GEMINI_API_KEY)


def parse_suggestion_response(response_text: Optional[str]) -> Optional[RecipeSuggestion]:
    """Parse JSON from a Gemini response into a validated RecipeSuggestion.

    Tries, in order:
    1. json.loads() on the full response
    2. Regex extraction of the outermost JSON object from surrounding text

    Args:
        response_text: Raw response text (may include non-JSON text).

    Returns:
        Validated RecipeSuggestion, or None if no JSON object is found or the
        object fails validation (missing title, ingredients/steps not lists,
        non-string items).
    """
    if not response_text:
        return None

    def _parse_json_direct():
        return json.loads(response_text)

    def _parse_json_regex():
        json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
        if json_match:
            return json.loads(json_match.group())
        return None

    parsed = safe_execute_sync(_parse_json_direct, "Direct JSON parse", log_level="debug")
    if not isinstance(parsed, dict):
        parsed = safe_execute_sync(_parse_json_regex, "Regex JSON extraction", log_level="debug")

    if not isinstance(parsed, dict):
        logger.warning("Failed to parse JSON from Gemini response")
        return None

    try:
        return RecipeSuggestion.model_validate(parsed, strict=True)
    except pydantic.ValidationError as e:
        logger.warning(f"Gemini response does not match recipe schema: {e.error_count()} error(s)")
        return None


class RecipeSuggester:
    """Suggestion oracle: free-text prompt in, RecipeSuggestion out."""

    def __init__(self, config: Config, client: Optional[genai.Client] = None) -> None:
        self.model = config.GEMINI_MODEL
        self.temperature = config.TEMPERATURE
        self.max_output_tokens = config.MAX_OUTPUT_TOKENS
        self.client = client if client is not None else create_genai_client(config)
        self.system_instruction = get_system_instructions()

    async def suggest(self, prompt: str) -> RecipeSuggestion:
        """Ask Gemini for a recipe matching the user's request.

        Args:
            prompt: Free text from the user (e.g. "vegetarian tacos").

        Returns:
            Validated RecipeSuggestion.

        Raises:
            SuggestionFailed: On transport errors, empty or malformed responses.
        """
        logger.info(f"Requesting recipe suggestion from {self.model}")
        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=self.system_instruction,
                    response_mime_type="application/json",
                    response_schema=RecipeSuggestion,
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini suggestion call failed: {e}")
            raise SuggestionFailed(SUGGESTION_ERROR) from e

        suggestion = parse_suggestion_response(getattr(response, "text", None))
        if suggestion is None:
            raise SuggestionFailed(SUGGESTION_ERROR)

        logger.info(
            f"Suggestion received: '{suggestion.title}' "
            f"({len(suggestion.ingredients)} ingredients, {len(suggestion.steps)} steps)"
        )
        return suggestion


class ImageGenerator:
    """Illustration client: recipe title in, image bytes out."""

    def __init__(self, config: Config, client: Optional[genai.Client] = None) -> None:
        self.model = config.IMAGE_MODEL
        self.enabled = config.ENABLE_IMAGE_GENERATION
        self.client = client if client is not None else create_genai_client(config)

    async def generate_image(self, title: str) -> bytes:
        """Generate one illustrative image for a recipe title.

        Raises:
            ImageGenerationFailed: If disabled, the call fails, or no image comes back.
        """
        if not self.enabled:
            raise ImageGenerationFailed("Image generation is disabled")

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_images,
                model=self.model,
                prompt=get_image_prompt(title),
                config=types.GenerateImagesConfig(number_of_images=1),
            )
        except Exception as e:
            raise ImageGenerationFailed(f"Image generation failed for '{title}': {e}") from e

        images = getattr(response, "generated_images", None) or []
        image = images[0].image if images else None
        image_bytes = getattr(image, "image_bytes", None)
        if not image_bytes:
            raise ImageGenerationFailed(f"Image model returned no image for '{title}'")

        logger.debug(f"Generated image for '{title}' ({len(image_bytes) / 1024:.1f}KB)")
        return image_bytes


__all__ = ["RecipeSuggester", "ImageGenerator", "parse_suggestion_response", "create_genai_client"]
