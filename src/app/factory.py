"""Factory wiring the Recipe Book components from one Config.

Config is built once (load_config) and handed to the store and oracle
constructors; the RecipeBook and ChatSession only see the components.
"""

from typing import Optional

from src.chat.session import ChatSession
from src.oracle.gemini import ImageGenerator, RecipeSuggester, create_genai_client
from src.oracle.stock_photos import StockPhotoSearch
from src.orchestrator.recipe_book import RecipeBook
from src.store.supabase_store import SupabaseRecipeStore
from src.utils.config import Config, load_config
from src.utils.logger import logger


def initialize_recipe_book(config: Optional[Config] = None) -> tuple[RecipeBook, ChatSession]:
    """Build the RecipeBook and a ChatSession sharing it.

    Args:
        config: Validated configuration. Loaded from the environment if None.

    Returns:
        (recipe_book, chat_session) tuple. The recipe list is empty until
        recipe_book.refresh() is awaited.

    Raises:
        ValueError: If required configuration is missing.
    """
    config = config if config is not None else load_config()

    logger.info(f"Connecting to Supabase table '{config.RECIPES_TABLE}' (bucket '{config.IMAGE_BUCKET}')")
    store = SupabaseRecipeStore(config)

    genai_client = create_genai_client(config)
    suggester = RecipeSuggester(config, client=genai_client)
    image_generator = ImageGenerator(config, client=genai_client)
    stock_photos = StockPhotoSearch(config)

    recipe_book = RecipeBook(
        store,
        image_generator=image_generator,
        stock_photos=stock_photos,
        max_image_size_mb=config.MAX_IMAGE_SIZE_MB,
        compress_images=config.COMPRESS_IMG,
        compress_threshold_kb=config.COMPRESS_IMG_THRESHOLD_KB,
    )
    chat_session = ChatSession(suggester, recipe_book)
    logger.info(f"Recipe book ready (suggestions: {config.GEMINI_MODEL}, images: {config.IMAGE_MODEL})")
    return recipe_book, chat_session
