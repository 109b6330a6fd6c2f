"""Configuration management for the Recipe Book service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

The Config object is built once at process start (see load_config) and passed
to the store and oracle constructors; nothing reads the environment afterwards.
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Supabase backend: project URL and anon/service key (both required)
        self.SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
        self.SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
        # Table holding recipe rows and bucket holding recipe images
        self.RECIPES_TABLE: str = os.getenv("RECIPES_TABLE", "recipes")
        self.IMAGE_BUCKET: str = os.getenv("IMAGE_BUCKET", "recipe-images")

        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Suggestion model: returns structured JSON recipes
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Image model: illustrative picture for accepted suggestions
        self.IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "imagen-4.0-generate-001")
        # Disable to go straight to the stock photo fallback
        self.ENABLE_IMAGE_GENERATION: bool = _env_flag("ENABLE_IMAGE_GENERATION", "true")

        # Stock photo fallback: URL template, {query} is replaced by the URL-encoded title
        self.STOCK_PHOTO_URL: str = os.getenv("STOCK_PHOTO_URL", "https://loremflickr.com/800/600/{query}")
        self.STOCK_PHOTO_TIMEOUT: int = int(os.getenv("STOCK_PHOTO_TIMEOUT", "10"))

        # LLM Model Parameters
        # Temperature: a little creativity suits recipe ideas
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))

        # Maximum image size (in MB) accepted for upload. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Image Compression: re-encode uploads above the threshold as JPEG
        self.COMPRESS_IMG: bool = _env_flag("COMPRESS_IMG", "true")
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required credentials are missing or invalid values provided.
        """
        if not self.SUPABASE_URL:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not self.SUPABASE_KEY:
            raise ValueError("SUPABASE_KEY environment variable is required")
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if "{query}" not in self.STOCK_PHOTO_URL:
            raise ValueError(
                f"STOCK_PHOTO_URL must contain a {{query}} placeholder, got: {self.STOCK_PHOTO_URL}"
            )
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )
        if self.STOCK_PHOTO_TIMEOUT < 1:
            raise ValueError(
                f"STOCK_PHOTO_TIMEOUT must be at least 1 second, got: {self.STOCK_PHOTO_TIMEOUT}"
            )


def load_config() -> Config:
    """Build and validate the process-wide configuration.

    Raises:
        ValueError: If a required value is missing (fatal at startup).
    """
    config = Config()
    config.validate()
    return config
