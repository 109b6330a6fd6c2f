"""Unit tests for configuration management."""

import pytest

from src.utils.config import Config, load_config


OPTIONAL_VARS = (
    "RECIPES_TABLE",
    "IMAGE_BUCKET",
    "GEMINI_MODEL",
    "IMAGE_MODEL",
    "ENABLE_IMAGE_GENERATION",
    "STOCK_PHOTO_URL",
    "STOCK_PHOTO_TIMEOUT",
    "TEMPERATURE",
    "MAX_OUTPUT_TOKENS",
    "MAX_IMAGE_SIZE_MB",
    "COMPRESS_IMG",
    "COMPRESS_IMG_THRESHOLD_KB",
)


@pytest.fixture
def clean_env(env):
    """Valid credentials, every optional variable unset."""
    for name in OPTIONAL_VARS:
        env.delenv(name, raising=False)
    return env


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        """Test that Config uses default values when env vars not set."""
        config = Config()

        assert config.RECIPES_TABLE == "recipes"
        assert config.IMAGE_BUCKET == "recipe-images"
        assert config.GEMINI_MODEL == "gemini-2.5-flash"
        assert config.IMAGE_MODEL == "imagen-4.0-generate-001"
        assert config.ENABLE_IMAGE_GENERATION is True
        assert config.STOCK_PHOTO_URL == "https://loremflickr.com/800/600/{query}"
        assert config.STOCK_PHOTO_TIMEOUT == 10
        assert config.TEMPERATURE == 0.7
        assert config.MAX_OUTPUT_TOKENS == 2048
        assert config.MAX_IMAGE_SIZE_MB == 5
        assert config.COMPRESS_IMG is True
        assert config.COMPRESS_IMG_THRESHOLD_KB == 300

    def test_config_loads_from_environment(self, clean_env):
        """Test that Config loads values from environment variables."""
        clean_env.setenv("RECIPES_TABLE", "my_recipes")
        clean_env.setenv("IMAGE_BUCKET", "photos")
        clean_env.setenv("GEMINI_MODEL", "custom-model")
        clean_env.setenv("TEMPERATURE", "0.2")
        clean_env.setenv("MAX_IMAGE_SIZE_MB", "10")

        config = Config()

        assert config.SUPABASE_URL == "https://example.supabase.co"
        assert config.SUPABASE_KEY == "test_supabase_key"
        assert config.GEMINI_API_KEY == "test_gemini_key"
        assert config.RECIPES_TABLE == "my_recipes"
        assert config.IMAGE_BUCKET == "photos"
        assert config.GEMINI_MODEL == "custom-model"
        assert config.TEMPERATURE == 0.2
        assert config.MAX_IMAGE_SIZE_MB == 10

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)])
    def test_boolean_flags(self, clean_env, value, expected):
        """Test parsing of boolean flags."""
        clean_env.setenv("ENABLE_IMAGE_GENERATION", value)
        clean_env.setenv("COMPRESS_IMG", value)

        config = Config()

        assert config.ENABLE_IMAGE_GENERATION is expected
        assert config.COMPRESS_IMG is expected

    def test_invalid_numeric_value_raises(self, clean_env):
        clean_env.setenv("MAX_OUTPUT_TOKENS", "lots")

        with pytest.raises(ValueError):
            Config()


class TestConfigValidation:
    """Test Config.validate() rules."""

    def test_valid_config_passes(self, clean_env):
        Config().validate()

    @pytest.mark.parametrize("name", ["SUPABASE_URL", "SUPABASE_KEY", "GEMINI_API_KEY"])
    def test_missing_required_value(self, clean_env, name):
        """Each credential is required."""
        clean_env.delenv(name)

        with pytest.raises(ValueError, match=name):
            Config().validate()

    def test_stock_photo_url_needs_placeholder(self, clean_env):
        clean_env.setenv("STOCK_PHOTO_URL", "https://loremflickr.com/800/600/food")

        with pytest.raises(ValueError, match="STOCK_PHOTO_URL"):
            Config().validate()

    @pytest.mark.parametrize(
        "name,value",
        [
            ("TEMPERATURE", "1.5"),
            ("TEMPERATURE", "-0.1"),
            ("MAX_OUTPUT_TOKENS", "100"),
            ("MAX_IMAGE_SIZE_MB", "0"),
            ("STOCK_PHOTO_TIMEOUT", "0"),
        ],
    )
    def test_out_of_range_values(self, clean_env, name, value):
        """Numeric settings are range checked."""
        clean_env.setenv(name, value)

        with pytest.raises(ValueError, match=name):
            Config().validate()


class TestLoadConfig:
    """Test load_config() entry point."""

    def test_returns_validated_config(self, clean_env):
        config = load_config()

        assert isinstance(config, Config)
        assert config.SUPABASE_URL == "https://example.supabase.co"

    def test_missing_credentials_are_fatal(self, clean_env):
        clean_env.delenv("SUPABASE_KEY")

        with pytest.raises(ValueError, match="SUPABASE_KEY"):
            load_config()

    def test_config_is_snapshot(self, clean_env):
        """Later environment changes do not leak into an existing Config."""
        config = load_config()
        clean_env.setenv("IMAGE_BUCKET", "other")

        assert config.IMAGE_BUCKET == "recipe-images"
