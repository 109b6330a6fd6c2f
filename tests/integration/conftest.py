"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips the whole suite unless real
Supabase and Gemini credentials are configured. The tests write to the
configured table and bucket and clean up after themselves.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


REQUIRED_VARS = ("SUPABASE_URL", "SUPABASE_KEY", "GEMINI_API_KEY")


def pytest_configure(config):
    """Load .env before collection so module-level code sees it."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests use the real Supabase project and Gemini API")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_credentials():
    """Skip integration tests when credentials are missing."""
    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        pytest.skip(
            f"Integration tests skipped. Missing: {', '.join(missing)}. Please set these in your .env file.",
            allow_module_level=True,
        )
