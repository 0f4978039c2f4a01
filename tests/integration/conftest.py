"""Pytest configuration and fixtures for integration tests.

Ensures environment variables are loaded and validates the LLM key before
running integration tests. Spoonacular and the primary video backend are
optional: the pipelines fall back to static tables without them.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env and isolate integration runs from persisted state."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    # Keep integration runs from writing recipe records
    os.environ["PERSIST_RECIPES"] = "false"

    print("\n" + "=" * 70)
    print("Note: These tests require a valid GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("  - Recipe persistence: DISABLED")
    print(f"  - Spoonacular API: {'ENABLED' if os.getenv('SPOONACULAR_API_KEY') else 'DISABLED'}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the whole integration session when GEMINI_API_KEY is missing."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip(
            "Integration tests skipped. Missing API key: GEMINI_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )
