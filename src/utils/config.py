"""Configuration management for Recipe Assistant.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Chat + structured generation model
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Query Model: small model used to rewrite video search phrases
        self.QUERY_MODEL: str = os.getenv("QUERY_MODEL", "gemini-2.5-flash-lite")
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "7777"))
        # Maximum number of previous interactions to include in context. Default: 3
        self.MAX_HISTORY: int = int(os.getenv("MAX_HISTORY", "3"))
        # Maximum number of recipe summaries returned by searchRecipes. Default: 4
        self.MAX_SEARCH_RESULTS: int = int(os.getenv("MAX_SEARCH_RESULTS", "4"))
        # Database URL: Optional Postgres connection string, SQLite files under tmp/ otherwise
        self.DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
        # Persist generated recipes in the background (durable recipe store)
        self.PERSIST_RECIPES: bool = _env_bool("PERSIST_RECIPES", "true")

        # Spoonacular Configuration: catalog tier for ingredient and dish images
        # The tier is skipped (not an error) when the key is empty
        self.USE_SPOONACULAR: bool = _env_bool("USE_SPOONACULAR", "true")
        self.SPOONACULAR_API_KEY: str = os.getenv("SPOONACULAR_API_KEY", "")

        # Video backends
        # YOUTUBE_COOKIE: basic credentials for the primary search backend
        # (must contain VISITOR_INFO1_LIVE= or SID= to count as configured)
        self.YOUTUBE_COOKIE: str = os.getenv("YOUTUBE_COOKIE", "")
        # INVIDIOUS_BASE_URL: secondary search backend, used when the primary yields nothing
        self.INVIDIOUS_BASE_URL: str = os.getenv("INVIDIOUS_BASE_URL", "https://yewtu.be")
        # ENHANCE_VIDEO_QUERIES: rewrite recipe names into targeted search phrases with the LLM
        self.ENHANCE_VIDEO_QUERIES: bool = _env_bool("ENHANCE_VIDEO_QUERIES", "true")

        # Deadlines (seconds)
        # TOOL_TIMEOUT_SECONDS is the outer budget created at tool dispatch;
        # DETAIL_TIMEOUT_SECONDS bounds the generator inside whatever remains of it
        self.TOOL_TIMEOUT_SECONDS: float = float(os.getenv("TOOL_TIMEOUT_SECONDS", "45"))
        self.DETAIL_TIMEOUT_SECONDS: float = float(os.getenv("DETAIL_TIMEOUT_SECONDS", "60"))
        self.SEARCH_TIMEOUT_SECONDS: float = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "30"))
        self.QUERY_REWRITE_TIMEOUT_SECONDS: float = float(os.getenv("QUERY_REWRITE_TIMEOUT_SECONDS", "6"))
        self.IMAGE_LOOKUP_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_LOOKUP_TIMEOUT_SECONDS", "5"))
        self.VIDEO_SEARCH_TIMEOUT_SECONDS: float = float(os.getenv("VIDEO_SEARCH_TIMEOUT_SECONDS", "8"))
        self.VIDEO_METADATA_TIMEOUT_SECONDS: float = float(os.getenv("VIDEO_METADATA_TIMEOUT_SECONDS", "8"))

        # Cache TTLs (seconds)
        self.RECIPE_CACHE_TTL_SECONDS: int = int(os.getenv("RECIPE_CACHE_TTL_SECONDS", "3600"))
        self.IMAGE_CACHE_TTL_SECONDS: int = int(os.getenv("IMAGE_CACHE_TTL_SECONDS", "86400"))
        self.VIDEO_SEARCH_CACHE_TTL_SECONDS: int = int(os.getenv("VIDEO_SEARCH_CACHE_TTL_SECONDS", "1800"))
        self.VIDEO_INFO_CACHE_TTL_SECONDS: int = int(os.getenv("VIDEO_INFO_CACHE_TTL_SECONDS", "3600"))

        # Category assigned to ingredients no keyword list matches: "other" or "vegetable"
        # The ingredient image endpoint historically used "other", the classifier "vegetable"
        self.UNMATCHED_INGREDIENT_CATEGORY: str = os.getenv("UNMATCHED_INGREDIENT_CATEGORY", "other")
        # SINGLE_FLIGHT: share one in-flight detail generation among concurrent callers of the same id
        # Default false keeps duplicate generation on concurrent cache misses
        self.SINGLE_FLIGHT: bool = _env_bool("SINGLE_FLIGHT", "false")
        # Prefix for placeholder ingredient image references ("" keeps them relative)
        self.API_BASE_URL: str = os.getenv("API_BASE_URL", "")

        # LLM Model Parameters
        # Temperature: Controls randomness (0.0 = deterministic, 1.0 = max randomness)
        # For recipes: 0.2 balances creativity with consistency
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.2"))
        # Max Output Tokens: Maximum length of model response
        # For recipes: 2048 is sufficient for full recipe with instructions
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))

        # Agent Retry Configuration - handles transient API failures gracefully
        # MAX_RETRIES: Number of retry attempts for failed API calls (exponential backoff)
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry if exponential_backoff=True)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "2"))
        # EXPONENTIAL_BACKOFF: Enable exponential backoff for rate limit handling
        self.EXPONENTIAL_BACKOFF: bool = _env_bool("EXPONENTIAL_BACKOFF", "true")
        # Tool Call Limit: Maximum number of tool calls agent can make per request
        self.TOOL_CALL_LIMIT: int = int(os.getenv("TOOL_CALL_LIMIT", "6"))

    def validate(self) -> None:
        """Validate configuration values.

        API keys are not checked here: every upstream degrades to a fallback tier
        when its key is missing. See require_gemini_key() for the agent path.

        Raises:
            ValueError: If invalid values provided.
        """
        if self.UNMATCHED_INGREDIENT_CATEGORY not in ("other", "vegetable"):
            raise ValueError(
                f"UNMATCHED_INGREDIENT_CATEGORY must be 'other' or 'vegetable', got: {self.UNMATCHED_INGREDIENT_CATEGORY}"
            )
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.MAX_SEARCH_RESULTS < 1:
            raise ValueError(
                f"MAX_SEARCH_RESULTS must be at least 1, got: {self.MAX_SEARCH_RESULTS}"
            )
        for name in (
            "TOOL_TIMEOUT_SECONDS",
            "DETAIL_TIMEOUT_SECONDS",
            "SEARCH_TIMEOUT_SECONDS",
            "QUERY_REWRITE_TIMEOUT_SECONDS",
            "IMAGE_LOOKUP_TIMEOUT_SECONDS",
            "VIDEO_SEARCH_TIMEOUT_SECONDS",
            "VIDEO_METADATA_TIMEOUT_SECONDS",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got: {getattr(self, name)}")
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 1:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be at least 1 second, got: {self.DELAY_BETWEEN_RETRIES}"
            )

    def require_gemini_key(self) -> None:
        """Ensure the LLM key is present before building the agent.

        Raises:
            ValueError: If GEMINI_API_KEY is missing.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")

    @property
    def spoonacular_enabled(self) -> bool:
        return self.USE_SPOONACULAR and bool(self.SPOONACULAR_API_KEY)


# Create module-level config instance and validate immediately
config = Config()
config.validate()
