"""Agent initialization factory for the Recipe Assistant.

Factory function that wires the resolution pipelines (search, details,
images, videos) and configures the Agno Agent with tools, tool-hooks and
system instructions.
"""

import random
from dataclasses import dataclass
from typing import Optional

from agno.agent import Agent
from agno.db.postgres import PostgresDb
from agno.db.sqlite import SqliteDb
from agno.models.google import Gemini

from src.agents.tools import RecipeTools
from src.clients.gemini import GeminiClient
from src.clients.spoonacular import SpoonacularClient
from src.clients.youtube import YouTubeClient
from src.hooks.hooks import get_tool_hooks
from src.models.models import DishImage, IngredientImage, RecipeDetail, VideoInfo, VideoMetadata
from src.prompts.prompts import get_system_instructions
from src.resolvers.images import ImageResolver
from src.resolvers.recipes import RecipeDetailGenerator, RecipeSearcher
from src.resolvers.videos import VideoResolver
from src.storage.recipes import RecipeStore
from src.utils.cache import TimedCache
from src.utils.config import config
from src.utils.logger import logger


@dataclass
class RecipeServices:
    """Process-wide resolvers and tools shared by the agent and the HTTP routes."""

    images: ImageResolver
    videos: VideoResolver
    searcher: RecipeSearcher
    generator: RecipeDetailGenerator
    tools: RecipeTools
    store: Optional[RecipeStore] = None


def _initialize_clients(llm_required: bool = True):
    """Create upstream clients from configuration.

    Returns:
        Tuple of (GeminiClient or None, SpoonacularClient or None, YouTubeClient).
    """
    logger.info("Step 1/5: Initializing upstream clients...")

    llm = None
    if config.GEMINI_API_KEY:
        llm = GeminiClient(config.GEMINI_API_KEY, config.GEMINI_MODEL, query_model=config.QUERY_MODEL)
        logger.info(f"✓ Gemini client ready (model={config.GEMINI_MODEL}, query_model={config.QUERY_MODEL})")
    elif llm_required:
        config.require_gemini_key()
    else:
        logger.warning("GEMINI_API_KEY not set - recipe search and details will use fallbacks")

    spoonacular = None
    if config.spoonacular_enabled:
        spoonacular = SpoonacularClient(config.SPOONACULAR_API_KEY, timeout=config.IMAGE_LOOKUP_TIMEOUT_SECONDS)
        logger.info("✓ Spoonacular image lookups enabled")
    else:
        logger.info("Spoonacular disabled - images resolve from the static tables")

    youtube = YouTubeClient(
        cookie=config.YOUTUBE_COOKIE,
        invidious_base_url=config.INVIDIOUS_BASE_URL,
        search_timeout=config.VIDEO_SEARCH_TIMEOUT_SECONDS,
        metadata_timeout=config.VIDEO_METADATA_TIMEOUT_SECONDS,
    )
    logger.info(f"✓ Video client ready (primary backend: {'enabled' if youtube.has_basic_auth() else 'disabled'})")
    return llm, spoonacular, youtube


def _initialize_store() -> Optional[RecipeStore]:
    """Open the durable recipe store, or None when persistence is disabled."""
    logger.info("Step 2/5: Configuring recipe store...")
    if not config.PERSIST_RECIPES:
        logger.info("✓ Recipe persistence disabled (PERSIST_RECIPES=false)")
        return None
    store = RecipeStore(config.DATABASE_URL)
    logger.info("✓ Recipe store ready")
    return store


def build_services(llm_required: bool = True, rng: Optional[random.Random] = None) -> RecipeServices:
    """Build every resolver with its process-wide cache.

    Args:
        llm_required: Raise when GEMINI_API_KEY is missing instead of running on fallbacks.
        rng: Random source for fallback picks (tests pass a seeded one).

    Returns:
        RecipeServices shared by the agent tools and the HTTP routes.
    """
    rng = rng or random.Random()
    llm, spoonacular, youtube = _initialize_clients(llm_required)
    store = _initialize_store()

    logger.info("Step 3/5: Building resolvers and caches...")
    images = ImageResolver(
        spoonacular,
        ingredient_cache=TimedCache[IngredientImage](config.IMAGE_CACHE_TTL_SECONDS, name="ingredient_images"),
        dish_cache=TimedCache[DishImage](config.IMAGE_CACHE_TTL_SECONDS, name="dish_images"),
        rng=rng,
        lookup_timeout=config.IMAGE_LOOKUP_TIMEOUT_SECONDS,
        unmatched_category=config.UNMATCHED_INGREDIENT_CATEGORY,
    )
    videos = VideoResolver(
        youtube,
        llm,
        search_cache=TimedCache[VideoInfo](config.VIDEO_SEARCH_CACHE_TTL_SECONDS, name="video_search"),
        info_cache=TimedCache[VideoMetadata](config.VIDEO_INFO_CACHE_TTL_SECONDS, name="video_info"),
        rng=rng,
        enhance_queries=config.ENHANCE_VIDEO_QUERIES,
        rewrite_timeout=config.QUERY_REWRITE_TIMEOUT_SECONDS,
    )
    searcher = RecipeSearcher(llm, max_results=config.MAX_SEARCH_RESULTS, timeout=config.SEARCH_TIMEOUT_SECONDS)
    generator = RecipeDetailGenerator(
        llm,
        images,
        videos,
        rng=rng,
        detail_timeout=config.DETAIL_TIMEOUT_SECONDS,
        temperature=config.TEMPERATURE,
        max_output_tokens=config.MAX_OUTPUT_TOKENS,
        api_base_url=config.API_BASE_URL,
    )
    tools = RecipeTools(
        searcher,
        generator,
        videos,
        store=store,
        detail_cache=TimedCache[RecipeDetail](config.RECIPE_CACHE_TTL_SECONDS, name="recipe_details"),
        tool_timeout=config.TOOL_TIMEOUT_SECONDS,
        single_flight=config.SINGLE_FLIGHT,
    )
    logger.info(f"✓ Resolvers ready (single_flight={config.SINGLE_FLIGHT})")
    return RecipeServices(images, videos, searcher, generator, tools, store)


def _configure_database(use_db: bool):
    """Configure database for session persistence (SQLite or PostgreSQL).

    Args:
        use_db: If True, configure persistent database. If False, return None (stateless mode).

    Returns:
        Database instance (SqliteDb or PostgresDb) or None for stateless mode.
    """
    logger.info("Step 4/5: Configuring database for session persistence...")

    if not use_db:
        logger.info("✓ Stateless mode configured")
        return None

    if config.DATABASE_URL:
        logger.info(f"Using PostgreSQL: {config.DATABASE_URL.split('@')[1] if '@' in config.DATABASE_URL else '...'}")
        db = PostgresDb(db_url=config.DATABASE_URL, id="recipe_agent_db")
    else:
        logger.info("Using SQLite database: tmp/recipe_agent_sessions.db")
        db = SqliteDb(db_file="tmp/recipe_agent_sessions.db", id="recipe_agent_db")

    logger.info("✓ Database configured")
    return db


def _create_agent(db, tools: list, tool_hooks: list) -> Agent:
    """Create and configure the Agno Agent instance.

    Args:
        db: Database instance for session persistence.
        tools: Agno tools from RecipeTools.
        tool_hooks: Hooks run around every tool call.

    Returns:
        Configured Agent instance.
    """
    logger.info("Step 5/5: Configuring Agno Agent...")

    agent = Agent(
        # === Model Configuration ===
        model=Gemini(
            id=config.GEMINI_MODEL,
            api_key=config.GEMINI_API_KEY,
            temperature=config.TEMPERATURE,
            max_output_tokens=config.MAX_OUTPUT_TOKENS,
        ),
        # === Storage ===
        db=db,  # SQLite (dev) or PostgreSQL (prod) for session persistence
        # === Tools & Hooks ===
        tools=tools,
        tool_hooks=tool_hooks,
        # === Instructions ===
        instructions=get_system_instructions(
            max_search_results=config.MAX_SEARCH_RESULTS,
            max_tool_calls=config.TOOL_CALL_LIMIT,
        ),
        markdown=True,
        # === Retry & Error Handling ===
        retries=config.MAX_RETRIES,
        exponential_backoff=config.EXPONENTIAL_BACKOFF,
        delay_between_retries=config.DELAY_BETWEEN_RETRIES,
        # === Memory & Context ===
        add_history_to_context=db is not None,
        num_history_runs=config.MAX_HISTORY,
        # === Execution Limits ===
        tool_call_limit=config.TOOL_CALL_LIMIT,
        # === Metadata ===
        name="Recipe Assistant",
        description="Conversational cooking assistant: finds recipes, explains them and links a cooking video",
    )

    logger.info(f"✓ Agent configured with maximum {config.TOOL_CALL_LIMIT} tool calls per request")
    return agent


def initialize_recipe_agent(use_db: bool = True, services: Optional[RecipeServices] = None):
    """Factory function to initialize and configure the recipe agent.

    Orchestrates initialization of all components in sequence:
    1. Upstream clients (Gemini, Spoonacular, YouTube)
    2. Durable recipe store
    3. Resolvers and caches
    4. Session persistence database (SQLite or PostgreSQL)
    5. Agent configuration with tools, tool-hooks and system instructions

    Args:
        use_db: If True, use persistent database. If False, run stateless without persistence.
        services: Prebuilt services to reuse (the HTTP routes share them).

    Returns:
        Tuple of (Agent, RecipeServices).

    Raises:
        ValueError: If GEMINI_API_KEY is missing.
    """
    logger.info("=== Initializing Recipe Assistant Agent ===")

    config.require_gemini_key()
    services = services or build_services(llm_required=True)
    db = _configure_database(use_db)
    agent = _create_agent(db, services.tools.as_agno_tools(), get_tool_hooks())

    logger.info("=== Agent initialization complete ===")
    return agent, services
