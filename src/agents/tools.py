"""Tool dispatch for the chat agent.

RecipeTools backs the three tools the model can call:
- searchRecipes(query, cuisine?, dietary?)
- getRecipeDetails(recipeId, recipeName?)
- findRecipeVideo(recipeName)

None of them ever raise to the model: every failure resolves to a fallback
result. getRecipeDetails owns the outer deadline budget and the detail cache.
"""

from typing import Optional

from agno.run import RunContext
from agno.tools import tool

from src.models.models import RecipeDetail, RecipeSearchResult, VideoInfo
from src.resolvers.recipes import RecipeDetailGenerator, RecipeSearcher
from src.resolvers.videos import VideoResolver
from src.storage.recipes import RecipeStore, schedule_persist
from src.utils.cache import SingleFlight, TimedCache
from src.utils.deadline import DeadlineBudget
from src.utils.logger import logger
from src.utils.text import recipe_name_from_id


class RecipeTools:
    """Operations exposed to the model runtime.

    Args:
        searcher: Recipe search backend.
        generator: Recipe detail generator.
        videos: Video resolver.
        store: Durable store for background saves, or None to skip persistence.
        detail_cache: Recipe details keyed by recipe id.
        tool_timeout: Outer deadline for getRecipeDetails, in seconds.
        single_flight: Share one in-flight generation among concurrent callers of the same id.
    """

    def __init__(
        self,
        searcher: RecipeSearcher,
        generator: RecipeDetailGenerator,
        videos: VideoResolver,
        store: Optional[RecipeStore],
        detail_cache: TimedCache[RecipeDetail],
        tool_timeout: float = 45.0,
        single_flight: bool = False,
    ) -> None:
        self.searcher = searcher
        self.generator = generator
        self.videos = videos
        self.store = store
        self.detail_cache = detail_cache
        self.tool_timeout = tool_timeout
        self.single_flight: Optional[SingleFlight[RecipeDetail]] = SingleFlight() if single_flight else None

    async def search_recipes(
        self,
        query: str,
        cuisine: Optional[str] = None,
        dietary: Optional[str] = None,
    ) -> RecipeSearchResult:
        return await self.searcher.search(query, cuisine=cuisine, dietary=dietary)

    async def get_recipe_details(
        self,
        recipe_id: str,
        recipe_name: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> RecipeDetail:
        """Return cached details or generate them under the tool deadline.

        Both real and fallback results are cached so repeated requests for an
        id do not re-trigger generation. Only real results are persisted, and
        only when a user id is known.
        """
        cached = self.detail_cache.get(recipe_id)
        if cached is not None:
            logger.info(f"Recipe cache hit: {recipe_id}", extra={"recipe_id": recipe_id})
            return cached

        logger.info(f"Recipe cache miss: {recipe_id}, generating", extra={"recipe_id": recipe_id})
        if self.single_flight is not None:
            return await self.single_flight.run(
                recipe_id, lambda: self._load_details(recipe_id, recipe_name, user_id)
            )
        return await self._load_details(recipe_id, recipe_name, user_id)

    async def _load_details(
        self, recipe_id: str, recipe_name: Optional[str], user_id: Optional[str]
    ) -> RecipeDetail:
        budget = DeadlineBudget(self.tool_timeout)
        try:
            detail = await self.generator.generate(recipe_id, recipe_name, budget)
        except Exception as e:
            logger.error(f"Recipe generator raised for {recipe_id}: {e}", extra={"recipe_id": recipe_id})
            detail = self.generator.fallback_recipe(recipe_id, recipe_name or recipe_name_from_id(recipe_id))

        self.detail_cache.put(recipe_id, detail)
        if detail.is_fallback:
            logger.warning(f"Cached fallback recipe for {recipe_id}", extra={"recipe_id": recipe_id})
        elif user_id and self.store is not None:
            schedule_persist(self.store, detail, user_id)
        logger.info(
            f"✓ Recipe {recipe_id} ready in {budget.elapsed():.1f}s",
            extra={"recipe_id": recipe_id, "elapsed_ms": round(budget.elapsed() * 1000)},
        )
        return detail

    async def find_recipe_video(self, recipe_name: str) -> VideoInfo:
        return await self.videos.resolve_video(recipe_name)

    def as_agno_tools(self) -> list:
        """Wrap the operations as agno tools returning camelCase JSON."""

        # We use @tool decorator to register these functions as Agno tools, docstrings are the tool descriptions.
        @tool(name="searchRecipes")
        async def search_recipes(query: str, cuisine: Optional[str] = None, dietary: Optional[str] = None) -> str:
            """Search for recipe ideas matching a request.

            Args:
                query: What the user wants to cook, e.g. "quick chicken dinner".
                cuisine: Optional cuisine filter, e.g. "Italian".
                dietary: Optional dietary restriction, e.g. "vegetarian".

            Returns:
                JSON with a "recipes" list of summaries (id, name, cuisine, times, servings, difficulty).
            """
            result = await self.search_recipes(query, cuisine=cuisine, dietary=dietary)
            return result.model_dump_json(by_alias=True)

        @tool(name="getRecipeDetails")
        async def get_recipe_details(
            recipeId: str,
            recipeName: Optional[str] = None,
            run_context: Optional[RunContext] = None,
        ) -> str:
            """Get the full recipe: ingredients, instructions, nutrition, images and a cooking video.

            Args:
                recipeId: Recipe id from searchRecipes, or a slug like "recipe_spaghetti-carbonara".
                recipeName: Recipe name, when known.

            Returns:
                JSON recipe with ingredients, instructions, mainImageUrl and video.
            """
            user_id = getattr(run_context, "user_id", None) if run_context is not None else None
            detail = await self.get_recipe_details(recipeId, recipe_name=recipeName, user_id=user_id)
            return detail.model_dump_json(by_alias=True)

        @tool(name="findRecipeVideo")
        async def find_recipe_video(recipeName: str) -> str:
            """Find a cooking video for a recipe.

            Args:
                recipeName: Name of the dish.

            Returns:
                JSON with videoId, title, channelName, thumbnailUrl, duration and views.
            """
            video = await self.find_recipe_video(recipeName)
            return video.model_dump_json(by_alias=True)

        return [search_recipes, get_recipe_details, find_recipe_video]
