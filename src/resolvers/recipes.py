"""Recipe search and recipe detail generation.

RecipeDetailGenerator outcomes:
- Success: LLM recipe + resolved dish image + backfilled ingredient images + video
- Timed out or failed: the canned fallback recipe (is_fallback=True)

The pipeline is raced against a child of the caller's deadline budget; the
race never cancels the generation, a late result is simply discarded.
"""

import asyncio
import random
import re
from typing import Any, Optional
from urllib.parse import quote

from pydantic import ValidationError

from src.clients.gemini import GeminiClient
from src.data.images import (
    DISH_CUISINE_IMAGES,
    FALLBACK_MAIN_INGREDIENT_IMAGE,
    FALLBACK_OTHER_INGREDIENTS_IMAGE,
)
from src.models.models import (
    GeneratedRecipe,
    Ingredient,
    RecipeDetail,
    RecipeSearchResult,
    RecipeSummary,
)
from src.prompts.prompts import get_recipe_details_prompt, get_search_prompt
from src.resolvers.images import ImageResolver
from src.resolvers.videos import VideoResolver
from src.utils.deadline import DeadlineBudget, race_with_deadline
from src.utils.errors import GenerationFailure, safe_execute_sync
from src.utils.logger import logger
from src.utils.text import detect_dish_cuisine, recipe_name_from_id

IMAGE_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|webp|gif)", re.IGNORECASE)

FALLBACK_SEARCH_RESULTS = [
    RecipeSummary(
        id="recipe_default_1",
        name="Quick Pasta Dish",
        cuisine="Italian",
        prep_time_minutes=15,
        cook_time_minutes=20,
        servings=4,
        difficulty="Easy",
        short_description="A simple pasta dish you can make quickly.",
    ),
    RecipeSummary(
        id="recipe_default_2",
        name="Simple Salad",
        cuisine="American",
        prep_time_minutes=10,
        cook_time_minutes=0,
        servings=2,
        difficulty="Easy",
        short_description="Fresh and healthy salad with seasonal ingredients.",
    ),
]


def needs_image_backfill(image_url: Optional[str]) -> bool:
    """True for missing, placeholder, or non-image ingredient URLs."""
    if not image_url:
        return True
    if "placeholder" in image_url.lower():
        return True
    return not IMAGE_URL_PATTERN.match(image_url)


def placeholder_image_ref(ingredient_name: str, api_base_url: str = "") -> str:
    """Endpoint reference the UI resolves lazily (no network call here)."""
    return f"{api_base_url.rstrip('/')}/api/ingredient-image?ingredient={quote(ingredient_name, safe='')}"


def fallback_search_result() -> RecipeSearchResult:
    return RecipeSearchResult(recipes=[r.model_copy() for r in FALLBACK_SEARCH_RESULTS], is_fallback=True)


class RecipeSearcher:
    """LLM-backed recipe search with a fixed two-entry fallback.

    Args:
        llm: Gemini client, or None to always answer with the fallback list.
        max_results: Cap on returned summaries.
        timeout: Seconds allowed for the LLM call.
    """

    def __init__(self, llm: Optional[GeminiClient], max_results: int = 4, timeout: float = 30.0) -> None:
        self.llm = llm
        self.max_results = max_results
        self.timeout = timeout

    async def search(
        self,
        query: str,
        cuisine: Optional[str] = None,
        dietary: Optional[str] = None,
    ) -> RecipeSearchResult:
        """Search recipes. Never raises: failures, timeouts and empty output give the fallback list."""
        try:
            if self.llm is None:
                raise GenerationFailure("No LLM configured for recipe search")
            raw = await race_with_deadline(
                self.llm.generate_json(get_search_prompt(query, cuisine, dietary, self.max_results)),
                self.timeout,
                "Recipe search",
            )
            recipes = self._parse_summaries(raw)[: self.max_results]
            if not recipes:
                raise GenerationFailure("Recipe search returned no usable recipes")
            logger.info(f"✓ Recipe search '{query}' returned {len(recipes)} recipes")
            return RecipeSearchResult(recipes=recipes)
        except Exception as e:
            logger.warning(f"Recipe search failed for '{query}', using fallback list: {e}")
            return fallback_search_result()

    @staticmethod
    def _parse_summaries(raw: Any) -> list[RecipeSummary]:
        if isinstance(raw, dict):
            raw = raw.get("recipes", [])
        if not isinstance(raw, list):
            return []
        summaries = []
        for item in raw:
            summary = safe_execute_sync(
                lambda item=item: RecipeSummary.model_validate(item),
                "Validate RecipeSummary",
                log_level="debug",
            )
            if summary is not None:
                summaries.append(summary)
        return summaries


class RecipeDetailGenerator:
    """Generates a full RecipeDetail under a deadline.

    Args:
        llm: Gemini client, or None to always answer with the fallback recipe.
        images: Image resolver for the dish hero image.
        videos: Video resolver for the attached video.
        rng: Random source for fallback image picks.
        detail_timeout: Upper bound for one generation, applied within the caller's budget.
        temperature: Sampling temperature for the generation call.
        max_output_tokens: Token cap for the generation call.
        api_base_url: Prefix for placeholder ingredient image references.
    """

    def __init__(
        self,
        llm: Optional[GeminiClient],
        images: ImageResolver,
        videos: VideoResolver,
        rng: Optional[random.Random] = None,
        detail_timeout: float = 60.0,
        temperature: float = 0.2,
        max_output_tokens: int = 2048,
        api_base_url: str = "",
    ) -> None:
        self.llm = llm
        self.images = images
        self.videos = videos
        self.rng = rng or random.Random()
        self.detail_timeout = detail_timeout
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.api_base_url = api_base_url

    async def generate(
        self,
        recipe_id: str,
        recipe_name: Optional[str] = None,
        budget: Optional[DeadlineBudget] = None,
    ) -> RecipeDetail:
        """Produce a recipe for `recipe_id`. Never raises.

        Args:
            recipe_id: Identifier the result is returned under.
            recipe_name: Display name; derived from the id when missing.
            budget: Caller's deadline. The generation gets the tighter of
                detail_timeout and what remains of it.

        Returns:
            RecipeDetail, with is_fallback=True when the canned recipe was used.
        """
        name = (recipe_name or "").strip() or recipe_name_from_id(recipe_id)
        deadline = (budget or DeadlineBudget(self.detail_timeout)).child(self.detail_timeout)
        if deadline.expired():
            logger.warning(f"No time left to generate {recipe_id}, returning fallback recipe", extra={"recipe_id": recipe_id})
            return self.fallback_recipe(recipe_id, name)
        try:
            return await race_with_deadline(
                self._generate(recipe_id, name, deadline),
                deadline.remaining(),
                f"Recipe generation for {recipe_id}",
            )
        except Exception as e:
            logger.warning(
                f"Recipe generation for {recipe_id} failed, returning fallback recipe: {e}",
                extra={"recipe_id": recipe_id},
            )
            return self.fallback_recipe(recipe_id, name)

    async def _generate(self, recipe_id: str, name: str, deadline: DeadlineBudget) -> RecipeDetail:
        if self.llm is None:
            raise GenerationFailure("No LLM configured for recipe generation")

        logger.debug(f"Step 1/5: generating recipe content for '{name}'")
        raw = await self.llm.generate_json(
            get_recipe_details_prompt(name),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        generated = self._validate_generated(raw)

        logger.debug("Step 2/5: starting video resolution")
        video_task = asyncio.ensure_future(self.videos.resolve_video(name, generated.cuisine, deadline))

        logger.debug("Step 3/5: resolving dish image")
        # The model's own mainImageUrl is never used
        dish = await self.images.dish_image(name, generated.cuisine, deadline)

        logger.debug("Step 4/5: backfilling ingredient images")
        ingredients = [self._backfill_image(ingredient) for ingredient in generated.ingredients]

        logger.debug("Step 5/5: awaiting video")
        video = await video_task

        return RecipeDetail(
            id=recipe_id,
            name=generated.name,
            cuisine=generated.cuisine,
            prep_time_minutes=generated.prep_time_minutes,
            cook_time_minutes=generated.cook_time_minutes,
            servings=generated.servings,
            difficulty=generated.difficulty,
            description=generated.description,
            main_image_url=dish.image_url,
            ingredients=ingredients,
            instructions=generated.instructions,
            nutrition_facts=generated.nutrition_facts,
            tags=generated.tags,
            video=video,
        )

    @staticmethod
    def _validate_generated(raw: Any) -> GeneratedRecipe:
        if isinstance(raw, list) and raw:
            raw = raw[0]
        try:
            return GeneratedRecipe.model_validate(raw)
        except ValidationError as e:
            raise GenerationFailure(f"Generated recipe failed validation: {e.error_count()} error(s)") from e

    def _backfill_image(self, ingredient: Ingredient) -> Ingredient:
        if not needs_image_backfill(ingredient.image_url):
            return ingredient
        return ingredient.model_copy(
            update={"image_url": placeholder_image_ref(ingredient.name, self.api_base_url)}
        )

    def fallback_recipe(self, recipe_id: str, recipe_name: str) -> RecipeDetail:
        """Fixed-shape recipe returned when generation times out or fails."""
        name = recipe_name or recipe_name_from_id(recipe_id) or "this recipe"
        display_name = name[:1].upper() + name[1:]
        return RecipeDetail(
            id=recipe_id,
            name=display_name,
            cuisine="Mixed",
            prep_time_minutes=30,
            cook_time_minutes=30,
            servings=4,
            difficulty="Medium",
            description=f"Recipe for {display_name}. Error loading complete details due to service limitations.",
            main_image_url=self.rng.choice(DISH_CUISINE_IMAGES[detect_dish_cuisine(name)]),
            ingredients=[
                Ingredient(name="main ingredient", quantity="1", unit="portion",
                           image_url=FALLBACK_MAIN_INGREDIENT_IMAGE),
                Ingredient(name="other ingredients", quantity="as needed",
                           image_url=FALLBACK_OTHER_INGREDIENTS_IMAGE),
            ],
            instructions=[
                "We're sorry, the full instructions for this recipe could not be loaded right now.",
                "Please try again in a moment, or ask for a different recipe.",
            ],
            tags=["recipe"],
            video=self.videos.fallback_video(recipe_name=display_name),
            is_fallback=True,
        )
