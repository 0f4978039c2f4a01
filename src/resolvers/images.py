"""Ingredient and dish image resolution.

Ingredient tiers, in strict order, first hit wins:
1. Spoonacular ingredient search with the raw name (5s bound, failures swallowed)
2. Exact match on table keys, then on aliases
3. Partial match on table keys (either direction), then on aliases
4. Category bucket image
5. Generic food image

Dish tiers: Spoonacular recipe image, cuisine-bucket random pick, fixed default.
Every tier's result is cached for the image TTL under the normalized key.
"""

import random
from typing import Optional

from src.clients.spoonacular import SpoonacularClient
from src.data.images import (
    CATEGORY_FALLBACK_IMAGES,
    DEFAULT_DISH_IMAGE,
    DISH_CUISINE_IMAGES,
    GENERIC_FOOD_IMAGE,
    INGREDIENT_IMAGES,
)
from src.models.models import DishImage, IngredientImage
from src.utils.cache import TimedCache
from src.utils.deadline import DeadlineBudget
from src.utils.errors import safe_execute_async
from src.utils.logger import logger
from src.utils.text import categorize, detect_dish_cuisine, normalize


def match_ingredient_table(normalized: str) -> Optional[IngredientImage]:
    """Static-table tiers (exact, then partial). Returns None when nothing matches."""
    if not normalized:
        return None

    for key, entry in INGREDIENT_IMAGES.items():
        if key == normalized:
            return IngredientImage(ingredient=normalized, image_url=entry["image_url"],
                                   source="database", category=entry["category"])
    for key, entry in INGREDIENT_IMAGES.items():
        if any(normalize(alias) == normalized for alias in entry["aliases"]):
            return IngredientImage(ingredient=normalized, image_url=entry["image_url"],
                                   source="database", category=entry["category"])

    for key, entry in INGREDIENT_IMAGES.items():
        if key in normalized or normalized in key:
            return IngredientImage(ingredient=normalized, image_url=entry["image_url"],
                                   source="partial_match", category=entry["category"])
    for key, entry in INGREDIENT_IMAGES.items():
        for alias in entry["aliases"]:
            alias_normalized = normalize(alias)
            if alias_normalized and (alias_normalized in normalized or normalized in alias_normalized):
                return IngredientImage(ingredient=normalized, image_url=entry["image_url"],
                                       source="alias_match", category=entry["category"])
    return None


class ImageResolver:
    """Resolves ingredient and dish names to image URLs. Never raises.

    Args:
        spoonacular: Catalog client, or None to skip the catalog tier.
        ingredient_cache: Cache keyed by normalized ingredient name.
        dish_cache: Cache keyed by lowercased, trimmed dish name.
        rng: Random source for bucket picks.
        lookup_timeout: Seconds allowed for each catalog call.
        unmatched_category: Category for names no keyword list matches (None: config default).
    """

    def __init__(
        self,
        spoonacular: Optional[SpoonacularClient],
        ingredient_cache: TimedCache[IngredientImage],
        dish_cache: TimedCache[DishImage],
        rng: Optional[random.Random] = None,
        lookup_timeout: float = 5.0,
        unmatched_category: Optional[str] = None,
    ) -> None:
        self.spoonacular = spoonacular
        self.ingredient_cache = ingredient_cache
        self.dish_cache = dish_cache
        self.rng = rng or random.Random()
        self.lookup_timeout = lookup_timeout
        self.unmatched_category = unmatched_category

    def _lookup_timeout(self, budget: Optional[DeadlineBudget]) -> float:
        if budget is None:
            return self.lookup_timeout
        return min(self.lookup_timeout, budget.remaining())

    async def ingredient_image(self, name: str, budget: Optional[DeadlineBudget] = None) -> IngredientImage:
        """Resolve an ingredient to an image with the tier that produced it."""
        normalized = normalize(name)
        if not normalized:
            logger.debug(f"Ingredient '{name}' normalized to nothing, using generic image")
            return IngredientImage(ingredient=name or "", image_url=GENERIC_FOOD_IMAGE, source="generic")

        cached = self.ingredient_cache.get(normalized)
        if cached is not None:
            return cached

        result = await self._resolve_ingredient(name, normalized, budget)
        self.ingredient_cache.put(normalized, result)
        return result

    async def _resolve_ingredient(
        self, name: str, normalized: str, budget: Optional[DeadlineBudget]
    ) -> IngredientImage:
        timeout = self._lookup_timeout(budget)
        if self.spoonacular is not None and timeout > 0:
            url = await safe_execute_async(
                self.spoonacular.search_ingredient_image(name, timeout=timeout),
                f"Spoonacular ingredient lookup for '{name}'",
                log_level="debug",
            )
            if url:
                logger.debug(f"Ingredient '{normalized}' resolved via catalog", extra={"tier": "spoonacular"})
                return IngredientImage(ingredient=normalized, image_url=url, source="spoonacular")

        matched = match_ingredient_table(normalized)
        if matched is not None:
            logger.debug(f"Ingredient '{normalized}' resolved via table", extra={"tier": matched.source})
            return matched

        category = categorize(normalized, default=self.unmatched_category)
        category_url = CATEGORY_FALLBACK_IMAGES.get(category)
        if category_url:
            logger.debug(f"Ingredient '{normalized}' resolved via {category} bucket", extra={"tier": "category_fallback"})
            return IngredientImage(ingredient=normalized, image_url=category_url,
                                   source="category_fallback", category=category)

        logger.debug(f"Ingredient '{normalized}' has no bucket ({category}), using generic image", extra={"tier": "generic"})
        return IngredientImage(ingredient=normalized, image_url=GENERIC_FOOD_IMAGE,
                               source="generic", category=category)

    async def resolve_ingredient_image(self, name: str) -> str:
        return (await self.ingredient_image(name)).image_url

    async def dish_image(
        self,
        dish: str,
        cuisine: Optional[str] = None,
        budget: Optional[DeadlineBudget] = None,
    ) -> DishImage:
        """Resolve a dish to a hero image.

        Args:
            dish: Dish name.
            cuisine: Optional bucket hint; derived from the dish name when missing
                or when it names no known bucket.
            budget: Optional outer deadline; the catalog call gets the tighter bound.
        """
        key = (dish or "").lower().strip()
        if not key:
            return DishImage(dish="", image_url=DEFAULT_DISH_IMAGE, cuisine="default", source="default")

        cached = self.dish_cache.get(key)
        if cached is not None:
            return cached

        bucket = (cuisine or "").lower().strip()
        if bucket not in DISH_CUISINE_IMAGES:
            bucket = detect_dish_cuisine(key)

        result: Optional[DishImage] = None
        timeout = self._lookup_timeout(budget)
        if self.spoonacular is not None and timeout > 0:
            url = await safe_execute_async(
                self.spoonacular.search_recipe_image(dish, timeout=timeout),
                f"Spoonacular recipe image lookup for '{dish}'",
                log_level="debug",
            )
            if url:
                result = DishImage(dish=dish, image_url=url, cuisine=bucket, source="spoonacular")

        if result is None:
            images = DISH_CUISINE_IMAGES.get(bucket)
            if images:
                result = DishImage(dish=dish, image_url=self.rng.choice(images), cuisine=bucket, source="cuisine_fallback")
            else:
                result = DishImage(dish=dish, image_url=DEFAULT_DISH_IMAGE, cuisine=bucket, source="default")

        logger.debug(f"Dish '{key}' resolved ({result.cuisine})", extra={"tier": result.source})
        self.dish_cache.put(key, result)
        return result

    async def resolve_dish_image(self, dish: str, cuisine: Optional[str] = None) -> str:
        return (await self.dish_image(dish, cuisine)).image_url
