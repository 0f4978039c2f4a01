"""Unit tests for ingredient and dish image resolution."""

import random
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.data.images import (
    CATEGORY_FALLBACK_IMAGES,
    DISH_CUISINE_IMAGES,
    GENERIC_FOOD_IMAGE,
    INGREDIENT_IMAGES,
)
from src.models.models import DishImage, IngredientImage
from src.resolvers.images import ImageResolver, match_ingredient_table
from src.utils.cache import TimedCache
from src.utils.errors import UpstreamTimeout


def make_resolver(spoonacular=None, unmatched_category="other") -> ImageResolver:
    return ImageResolver(
        spoonacular,
        ingredient_cache=TimedCache[IngredientImage](3600),
        dish_cache=TimedCache[DishImage](3600),
        rng=random.Random(7),
        unmatched_category=unmatched_category,
    )


def make_spoonacular(ingredient_result=None, recipe_result=None) -> MagicMock:
    client = MagicMock()
    client.search_ingredient_image = AsyncMock(return_value=ingredient_result)
    client.search_recipe_image = AsyncMock(return_value=recipe_result)
    return client


class TestMatchIngredientTable:
    """Test the static-table tiers in order."""

    def test_exact_key(self):
        result = match_ingredient_table("onion")
        assert result.source == "database"
        assert result.image_url == INGREDIENT_IMAGES["onion"]["image_url"]

    def test_exact_alias(self):
        result = match_ingredient_table("chicken breast")
        assert result.source == "database"
        assert result.image_url == INGREDIENT_IMAGES["chicken"]["image_url"]

    def test_partial_key(self):
        result = match_ingredient_table("red bell peppers")
        assert result.source == "partial_match"
        assert result.image_url == INGREDIENT_IMAGES["bell pepper"]["image_url"]

    def test_partial_alias(self):
        result = match_ingredient_table("jumbo prawns")
        assert result.source == "alias_match"
        assert result.image_url == INGREDIENT_IMAGES["shrimp"]["image_url"]

    def test_no_match(self):
        assert match_ingredient_table("star anise") is None
        assert match_ingredient_table("") is None


class TestIngredientImage:
    """Test the ingredient resolution tiers end to end."""

    @pytest.mark.asyncio
    async def test_catalog_hit_wins(self):
        spoonacular = make_spoonacular(ingredient_result="https://spoonacular.com/cdn/ingredients_100x100/flour.png")
        resolver = make_resolver(spoonacular)

        result = await resolver.ingredient_image("2 cups Flour")

        assert result.source == "spoonacular"
        assert result.image_url.endswith("flour.png")
        # Catalog is queried with the raw name
        assert spoonacular.search_ingredient_image.await_args.args[0] == "2 cups Flour"

    @pytest.mark.asyncio
    async def test_catalog_failure_falls_through_to_table(self):
        spoonacular = make_spoonacular()
        spoonacular.search_ingredient_image.side_effect = UpstreamTimeout("timed out")
        resolver = make_resolver(spoonacular)

        result = await resolver.ingredient_image("1 chicken breast")

        assert result.source == "database"
        assert result.image_url == INGREDIENT_IMAGES["chicken"]["image_url"]

    @pytest.mark.asyncio
    async def test_category_fallback(self):
        resolver = make_resolver()
        result = await resolver.ingredient_image("fresh thyme")
        assert result.source == "category_fallback"
        assert result.category == "herb"
        assert result.image_url == CATEGORY_FALLBACK_IMAGES["herb"]

    @pytest.mark.asyncio
    async def test_unmatched_other_gets_generic_image(self):
        resolver = make_resolver(unmatched_category="other")
        result = await resolver.ingredient_image("star anise")
        assert result.source == "generic"
        assert result.image_url == GENERIC_FOOD_IMAGE

    @pytest.mark.asyncio
    async def test_unmatched_vegetable_gets_vegetable_bucket(self):
        resolver = make_resolver(unmatched_category="vegetable")
        result = await resolver.ingredient_image("star anise")
        assert result.source == "category_fallback"
        assert result.image_url == CATEGORY_FALLBACK_IMAGES["vegetable"]

    @pytest.mark.asyncio
    async def test_empty_after_normalization_skips_catalog(self):
        spoonacular = make_spoonacular(ingredient_result="https://example.com/x.png")
        resolver = make_resolver(spoonacular)

        result = await resolver.ingredient_image("2 cups")

        assert result.image_url == GENERIC_FOOD_IMAGE
        spoonacular.search_ingredient_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_are_cached_by_normalized_name(self):
        spoonacular = make_spoonacular(ingredient_result=None)
        resolver = make_resolver(spoonacular)

        first = await resolver.ingredient_image("1 Onion")
        second = await resolver.ingredient_image("onion,")

        assert first == second
        assert spoonacular.search_ingredient_image.await_count == 1

    @pytest.mark.asyncio
    async def test_resolve_ingredient_image_returns_url(self):
        resolver = make_resolver()
        assert await resolver.resolve_ingredient_image("basil") == INGREDIENT_IMAGES["basil"]["image_url"]


class TestDishImage:
    """Test dish hero image resolution."""

    @pytest.mark.asyncio
    async def test_catalog_hit(self):
        spoonacular = make_spoonacular(recipe_result="https://img.spoonacular.com/recipes/1-556x370.jpg")
        resolver = make_resolver(spoonacular)

        result = await resolver.dish_image("Spaghetti Carbonara")

        assert result.source == "spoonacular"
        assert result.image_url == "https://img.spoonacular.com/recipes/1-556x370.jpg"
        assert result.cuisine == "italian"

    @pytest.mark.asyncio
    async def test_bucket_from_dish_name(self):
        resolver = make_resolver()
        result = await resolver.dish_image("Spaghetti Carbonara")
        assert result.source == "cuisine_fallback"
        assert result.image_url in DISH_CUISINE_IMAGES["italian"]

    @pytest.mark.asyncio
    async def test_known_cuisine_hint_used(self):
        resolver = make_resolver()
        result = await resolver.dish_image("Mystery Stew", cuisine="Mexican")
        assert result.cuisine == "mexican"
        assert result.image_url in DISH_CUISINE_IMAGES["mexican"]

    @pytest.mark.asyncio
    async def test_unknown_cuisine_hint_detects_from_name(self):
        resolver = make_resolver()
        result = await resolver.dish_image("Coq au Vin", cuisine="French")
        assert result.cuisine == "default"
        assert result.image_url in DISH_CUISINE_IMAGES["default"]

    @pytest.mark.asyncio
    async def test_cached_by_trimmed_lowercase_name(self):
        spoonacular = make_spoonacular(recipe_result=None)
        resolver = make_resolver(spoonacular)

        first = await resolver.dish_image("Pad Thai")
        second = await resolver.dish_image("  pad thai ")

        assert first.image_url == second.image_url
        assert spoonacular.search_recipe_image.await_count == 1


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestImageCacheExpiry:
    """Test that a 24h image cache entry re-resolves once it expires."""

    def make_clocked_resolver(self, spoonacular, clock) -> ImageResolver:
        return ImageResolver(
            spoonacular,
            ingredient_cache=TimedCache[IngredientImage](86400, clock=clock),
            dish_cache=TimedCache[DishImage](86400, clock=clock),
            rng=random.Random(7),
        )

    @pytest.mark.asyncio
    async def test_ingredient_reresolved_after_ttl(self):
        clock = FakeClock()
        spoonacular = make_spoonacular(ingredient_result=None)
        resolver = self.make_clocked_resolver(spoonacular, clock)

        with patch("src.resolvers.images.match_ingredient_table", wraps=match_ingredient_table) as table:
            first = await resolver.ingredient_image("onion")
            clock.now = 86400.0
            await resolver.ingredient_image("onion")
            assert spoonacular.search_ingredient_image.await_count == 1
            assert table.call_count == 1

            clock.now = 86401.0
            again = await resolver.ingredient_image("onion")

        assert spoonacular.search_ingredient_image.await_count == 2
        assert table.call_count == 2
        assert again == first

    @pytest.mark.asyncio
    async def test_dish_reresolved_after_ttl(self):
        clock = FakeClock()
        spoonacular = make_spoonacular(recipe_result=None)
        resolver = self.make_clocked_resolver(spoonacular, clock)

        await resolver.dish_image("Pad Thai")
        clock.now = 86401.0
        await resolver.dish_image("Pad Thai")

        assert spoonacular.search_recipe_image.await_count == 2
