"""Unit tests for the agent tool dispatch layer."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.agents.tools import RecipeTools
from src.models.models import Ingredient, RecipeDetail, RecipeSearchResult, RecipeSummary, VideoInfo
from src.utils.cache import TimedCache

VIDEO = VideoInfo(
    video_id="VVnZd8A84z4",
    title="How to Make Perfect Italian Pasta",
    channel_name="Chef Mario",
    thumbnail_url="https://i.ytimg.com/vi/VVnZd8A84z4/hqdefault.jpg",
    duration="10:45",
)


def make_detail(recipe_id="recipe_carbonara", is_fallback=False) -> RecipeDetail:
    return RecipeDetail(
        id=recipe_id,
        name="Carbonara",
        cuisine="Italian",
        main_image_url="https://example.com/carbonara.jpg",
        ingredients=[Ingredient(name="spaghetti", quantity="400", unit="g",
                                image_url="https://example.com/spaghetti.jpg")],
        instructions=["Boil pasta.", "Mix with eggs."],
        video=VIDEO,
        is_fallback=is_fallback,
    )


def make_tools(detail=None, store=None, single_flight=False, generate_side_effect=None) -> RecipeTools:
    searcher = MagicMock()
    searcher.search = AsyncMock(
        return_value=RecipeSearchResult(recipes=[RecipeSummary(id="recipe_carbonara", name="Carbonara")])
    )
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=detail or make_detail(), side_effect=generate_side_effect)
    generator.fallback_recipe = MagicMock(return_value=make_detail(is_fallback=True))
    videos = MagicMock()
    videos.resolve_video = AsyncMock(return_value=VIDEO)
    return RecipeTools(
        searcher,
        generator,
        videos,
        store=store,
        detail_cache=TimedCache[RecipeDetail](3600),
        tool_timeout=45,
        single_flight=single_flight,
    )


class TestGetRecipeDetails:
    """Test cache-first dispatch, caching and persistence rules."""

    @pytest.mark.asyncio
    async def test_cache_hit_skips_generator(self):
        tools = make_tools()
        cached = make_detail()
        tools.detail_cache.put("recipe_carbonara", cached)

        result = await tools.get_recipe_details("recipe_carbonara", "Carbonara")

        assert result is cached
        tools.generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_generates_with_outer_budget_and_caches(self):
        tools = make_tools()

        result = await tools.get_recipe_details("recipe_carbonara", "Carbonara")

        assert result.id == "recipe_carbonara"
        assert tools.detail_cache.get("recipe_carbonara") is result
        args = tools.generator.generate.await_args.args
        assert args[0] == "recipe_carbonara"
        assert args[1] == "Carbonara"
        assert args[2].total_seconds == 45

    @pytest.mark.asyncio
    async def test_real_result_persisted_for_user(self):
        store = MagicMock()
        tools = make_tools(store=store)

        with patch("src.agents.tools.schedule_persist") as mock_persist:
            result = await tools.get_recipe_details("recipe_carbonara", "Carbonara", user_id="user-1")

        mock_persist.assert_called_once_with(store, result, "user-1")

    @pytest.mark.asyncio
    async def test_not_persisted_without_user(self):
        tools = make_tools(store=MagicMock())

        with patch("src.agents.tools.schedule_persist") as mock_persist:
            await tools.get_recipe_details("recipe_carbonara", "Carbonara")

        mock_persist.assert_not_called()

    @pytest.mark.asyncio
    async def test_fallback_cached_but_not_persisted(self):
        tools = make_tools(detail=make_detail(is_fallback=True), store=MagicMock())

        with patch("src.agents.tools.schedule_persist") as mock_persist:
            result = await tools.get_recipe_details("recipe_carbonara", "Carbonara", user_id="user-1")

        assert result.is_fallback
        assert tools.detail_cache.get("recipe_carbonara") is result
        mock_persist.assert_not_called()

    @pytest.mark.asyncio
    async def test_generator_error_becomes_fallback(self):
        tools = make_tools(generate_side_effect=RuntimeError("unexpected"))

        result = await tools.get_recipe_details("recipe_carbonara")

        assert result.is_fallback
        tools.generator.fallback_recipe.assert_called_once_with("recipe_carbonara", "carbonara")

    @pytest.mark.asyncio
    async def test_single_flight_shares_generation(self):
        release = asyncio.Event()

        async def slow_generate(*args, **kwargs):
            await release.wait()
            return make_detail()

        tools = make_tools(single_flight=True, generate_side_effect=slow_generate)

        first = asyncio.ensure_future(tools.get_recipe_details("recipe_carbonara", "Carbonara"))
        second = asyncio.ensure_future(tools.get_recipe_details("recipe_carbonara", "Carbonara"))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(first, second)

        assert results[0] is results[1]
        assert tools.generator.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_misses_generate_twice_without_single_flight(self):
        release = asyncio.Event()

        async def slow_generate(recipe_id, *args, **kwargs):
            await release.wait()
            return make_detail(recipe_id)

        tools = make_tools(generate_side_effect=slow_generate)

        first = asyncio.ensure_future(tools.get_recipe_details("recipe_carbonara", "Carbonara"))
        second = asyncio.ensure_future(tools.get_recipe_details("recipe_carbonara", "Carbonara"))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.wait_for(asyncio.gather(first, second), timeout=5)

        assert tools.generator.generate.await_count == 2
        for result in results:
            assert isinstance(result, RecipeDetail)
            assert result.id == "recipe_carbonara"
            assert result.ingredients
            assert result.instructions
            assert not result.is_fallback


class TestOtherTools:
    """Test search and video tools delegate to their resolvers."""

    @pytest.mark.asyncio
    async def test_search_recipes(self):
        tools = make_tools()

        result = await tools.search_recipes("pasta", cuisine="Italian", dietary="vegetarian")

        assert result.recipes[0].id == "recipe_carbonara"
        tools.searcher.search.assert_awaited_once_with("pasta", cuisine="Italian", dietary="vegetarian")

    @pytest.mark.asyncio
    async def test_find_recipe_video(self):
        tools = make_tools()
        assert await tools.find_recipe_video("Carbonara") == VIDEO
        tools.videos.resolve_video.assert_awaited_once_with("Carbonara")


class TestAgnoTools:
    """Test the agno tool wrappers."""

    def test_tool_names(self):
        agno_tools = make_tools().as_agno_tools()
        assert [t.name for t in agno_tools] == ["searchRecipes", "getRecipeDetails", "findRecipeVideo"]

    def test_detail_json_uses_camel_case(self):
        payload = json.loads(make_detail().model_dump_json(by_alias=True))
        assert payload["mainImageUrl"] == "https://example.com/carbonara.jpg"
        assert payload["video"]["videoId"] == "VVnZd8A84z4"
        assert "isFallback" not in payload
