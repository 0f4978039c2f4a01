"""Unit tests for Pydantic models validation."""

import pytest
from pydantic import ValidationError

from src.models.models import (
    GeneratedRecipe,
    Ingredient,
    NutritionFacts,
    RecipeDetail,
    RecipeSearchResult,
    RecipeSummary,
    VideoInfo,
    VideoValidation,
)


class TestRecipeSummary:
    """Test search hit parsing from LLM output."""

    def test_accepts_camel_case_input(self):
        summary = RecipeSummary.model_validate(
            {"id": "recipe_carbonara", "name": "Carbonara", "prepTimeMinutes": 10, "cookTimeMinutes": 15, "servings": 4}
        )
        assert summary.prep_time_minutes == 10
        assert summary.cook_time_minutes == 15

    def test_dumps_camel_case(self):
        summary = RecipeSummary(id="recipe_carbonara", name="Carbonara", short_description="Creamy")
        data = summary.model_dump(by_alias=True)
        assert data["shortDescription"] == "Creamy"
        assert "short_description" not in data

    def test_defaults(self):
        summary = RecipeSummary(id="recipe_x", name="X")
        assert summary.cuisine == "Mixed"
        assert summary.difficulty == "Medium"
        assert summary.servings == 1

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            RecipeSummary(id="recipe_x", name="")

    def test_rejects_negative_times(self):
        with pytest.raises(ValidationError):
            RecipeSummary(id="recipe_x", name="X", prep_time_minutes=-5)


class TestRecipeSearchResult:
    def test_fallback_flag_not_serialized(self):
        result = RecipeSearchResult(recipes=[RecipeSummary(id="recipe_x", name="X")], is_fallback=True)
        assert result.is_fallback is True
        assert "isFallback" not in result.model_dump(by_alias=True)


class TestIngredient:
    """Test quantity coercion from loosely typed LLM output."""

    @pytest.mark.parametrize("raw,expected", [(2, "2"), (2.0, "2"), (0.5, "0.5"), ("1/2", "1/2"), (None, "")])
    def test_quantity_coercion(self, raw, expected):
        assert Ingredient(name="flour", quantity=raw).quantity == expected

    def test_strips_whitespace(self):
        assert Ingredient(name="  flour  ").name == "flour"

    def test_image_url_alias(self):
        ingredient = Ingredient.model_validate({"name": "flour", "imageUrl": "https://img/flour.png"})
        assert ingredient.image_url == "https://img/flour.png"


class TestNutritionFacts:
    def test_amounts_become_strings(self):
        facts = NutritionFacts(calories=520, protein=22, carbs="60g", fat=None)
        assert facts.calories == 520
        assert facts.protein == "22"
        assert facts.carbs == "60g"
        assert facts.fat is None


class TestGeneratedRecipe:
    """Test structural validation of the generator's output."""

    def valid_payload(self):
        return {
            "name": "Spaghetti Carbonara",
            "cuisine": "Italian",
            "ingredients": [{"name": "spaghetti", "quantity": 400, "unit": "g"}],
            "instructions": ["Boil pasta.", "", "Mix with eggs."],
        }

    def test_valid_payload(self):
        recipe = GeneratedRecipe.model_validate(self.valid_payload())
        assert recipe.ingredients[0].quantity == "400"
        assert recipe.instructions == ["Boil pasta.", "Mix with eggs."]

    def test_missing_ingredients(self):
        payload = self.valid_payload()
        payload["ingredients"] = []
        with pytest.raises(ValidationError):
            GeneratedRecipe.model_validate(payload)

    def test_only_blank_instructions(self):
        payload = self.valid_payload()
        payload["instructions"] = ["", ""]
        with pytest.raises(ValidationError):
            GeneratedRecipe.model_validate(payload)

    def test_missing_name(self):
        payload = self.valid_payload()
        del payload["name"]
        with pytest.raises(ValidationError):
            GeneratedRecipe.model_validate(payload)


class TestRecipeDetail:
    def test_wire_shape(self):
        detail = RecipeDetail(
            id="recipe_carbonara",
            name="Carbonara",
            cuisine="Italian",
            main_image_url="https://img/carbonara.jpg",
            ingredients=[Ingredient(name="spaghetti", quantity="400", unit="g")],
            instructions=["Boil pasta."],
            video=VideoInfo(video_id="VVnZd8A84z4", title="Pasta", channel_name="Chef", thumbnail_url="https://img/t.jpg"),
            is_fallback=True,
        )

        data = detail.model_dump(by_alias=True)

        assert data["mainImageUrl"] == "https://img/carbonara.jpg"
        assert data["video"]["videoId"] == "VVnZd8A84z4"
        assert data["prepTimeMinutes"] == 0
        assert "isFallback" not in data


class TestVideoValidation:
    def test_valid_clears_fallback(self):
        assert VideoValidation(valid=True, fallback_id="VVnZd8A84z4").fallback_id is None

    def test_invalid_keeps_fallback(self):
        validation = VideoValidation(valid=False, fallback_id="VVnZd8A84z4")
        assert validation.model_dump(by_alias=True) == {"valid": False, "fallbackId": "VVnZd8A84z4"}
