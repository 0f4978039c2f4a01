"""Data models and schemas for the recipe assistant.

Pydantic v2 models with snake_case attributes and camelCase wire aliases
(e.g. prep_time_minutes <-> prepTimeMinutes). Dump with by_alias=True for
anything handed to the model runtime or an HTTP client.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class RecipeSummary(CamelModel):
    """One search hit. Identity is `id`, which the generator assigns freely."""

    id: Annotated[str, Field(min_length=1, description="Recipe identifier, e.g. recipe_spaghetti-carbonara")]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    cuisine: str = "Mixed"
    prep_time_minutes: Annotated[int, Field(ge=0, le=1440)] = 0
    cook_time_minutes: Annotated[int, Field(ge=0, le=1440)] = 0
    servings: Annotated[int, Field(ge=1, le=100)] = 1
    difficulty: str = "Medium"
    short_description: str = ""


class RecipeSearchResult(CamelModel):
    recipes: List[RecipeSummary] = Field(default_factory=list)
    # True when the canned list stood in for a failed search
    is_fallback: bool = Field(False, exclude=True)


class Ingredient(CamelModel):
    """An ingredient line. image_url is optional until the generator backfills it."""

    name: Annotated[str, Field(min_length=1)]
    quantity: str = ""
    unit: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v):
        """LLMs often return numeric quantities; keep them as display strings."""
        if v is None:
            return ""
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v)


class NutritionFacts(CamelModel):
    calories: Optional[float] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None

    @field_validator("protein", "carbs", "fat", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return None if v is None else str(v)


class VideoInfo(CamelModel):
    video_id: Annotated[str, Field(min_length=1)]
    title: str
    channel_name: str
    thumbnail_url: str
    duration: Optional[str] = None
    views: Optional[int] = None


class RecipeDetail(CamelModel):
    """Fully resolved recipe. `video` is always present."""

    id: str
    name: str
    cuisine: str
    prep_time_minutes: int = 0
    cook_time_minutes: int = 0
    servings: int = 1
    difficulty: str = "Medium"
    description: str = ""
    main_image_url: str
    ingredients: List[Ingredient]
    instructions: List[str]
    nutrition_facts: Optional[NutritionFacts] = None
    tags: List[str] = Field(default_factory=list)
    video: VideoInfo
    # True for the canned recipe returned after a timeout or failure
    is_fallback: bool = Field(False, exclude=True)


class GeneratedRecipe(CamelModel):
    """Structured output requested from the LLM.

    main_image_url is the model's own suggestion; it is discarded in favor of
    deterministic dish-image resolution.
    """

    name: Annotated[str, Field(min_length=1)]
    cuisine: str = "Mixed"
    prep_time_minutes: Annotated[int, Field(ge=0, le=1440)] = 0
    cook_time_minutes: Annotated[int, Field(ge=0, le=1440)] = 0
    servings: Annotated[int, Field(ge=1, le=100)] = 1
    difficulty: str = "Medium"
    description: str = ""
    main_image_url: Optional[str] = None
    ingredients: Annotated[List[Ingredient], Field(min_length=1)]
    instructions: Annotated[List[str], Field(min_length=1)]
    nutrition_facts: Optional[NutritionFacts] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("instructions", mode="after")
    @classmethod
    def drop_blank_steps(cls, v: List[str]) -> List[str]:
        steps = [step for step in v if step]
        if not steps:
            raise ValueError("instructions must contain at least one non-empty step")
        return steps


class VideoCandidate(CamelModel):
    """Search hit from a video backend, before ranking."""

    video_id: Optional[str] = None
    title: str = ""
    channel_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = None
    views: Optional[int] = None


class VideoMetadata(CamelModel):
    """Richer details fetched for the single top-ranked candidate."""

    title: Optional[str] = None
    channel_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = None
    views: Optional[int] = None


class IngredientImage(CamelModel):
    ingredient: str
    image_url: str
    source: str
    category: Optional[str] = None


class DishImage(CamelModel):
    dish: str
    image_url: str
    cuisine: str
    source: str


class VideoValidation(CamelModel):
    valid: bool
    fallback_id: Optional[str] = None

    @model_validator(mode="after")
    def valid_ids_need_no_fallback(self) -> "VideoValidation":
        if self.valid:
            self.fallback_id = None
        return self
