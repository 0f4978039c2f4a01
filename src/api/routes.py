"""HTTP endpoints for lazy image and video resolution.

The UI calls these for placeholder ingredient images, dish hero images and
video lookups. Every endpoint answers with a usable default payload, even on
bad input (400) or unexpected errors (500).
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from src.agents.agent import RecipeServices
from src.data.images import DEFAULT_DISH_IMAGE, GENERIC_FOOD_IMAGE
from src.data.videos import KNOWN_VIDEO_ID_LIST
from src.utils.logger import logger


def create_api_router(services: RecipeServices) -> APIRouter:
    """Build the /api router over the shared resolvers.

    Args:
        services: Resolvers (and their caches) shared with the agent tools.

    Returns:
        APIRouter to include in the FastAPI app.
    """
    router = APIRouter(prefix="/api", tags=["media"])

    @router.get("/ingredient-image")
    async def ingredient_image(ingredient: Optional[str] = Query(None)):
        if not ingredient or not ingredient.strip():
            return JSONResponse(
                {"error": "Missing ingredient parameter", "imageUrl": GENERIC_FOOD_IMAGE},
                status_code=400,
            )
        try:
            result = await services.images.ingredient_image(ingredient)
            return result.model_dump(by_alias=True, exclude_none=True)
        except Exception as e:
            logger.error(f"Ingredient image endpoint failed for '{ingredient}': {e}")
            return JSONResponse(
                {"error": "Failed to process request", "imageUrl": GENERIC_FOOD_IMAGE},
                status_code=500,
            )

    @router.get("/dish-image")
    async def dish_image(dish: Optional[str] = Query(None), cuisine: Optional[str] = Query(None)):
        default_image = DEFAULT_DISH_IMAGE
        if not dish or not dish.strip():
            return JSONResponse(
                {"error": "Missing dish parameter", "imageUrl": default_image},
                status_code=400,
            )
        try:
            result = await services.images.dish_image(dish, (cuisine or "").lower() or None)
            return {"dish": dish, "cuisine": result.cuisine, "imageUrl": result.image_url}
        except Exception as e:
            logger.error(f"Dish image endpoint failed for '{dish}': {e}")
            return JSONResponse(
                {"error": "Failed to process request", "imageUrl": default_image},
                status_code=500,
            )

    @router.get("/search-youtube")
    async def search_youtube(q: Optional[str] = Query(None), cuisine: Optional[str] = Query(None)):
        if not q or not q.strip():
            video = services.videos.reliable_video()
            return JSONResponse(
                {"error": "Missing query parameter", "video": video.model_dump(mode="json", by_alias=True)},
                status_code=400,
            )
        try:
            video = await services.videos.resolve_video(q, cuisine)
        except Exception as e:
            logger.error(f"Video search endpoint failed for '{q}': {e}")
            video = services.videos.reliable_video()
        return {"video": video.model_dump(mode="json", by_alias=True)}

    @router.get("/validate-youtube")
    async def validate_youtube(videoId: Optional[str] = Query(None)):
        if not videoId:
            return JSONResponse({"valid": False}, status_code=400)
        try:
            result = await services.videos.validate_video_id(videoId)
        except Exception as e:
            logger.error(f"Video validation endpoint failed for '{videoId}': {e}")
            return {"valid": False, "fallbackId": KNOWN_VIDEO_ID_LIST[0]}
        return result.model_dump(by_alias=True, exclude_none=True)

    return router
