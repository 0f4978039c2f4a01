"""Spoonacular catalog client for ingredient and dish images.

Only the two image lookups are used; recipes themselves come from the LLM.
"""

from typing import Optional

from src.clients.http import fetch_json
from src.utils.logger import logger

BASE_URL = "https://api.spoonacular.com"
INGREDIENT_CDN = "https://spoonacular.com/cdn/ingredients_100x100"


class SpoonacularClient:
    """Catalog lookups bounded by a per-call timeout.

    Both lookups return None for "no usable result" and raise the upstream
    error types for transport failures; the resolver treats both the same way.
    """

    def __init__(self, api_key: str, timeout: float = 5.0) -> None:
        """Initialize client.

        Args:
            api_key: Spoonacular API key for authentication.
            timeout: Seconds allowed per request. Default: 5.

        Raises:
            ValueError: If api_key is None or empty string.
        """
        if not api_key:
            raise ValueError("SPOONACULAR_API_KEY is required")
        self.api_key = api_key
        self.timeout = timeout

    async def search_ingredient_image(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        """Look up an ingredient by its raw name and derive its CDN image URL."""
        data = await fetch_json(
            f"{BASE_URL}/food/ingredients/search",
            params={"query": name, "number": 5, "apiKey": self.api_key},
            timeout=timeout or self.timeout,
        )
        results = (data.get("results") or []) if isinstance(data, dict) else []
        if not results or not results[0].get("image"):
            logger.debug(f"Spoonacular: no ingredient image for '{name}'")
            return None
        return f"{INGREDIENT_CDN}/{results[0]['image']}"

    async def search_recipe_image(self, dish: str, timeout: Optional[float] = None) -> Optional[str]:
        """Search recipes by dish name and return the first result that carries an image."""
        data = await fetch_json(
            f"{BASE_URL}/recipes/complexSearch",
            params={"query": dish, "number": 10, "apiKey": self.api_key},
            timeout=timeout or self.timeout,
        )
        results = (data.get("results") or []) if isinstance(data, dict) else []
        for result in results:
            if result.get("image"):
                return result["image"]
        logger.debug(f"Spoonacular: no recipe image for '{dish}'")
        return None
