"""System prompts and generation prompts for the Recipe Assistant.

Prompt wording is configuration, not algorithm: the pipelines only depend on
the JSON shapes these prompts ask for.
"""

from typing import Optional


def get_system_instructions(max_search_results: int = 4, max_tool_calls: int = 6) -> str:
    """Build system instructions for the chat agent.

    Args:
        max_search_results: Cap on recipes returned by searchRecipes.
        max_tool_calls: Tool call budget per request.

    Returns:
        str: Instructions string passed to the Agent.
    """
    return f"""You are a friendly cooking assistant. You help users discover recipes,
explain how to cook them, and point them to a helpful cooking video.

## Tools

1. `searchRecipes(query, cuisine?, dietary?)`
   - Use when the user asks for ideas, e.g. "something quick with chicken".
   - Returns up to {max_search_results} recipe summaries with an `id` for each.
2. `getRecipeDetails(recipeId, recipeName?)`
   - Use when the user picks a recipe or asks how to make a specific dish.
   - Always pass `recipeName` when you know it.
   - Returns ingredients, instructions, nutrition, images and a video.
3. `findRecipeVideo(recipeName)`
   - Use when the user only wants a video for a dish.

## Rules

- Present search results as a short list: name, cuisine, total time, difficulty.
- After getRecipeDetails, summarize the recipe; do not rewrite the instructions.
- Never invent image or video links: use only what the tools return.
- If a tool result says details could not be loaded, apologize briefly and offer to try again
  or suggest a different recipe.
- Stay on cooking topics and politely decline anything else.
- You may make at most {max_tool_calls} tool calls per request.
"""


def get_search_prompt(
    query: str,
    cuisine: Optional[str] = None,
    dietary: Optional[str] = None,
    max_results: int = 4,
) -> str:
    """Prompt for the recipe search step (JSON array of summaries)."""
    filters = []
    if cuisine:
        filters.append(f"Cuisine: {cuisine}")
    if dietary:
        filters.append(f"Dietary restrictions: {dietary}")
    filter_text = "\n".join(filters) if filters else "No additional filters."

    return f"""Suggest up to {max_results} recipes for this request: "{query}"
{filter_text}

Return ONLY a JSON array. Each element must have:
- "id": a slug like "recipe_chicken-tikka-masala"
- "name": recipe name
- "cuisine": cuisine name
- "prepTimeMinutes": integer
- "cookTimeMinutes": integer
- "servings": integer
- "difficulty": "Easy", "Medium" or "Hard"
- "shortDescription": one sentence
"""


def get_recipe_details_prompt(recipe_name: str) -> str:
    """Prompt for the single structured recipe generation call."""
    return f"""Write a complete, realistic recipe for "{recipe_name}".

Return ONLY a JSON object with:
- "name": string
- "cuisine": string
- "prepTimeMinutes", "cookTimeMinutes", "servings": integers
- "difficulty": "Easy", "Medium" or "Hard"
- "description": two or three sentences
- "mainImageUrl": a suggested image URL (optional)
- "ingredients": array of {{"name", "quantity", "unit", "imageUrl"}}
  Ingredient names must be specific single ingredients (e.g. "yellow onion", not "vegetables").
  "imageUrl" may be omitted.
- "instructions": array of step strings, in order
- "nutritionFacts": {{"calories": number, "protein": string, "carbs": string, "fat": string}}
- "tags": array of short strings
"""


def get_video_query_prompt(recipe_name: str) -> str:
    """Prompt for rewriting a recipe name into a video search phrase."""
    return (
        f'Write one short YouTube search query that finds a cooking tutorial for "{recipe_name}". '
        "Reply with the query text only, no quotes or explanation."
    )
