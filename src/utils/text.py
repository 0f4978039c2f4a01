"""Text normalization and keyword bucketing for ingredients, dishes and cuisines.

All functions here are pure: no I/O, no caches.
"""

import re
from typing import Optional

from src.utils.config import config

# Ordered keyword lists, first matching category wins
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "vegetable": [
        "onion", "garlic", "carrot", "broccoli", "spinach", "lettuce", "potato", "tomato",
        "cucumber", "zucchini", "eggplant", "bell pepper", "cabbage", "celery", "kale",
        "asparagus", "cauliflower",
    ],
    "fruit": [
        "apple", "banana", "orange", "grape", "strawberry", "blueberry", "raspberry", "lemon",
        "lime", "kiwi", "mango", "pineapple", "avocado", "berry", "citrus", "melon", "watermelon",
    ],
    "protein": [
        "beef", "chicken", "pork", "lamb", "turkey", "bacon", "sausage", "steak", "ground",
        "fish", "salmon", "tuna", "shrimp", "prawn", "crab", "lobster", "clam", "mussel",
        "oyster", "squid", "tofu", "egg", "tempeh", "seitan",
    ],
    "dairy": [
        "milk", "cheese", "yogurt", "butter", "cream", "sour cream", "ice cream", "mozzarella",
        "cheddar", "brie", "parmesan", "feta", "ricotta",
    ],
    "grain": [
        "rice", "pasta", "bread", "flour", "oats", "cereal", "wheat", "corn", "quinoa", "barley",
        "couscous", "tortilla", "noodle", "macaroni", "spaghetti", "baguette",
    ],
    "herb": [
        "basil", "parsley", "cilantro", "mint", "oregano", "thyme", "rosemary", "dill", "chives",
        "sage", "bay leaf",
    ],
    "spice": [
        "salt", "pepper", "cumin", "coriander", "cinnamon", "nutmeg", "paprika", "chili",
        "garlic powder", "onion powder", "turmeric", "ginger", "curry", "cardamom", "cloves",
    ],
    "condiment": [
        "oil", "vinegar", "sauce", "ketchup", "mustard", "mayonnaise", "dressing", "syrup",
        "honey", "jam", "jelly", "soy sauce", "hot sauce", "salsa", "pickle",
    ],
}

# Dish image buckets
DISH_CUISINE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("italian", re.compile(r"pasta|pizza|risotto|lasagna|spaghetti")),
    ("indian", re.compile(r"curry|tikka|masala|paneer|biryani")),
    ("mexican", re.compile(r"taco|burrito|quesadilla|enchilada|mexican")),
    ("chinese", re.compile(r"stir|fry|dumpling|chinese|wonton|noodle")),
    ("american", re.compile(r"burger|steak|fries|bbq|grill")),
]

# Video buckets: the cuisine hint vocabulary differs from the recipe-name one
VIDEO_HINT_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("italian", ("italian", "pasta", "pizza")),
    ("asian", ("chinese", "japanese", "thai", "asian")),
    ("mexican", ("mexican", "taco", "burrito")),
]
VIDEO_NAME_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("italian", ("pasta", "pizza", "italian")),
    ("asian", ("stir fry", "rice", "noodle", "asian", "sushi")),
    ("mexican", ("taco", "burrito", "mexican", "enchilada")),
]

_FRACTIONS = re.compile(r"[¼-¾⅐-⅞]")
_NUMBERS = re.compile(r"\d+(?:[./]\d+)?")
_PUNCTUATION = re.compile(r"[^\w\s]|_")
_UNITS = re.compile(
    r"\b(?:"
    r"cups?|tbsps?|tablespoons?|tsps?|teaspoons?|oz|ounces?|lbs?|pounds?|"
    r"g|grams?|kg|kilograms?|ml|milliliters?|l|liters?|litres?|"
    r"pinch(?:es)?|dash(?:es)?|to taste"
    r")\b"
)
_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Reduce an ingredient string to its bare name.

    Lowercases, drops quantities (digits, decimals, slash and vulgar fractions),
    punctuation and unit tokens, then collapses whitespace.

    Args:
        text: Raw ingredient text, e.g. "2 cups all-purpose flour".

    Returns:
        Normalized name, e.g. "all purpose flour". Empty input yields "".
    """
    if not text:
        return ""
    value = text.lower()
    value = _FRACTIONS.sub(" ", value)
    value = _NUMBERS.sub(" ", value)
    value = _PUNCTUATION.sub(" ", value)
    value = _UNITS.sub(" ", value)
    return _WHITESPACE.sub(" ", value).strip()


def categorize(normalized: str, default: Optional[str] = None) -> str:
    """Classify a normalized ingredient name into a coarse category.

    Args:
        normalized: Output of normalize().
        default: Category for unmatched names. Defaults to config.UNMATCHED_INGREDIENT_CATEGORY.

    Returns:
        First category whose keyword list matches, else the default.
    """
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in normalized for keyword in keywords):
            return category
    return default if default is not None else config.UNMATCHED_INGREDIENT_CATEGORY


def detect_dish_cuisine(dish: str) -> str:
    """Bucket a dish name for dish-image fallbacks ("default" when nothing matches)."""
    dish_lower = dish.lower()
    for cuisine, pattern in DISH_CUISINE_PATTERNS:
        if pattern.search(dish_lower):
            return cuisine
    return "default"


def detect_video_cuisine(cuisine_hint: Optional[str] = None, recipe_name: Optional[str] = None) -> str:
    """Bucket a request for video fallbacks.

    A non-empty cuisine hint decides on its own; the recipe name is only
    scanned when no hint was given.
    """
    if cuisine_hint:
        text, vocabulary = cuisine_hint.lower(), VIDEO_HINT_KEYWORDS
    elif recipe_name:
        text, vocabulary = recipe_name.lower(), VIDEO_NAME_KEYWORDS
    else:
        return "general"

    for bucket, keywords in vocabulary:
        if any(keyword in text for keyword in keywords):
            return bucket
    return "general"


def recipe_name_from_id(recipe_id: str) -> str:
    """Derive a readable name from an id like "recipe_spaghetti-carbonara"."""
    return re.sub(r"^recipe_", "", recipe_id).replace("-", " ").strip()
