"""Static image tables for the ingredient and dish fallback tiers.

INGREDIENT_IMAGES iteration order is the tie-break for partial matches:
first-inserted entry wins.
"""

from typing import TypedDict


class IngredientEntry(TypedDict):
    image_url: str
    category: str
    aliases: list[str]


def _unsplash(photo_id: str, size: int = 200) -> str:
    return f"https://images.unsplash.com/photo-{photo_id}?w={size}&h={size}&fit=crop"


def _pexels(photo_id: str) -> str:
    return (
        f"https://images.pexels.com/photos/{photo_id}/pexels-photo-{photo_id}.jpeg"
        "?auto=compress&cs=tinysrgb&w=200&h=200&dpr=1"
    )


INGREDIENT_IMAGES: dict[str, IngredientEntry] = {
    # Vegetables
    "onion": {"image_url": _unsplash("1580201092675-a0a6a6cafbb1"), "category": "vegetable",
              "aliases": ["yellow onion", "white onion", "red onion", "sweet onion"]},
    "garlic": {"image_url": _unsplash("1615474634824-f45fb12b24a7"), "category": "vegetable",
               "aliases": ["garlic clove", "minced garlic", "garlic powder"]},
    "tomato": {"image_url": _unsplash("1561136594-7f68413baa99"), "category": "vegetable",
               "aliases": ["roma tomato", "cherry tomato", "tomatoes", "diced tomatoes"]},
    "potato": {"image_url": _unsplash("1518977676601-b53f82aba655"), "category": "vegetable",
               "aliases": ["russet potato", "yukon gold potato", "sweet potato", "potatoes"]},
    "carrot": {"image_url": _unsplash("1598170845057-d2686cfc7e1b"), "category": "vegetable",
               "aliases": ["carrots", "baby carrots", "sliced carrots", "shredded carrots"]},
    "bell pepper": {"image_url": _unsplash("1563565375-f3fdfdbefa83"), "category": "vegetable",
                    "aliases": ["red pepper", "green pepper", "yellow pepper", "sweet pepper", "capsicum"]},
    "broccoli": {"image_url": _unsplash("1584270354949-c26b0d080672"), "category": "vegetable",
                 "aliases": ["broccoli florets"]},
    "spinach": {"image_url": _unsplash("1576045057995-568f588f82fb"), "category": "vegetable",
                "aliases": ["baby spinach", "fresh spinach", "spinach leaves"]},
    "cucumber": {"image_url": _unsplash("1604977042946-1eecc30f269e"), "category": "vegetable",
                 "aliases": ["cucumbers", "english cucumber", "pickle"]},
    "lettuce": {"image_url": _unsplash("1621794939886-6494d66a8c3e"), "category": "vegetable",
                "aliases": ["romaine lettuce", "iceberg lettuce", "green leaf lettuce"]},
    "mushroom": {"image_url": _unsplash("1552825897-bb5efa86eab1"), "category": "vegetable",
                 "aliases": ["mushrooms", "cremini mushrooms", "portobello mushrooms", "shiitake mushrooms"]},
    "zucchini": {"image_url": _unsplash("1587334207855-d698c41c546c"), "category": "vegetable",
                 "aliases": ["courgette", "summer squash"]},
    # Fruits
    "apple": {"image_url": _unsplash("1570913149827-d2ac84ab3f9a"), "category": "fruit",
              "aliases": ["green apple", "red apple", "granny smith", "fuji apple", "apples"]},
    "banana": {"image_url": _unsplash("1571771894821-ce9b6c11b08e"), "category": "fruit",
               "aliases": ["bananas", "ripe banana"]},
    "lemon": {"image_url": _unsplash("1582287014914-1db836440335"), "category": "fruit",
              "aliases": ["lemons", "lemon juice", "lemon zest"]},
    "lime": {"image_url": _unsplash("1622957461168-202c792b3703"), "category": "fruit",
             "aliases": ["limes", "lime juice", "lime zest"]},
    "orange": {"image_url": _unsplash("1582979512210-99b6a53386f9"), "category": "fruit",
               "aliases": ["oranges", "orange juice", "orange zest", "mandarin"]},
    "strawberry": {"image_url": _unsplash("1543158181-e6f9f6712055"), "category": "fruit",
                   "aliases": ["strawberries", "sliced strawberries"]},
    "blueberry": {"image_url": _unsplash("1498557850523-fd3d118b962e"), "category": "fruit",
                  "aliases": ["blueberries", "fresh blueberries"]},
    "avocado": {"image_url": _unsplash("1523049673857-eb18f1d7b578"), "category": "fruit",
                "aliases": ["avocados", "avocado slices", "guacamole"]},
    # Proteins
    "chicken": {"image_url": _unsplash("1604503468506-a8da13d82791"), "category": "protein",
                "aliases": ["chicken breast", "chicken thigh", "chicken leg", "chicken wings", "ground chicken"]},
    "beef": {"image_url": _unsplash("1588347875129-2a3133cbae99"), "category": "protein",
             "aliases": ["ground beef", "steak", "beef chuck", "beef tenderloin", "stewing beef"]},
    "pork": {"image_url": _unsplash("1602901248692-06c8935adac0"), "category": "protein",
             "aliases": ["pork chop", "pork tenderloin", "ground pork", "pork shoulder", "bacon"]},
    "fish": {"image_url": _unsplash("1611171711791-b34b41b1b1a4"), "category": "protein",
             "aliases": ["white fish", "tilapia", "cod", "halibut", "trout"]},
    "salmon": {"image_url": _unsplash("1599084993091-1cb5c0721cc6"), "category": "protein",
               "aliases": ["salmon fillet", "smoked salmon", "grilled salmon"]},
    "shrimp": {"image_url": _unsplash("1565680018434-b513d5e5fd47"), "category": "protein",
               "aliases": ["prawns", "jumbo shrimp", "shrimps"]},
    "tofu": {"image_url": _unsplash("1584321893279-012788df9f22"), "category": "protein",
             "aliases": ["firm tofu", "silken tofu", "extra firm tofu"]},
    "egg": {"image_url": _unsplash("1506976785307-8732e854ad03"), "category": "protein",
            "aliases": ["eggs", "egg whites", "egg yolks", "hard boiled eggs", "fried egg"]},
    # Dairy
    "milk": {"image_url": _unsplash("1563636619-e9143da7973b"), "category": "dairy",
             "aliases": ["whole milk", "skim milk", "2% milk", "almond milk", "soy milk"]},
    "butter": {"image_url": _unsplash("1589985270826-4b7bb135bc9d"), "category": "dairy",
               "aliases": ["unsalted butter", "salted butter", "melted butter"]},
    "cheese": {"image_url": _unsplash("1486297678162-eb2a19b0a32d"), "category": "dairy",
               "aliases": ["cheddar", "mozzarella", "parmesan", "feta", "cream cheese"]},
    "yogurt": {"image_url": _unsplash("1584278868734-7d1d2388c55c"), "category": "dairy",
               "aliases": ["greek yogurt", "plain yogurt", "vanilla yogurt"]},
    "cream": {"image_url": _unsplash("1587657565520-6c0c52d70b2a"), "category": "dairy",
              "aliases": ["heavy cream", "whipping cream", "sour cream", "half and half"]},
    "parmesan": {"image_url": _unsplash("1646627928092-44c8e964481d"), "category": "dairy",
                 "aliases": ["parmesan cheese", "grated parmesan", "parmigiano reggiano"]},
    # Grains
    "rice": {"image_url": _unsplash("1536304993881-ff6e9eefa2a6"), "category": "grain",
             "aliases": ["white rice", "brown rice", "jasmine rice", "basmati rice", "arborio rice"]},
    "pasta": {"image_url": _unsplash("1551462147-37885acc36f1"), "category": "grain",
              "aliases": ["noodles", "macaroni", "penne", "rotini", "farfalle"]},
    "spaghetti": {"image_url": _unsplash("1598866594230-a7c12756260f"), "category": "grain",
                  "aliases": ["spaghettini", "linguine", "fettuccine", "angel hair pasta"]},
    "bread": {"image_url": _unsplash("1549931319-a545dcf3bc73"), "category": "grain",
              "aliases": ["white bread", "wheat bread", "sourdough", "baguette", "rolls"]},
    "flour": {"image_url": _unsplash("1612878100556-032e2dccb2f8"), "category": "grain",
              "aliases": ["all-purpose flour", "bread flour", "cake flour", "whole wheat flour"]},
    # Herbs
    "basil": {"image_url": _unsplash("1600692280094-368bccd586c1"), "category": "herb",
              "aliases": ["fresh basil", "basil leaves", "dried basil"]},
    "parsley": {"image_url": _unsplash("1590759485418-80637e77174d"), "category": "herb",
                "aliases": ["fresh parsley", "dried parsley", "parsley leaves", "chopped parsley"]},
    "cilantro": {"image_url": _unsplash("1596546463702-7d15868439ae"), "category": "herb",
                 "aliases": ["coriander", "fresh cilantro", "chinese parsley"]},
    "mint": {"image_url": _unsplash("1628196237219-9d0ab2abeee1"), "category": "herb",
             "aliases": ["fresh mint", "mint leaves", "peppermint", "spearmint"]},
    # Spices
    "salt": {"image_url": _unsplash("1610154941541-0c11face5b2e"), "category": "spice",
             "aliases": ["sea salt", "kosher salt", "table salt", "pink salt"]},
    "pepper": {"image_url": _unsplash("1556060986-7ad911cc81b8"), "category": "spice",
               "aliases": ["black pepper", "white pepper", "ground pepper", "peppercorns"]},
    "cinnamon": {"image_url": _unsplash("1587132137056-bfbf0166836e"), "category": "spice",
                 "aliases": ["ground cinnamon", "cinnamon sticks", "cassia"]},
    "cumin": {"image_url": _pexels("4198384"), "category": "spice",
              "aliases": ["ground cumin", "cumin seeds", "jeera"]},
    # Oils and condiments
    "olive oil": {"image_url": _unsplash("1579448824458-19df7f39f146"), "category": "condiment",
                  "aliases": ["extra virgin olive oil", "evoo", "virgin olive oil"]},
    "vegetable oil": {"image_url": _pexels("2611814"), "category": "condiment",
                      "aliases": ["canola oil", "cooking oil", "sunflower oil", "corn oil"]},
    "sugar": {"image_url": _unsplash("1584478400633-3c9ed0161667"), "category": "condiment",
              "aliases": ["white sugar", "granulated sugar", "cane sugar", "brown sugar"]},
    "honey": {"image_url": _unsplash("1550583724-b2692b85b150"), "category": "condiment",
              "aliases": ["raw honey", "clover honey", "wildflower honey"]},
    "vinegar": {"image_url": _unsplash("1593486918626-6d589403e4de"), "category": "condiment",
                "aliases": ["white vinegar", "apple cider vinegar", "balsamic vinegar", "red wine vinegar"]},
    "soy sauce": {"image_url": _unsplash("1598546924034-798a5637a823"), "category": "condiment",
                  "aliases": ["tamari", "shoyu", "light soy sauce", "dark soy sauce"]},
}

CATEGORY_FALLBACK_IMAGES: dict[str, str] = {
    "vegetable": _unsplash("1540420773420-3366772f4999"),
    "fruit": _unsplash("1610832958506-aa56368176cf"),
    "protein": _unsplash("1607623814075-e51df1bdc82f"),
    "dairy": _unsplash("1628088062854-d1870b4553da"),
    "grain": _unsplash("1586444248890-2e772fcbdcb2"),
    "herb": _unsplash("1611822417661-e6a3cc9892b8"),
    "spice": _unsplash("1532336414038-cf19250c5757"),
    "condiment": _unsplash("1589540306194-e0054daa4ae9"),
}

GENERIC_FOOD_IMAGE = _unsplash("1512621776951-a57141f2eefd")


def _dish(photo_id: str) -> str:
    return f"https://images.unsplash.com/photo-{photo_id}?w=800&h=450&fit=crop"


DISH_CUISINE_IMAGES: dict[str, list[str]] = {
    "italian": [_dish("1598866594230-a7c12756260f"), _dish("1551183053-bf91a1d81141")],
    "indian": [_dish("1585937421612-70a008356fbe"), _dish("1505253758473-96b7015fcd40")],
    "mexican": [_dish("1513456852971-30c0b8199d4d"), _dish("1582234372722-50d7ccc30ebd")],
    "chinese": [_dish("1563245372-f21724e3856d"), _dish("1525755662778-989d0524087e")],
    "american": [_dish("1550317138-10000687a72b"), _dish("1608039858788-553a3f1e9be9")],
    "default": [
        _dish("1504674900247-0877df9cc836"),
        _dish("1512621776951-a57141f2eefd"),
        _dish("1540189549336-e6e99c3679fe"),
        _dish("1565299624946-b28f40a0ae38"),
    ],
}

DEFAULT_DISH_IMAGE = DISH_CUISINE_IMAGES["default"][0]

# Fallback recipe ingredients carry direct image-file URLs (no backfill needed)
FALLBACK_MAIN_INGREDIENT_IMAGE = _pexels("1640777")
FALLBACK_OTHER_INGREDIENTS_IMAGE = _pexels("1435904")
