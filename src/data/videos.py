"""Fixed video pools used when search backends fail or return nothing.

Every id here is known to render; KNOWN_VIDEO_IDS is the validator's allow list.
"""

from typing import TypedDict


class VideoEntry(TypedDict):
    video_id: str
    title: str
    channel_name: str
    duration: str
    views: int


def thumbnail_url(video_id: str) -> str:
    return f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"


CUISINE_VIDEOS: dict[str, list[VideoEntry]] = {
    "italian": [
        {"video_id": "VVnZd8A84z4", "title": "How to Make Perfect Italian Pasta",
         "channel_name": "Chef Mario", "duration": "10:45", "views": 150000},
        {"video_id": "ChzUN_RvMeI", "title": "Authentic Italian Pizza at Home",
         "channel_name": "Pizza Master", "duration": "14:22", "views": 230000},
    ],
    "asian": [
        {"video_id": "qBQtWmZxZYo", "title": "Easy Stir Fry Techniques",
         "channel_name": "Asian Cooking", "duration": "12:30", "views": 180000},
        {"video_id": "ZJy1ajvMU1k", "title": "Professional Asian Cooking Tips",
         "channel_name": "Pro Chef Tips", "duration": "8:45", "views": 120000},
    ],
    "mexican": [
        {"video_id": "OCunSb81vUA", "title": "Authentic Mexican Tacos",
         "channel_name": "Mexican Kitchen", "duration": "17:30", "views": 210000},
    ],
    "general": [
        {"video_id": "JsimwZYPmTw", "title": "Essential Cooking Skills Everyone Should Know",
         "channel_name": "Cooking Basics", "duration": "15:24", "views": 250000},
        {"video_id": "ZJy1ajvMU1k", "title": "Professional Cooking Tips and Tricks",
         "channel_name": "Pro Chef Tips", "duration": "20:00", "views": 300000},
    ],
}

# Returned when every search backend comes back empty
RELIABLE_VIDEOS: list[VideoEntry] = [
    {"video_id": "4qKgYCm9Nv4", "title": "Restaurant Style Chicken Tikka Masala",
     "channel_name": "Indian Cooking", "duration": "12:45", "views": 350000},
    {"video_id": "JsimwZYPmTw", "title": "Essential Cooking Skills Everyone Should Know",
     "channel_name": "Cooking Basics", "duration": "15:24", "views": 250000},
    {"video_id": "VVnZd8A84z4", "title": "How to Make Perfect Italian Pasta",
     "channel_name": "Chef Mario", "duration": "10:45", "views": 150000},
    {"video_id": "OCunSb81vUA", "title": "Simple Recipes for Beginners",
     "channel_name": "Beginner Cook", "duration": "8:30", "views": 100000},
    {"video_id": "ZJy1ajvMU1k", "title": "Professional Cooking Tips and Tricks",
     "channel_name": "Pro Chef Tips", "duration": "20:00", "views": 300000},
]

RELIABLE_VIDEO_IDS: frozenset[str] = frozenset(v["video_id"] for v in RELIABLE_VIDEOS)

KNOWN_VIDEO_IDS: frozenset[str] = RELIABLE_VIDEO_IDS | frozenset(
    v["video_id"] for pool in CUISINE_VIDEOS.values() for v in pool
)

# Stable order for random picks (frozenset iteration order is not stable across runs)
KNOWN_VIDEO_ID_LIST: list[str] = sorted(KNOWN_VIDEO_IDS)
