"""Cooking video resolution with scored ranking and static fallbacks.

resolve_video() never raises and always returns a VideoInfo whose id is
either a real search hit or a member of the fixed pools in src.data.videos.
"""

import random
import re
from typing import Optional

from src.clients.gemini import GeminiClient
from src.clients.youtube import YouTubeClient, format_duration
from src.data.videos import (
    CUISINE_VIDEOS,
    KNOWN_VIDEO_ID_LIST,
    KNOWN_VIDEO_IDS,
    RELIABLE_VIDEOS,
    VideoEntry,
    thumbnail_url,
)
from src.models.models import VideoCandidate, VideoInfo, VideoMetadata, VideoValidation
from src.prompts.prompts import get_video_query_prompt
from src.utils.cache import TimedCache
from src.utils.deadline import DeadlineBudget, race_with_deadline
from src.utils.errors import safe_execute_async
from src.utils.logger import logger
from src.utils.text import detect_video_cuisine

TITLE_KEYWORDS = ("recipe", "how to", "cooking", "make")
KEYWORD_SCORE = 10
DURATION_SCORE = 5
MIN_GOOD_DURATION = 300
MAX_GOOD_DURATION = 1200

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")


def score_candidate(candidate: VideoCandidate) -> int:
    """+10 for a tutorial-sounding title, +5 for a 5-20 minute runtime."""
    score = 0
    title = candidate.title.lower()
    if any(keyword in title for keyword in TITLE_KEYWORDS):
        score += KEYWORD_SCORE
    if candidate.duration_seconds is not None and MIN_GOOD_DURATION <= candidate.duration_seconds <= MAX_GOOD_DURATION:
        score += DURATION_SCORE
    return score


def rank_candidates(candidates: list[VideoCandidate]) -> list[VideoCandidate]:
    # sorted() is stable, so equal scores keep backend order
    return sorted(candidates, key=score_candidate, reverse=True)


def default_video_query(recipe_name: str) -> str:
    return f"how to make {recipe_name} recipe tutorial"


def _entry_to_video(entry: VideoEntry, title: Optional[str] = None) -> VideoInfo:
    return VideoInfo(
        video_id=entry["video_id"],
        title=title or entry["title"],
        channel_name=entry["channel_name"],
        thumbnail_url=thumbnail_url(entry["video_id"]),
        duration=entry["duration"],
        views=entry["views"],
    )


class VideoResolver:
    """Finds one good cooking video for a recipe.

    Args:
        youtube: Search/metadata client.
        llm: Optional client for search-phrase rewrites.
        search_cache: Final results keyed by lowercased search phrase.
        info_cache: Video metadata keyed by video id.
        rng: Random source for fallback picks.
        enhance_queries: Rewrite recipe names with the LLM before searching.
        rewrite_timeout: Seconds allowed for one rewrite.
    """

    def __init__(
        self,
        youtube: YouTubeClient,
        llm: Optional[GeminiClient],
        search_cache: TimedCache[VideoInfo],
        info_cache: TimedCache[VideoMetadata],
        rng: Optional[random.Random] = None,
        enhance_queries: bool = True,
        rewrite_timeout: float = 6.0,
    ) -> None:
        self.youtube = youtube
        self.llm = llm
        self.search_cache = search_cache
        self.info_cache = info_cache
        self.rng = rng or random.Random()
        self.enhance_queries = enhance_queries
        self.rewrite_timeout = rewrite_timeout
        # Rewrites are memoized so the search cache can be consulted without an LLM call
        self._rewrites: TimedCache[str] = TimedCache(search_cache.ttl_seconds, name="video_query_rewrites")

    def reliable_video(self, cuisine_hint: Optional[str] = None) -> VideoInfo:
        """Uniform pick from the reliable pool; the cuisine only touches the title."""
        entry = self.rng.choice(RELIABLE_VIDEOS)
        title = entry["title"]
        if cuisine_hint and cuisine_hint.strip():
            title = f"{title} ({cuisine_hint.strip().title()} Cooking)"
        return _entry_to_video(entry, title=title)

    def fallback_video(self, cuisine_hint: Optional[str] = None, recipe_name: Optional[str] = None) -> VideoInfo:
        """Bucketed pick from CUISINE_VIDEOS, titled after the recipe when one is given."""
        bucket = detect_video_cuisine(cuisine_hint, recipe_name)
        entry = self.rng.choice(CUISINE_VIDEOS.get(bucket) or CUISINE_VIDEOS["general"])
        title = f"How to Make {recipe_name}" if recipe_name else None
        return _entry_to_video(entry, title=title)

    async def enhance_query(self, recipe_name: str, budget: Optional[DeadlineBudget] = None) -> str:
        """Rewrite a recipe name into a search phrase, falling back to a template."""
        fallback = default_video_query(recipe_name)
        if not self.enhance_queries or self.llm is None:
            return fallback

        key = recipe_name.lower().strip()
        cached = self._rewrites.get(key)
        if cached is not None:
            return cached

        timeout = self.rewrite_timeout if budget is None else min(self.rewrite_timeout, budget.remaining())
        if timeout <= 0:
            return fallback
        text = await safe_execute_async(
            race_with_deadline(self.llm.generate_text(get_video_query_prompt(recipe_name)), timeout, "Video query rewrite"),
            "Video query rewrite",
            log_level="debug",
        )
        query = (text or "").splitlines()[0].strip().strip("\"'") if text else ""
        if not query:
            return fallback
        self._rewrites.put(key, query)
        return query

    async def _search(self, query: str) -> list[VideoCandidate]:
        candidates: list[VideoCandidate] = []
        if self.youtube.has_basic_auth():
            candidates = await safe_execute_async(
                self.youtube.search_direct(query), "Primary video search", default_return=[]
            )
        if not candidates:
            # Retry on the secondary backend, results are never merged
            candidates = await safe_execute_async(
                self.youtube.search_invidious(query), "Secondary video search", default_return=[]
            )
        return candidates

    async def _video_metadata(self, video_id: str) -> Optional[VideoMetadata]:
        cached = self.info_cache.get(video_id)
        if cached is not None:
            return cached
        metadata = await safe_execute_async(
            self.youtube.get_video_info(video_id), f"Video metadata for {video_id}", log_level="debug"
        )
        if metadata is not None:
            self.info_cache.put(video_id, metadata)
        return metadata

    async def resolve_video(
        self,
        recipe_name: str,
        cuisine_hint: Optional[str] = None,
        budget: Optional[DeadlineBudget] = None,
    ) -> VideoInfo:
        """Resolve a recipe name to the best available video. Never raises."""
        try:
            query = await self.enhance_query(recipe_name, budget)
            cache_key = query.lower()
            cached = self.search_cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Video cache hit for '{cache_key}'")
                return cached

            if budget is not None and budget.expired():
                logger.warning(f"No time left to search videos for '{recipe_name}'")
                return self.fallback_video(cuisine_hint, recipe_name)

            candidates = await self._search(query)
            if not candidates:
                logger.info(f"No video results for '{query}', using reliable pool")
                return self.reliable_video(cuisine_hint)

            best = rank_candidates(candidates)[0]
            if not best.video_id:
                logger.info(f"Top video result for '{query}' has no id, using reliable pool")
                return self.reliable_video(cuisine_hint)

            metadata = await self._video_metadata(best.video_id) or VideoMetadata()
            duration_seconds = metadata.duration_seconds or best.duration_seconds
            video = VideoInfo(
                video_id=best.video_id,
                title=metadata.title or best.title or query,
                channel_name=metadata.channel_name or best.channel_name or "Unknown Channel",
                thumbnail_url=metadata.thumbnail_url or best.thumbnail_url or thumbnail_url(best.video_id),
                duration=format_duration(duration_seconds),
                views=metadata.views or best.views,
            )
            self.search_cache.put(cache_key, video)
            logger.info(f"✓ Video for '{recipe_name}': {video.video_id} ({video.title})")
            return video
        except Exception as e:
            logger.error(f"Video resolution failed for '{recipe_name}': {e}")
            return self.fallback_video(cuisine_hint, recipe_name)

    async def validate_video_id(self, video_id: Optional[str]) -> VideoValidation:
        """Check a video id: known pool, then format, then an existence probe."""
        if not video_id:
            return VideoValidation(valid=False)
        if video_id in KNOWN_VIDEO_IDS:
            return VideoValidation(valid=True)
        if not VIDEO_ID_PATTERN.match(video_id):
            return VideoValidation(valid=False, fallback_id=self.rng.choice(KNOWN_VIDEO_ID_LIST))

        exists = await safe_execute_async(
            self.youtube.probe_video(video_id), f"Probe video {video_id}", default_return=False
        )
        if exists:
            return VideoValidation(valid=True)
        return VideoValidation(valid=False, fallback_id=self.rng.choice(KNOWN_VIDEO_ID_LIST))
