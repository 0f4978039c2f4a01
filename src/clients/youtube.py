"""Video search backends and metadata lookups.

Primary backend: YouTube's InnerTube search endpoint, used only when a
browser cookie with basic credentials is configured.
Secondary backend: an Invidious instance's JSON search API.
Metadata: oEmbed first (cheap, no credentials), InnerTube player as a retry.
"""

import re
from typing import Any, Optional
from urllib.parse import quote_plus

from src.clients.http import fetch_json, probe_url
from src.data.videos import thumbnail_url
from src.models.models import VideoCandidate, VideoMetadata
from src.utils.logger import logger

INNERTUBE_SEARCH_URL = "https://www.youtube.com/youtubei/v1/search?prettyPrint=false"
INNERTUBE_PLAYER_URL = "https://www.youtube.com/youtubei/v1/player?prettyPrint=false"
OEMBED_URL = "https://www.youtube.com/oembed"
CLIENT_VERSION = "2.20250403.01.00"
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/134.0.0.0 Safari/537.36"
)
INNERTUBE_CONTEXT = {
    "client": {"hl": "en", "gl": "US", "clientName": "WEB", "clientVersion": CLIENT_VERSION}
}


def parse_length_text(length_text: Optional[str]) -> int:
    """Convert "H:MM:SS", "M:SS" or "S" into seconds (0 when unparseable)."""
    if not length_text:
        return 0
    try:
        parts = [int(part) for part in length_text.strip().split(":")]
    except ValueError:
        return 0
    seconds = 0
    for part in parts[-3:]:
        seconds = seconds * 60 + part
    return seconds


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as "H:MM:SS" or "M:SS"; "Unknown" for zero/None."""
    if not seconds:
        return "Unknown"
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_view_count(view_text: Optional[str]) -> int:
    """Extract a view count from text like "1,234,567 views" or "763K views"."""
    if not view_text:
        return 0
    match = re.search(r"([\d,.]+)\s*([KMB]?)", view_text)
    if not match:
        return 0
    number = float(match.group(1).replace(",", "")) if match.group(1).strip(".,") else 0.0
    multiplier = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}.get(match.group(2), 1)
    return int(round(number * multiplier))


def _best_thumbnail(thumbnails: list[dict[str, Any]]) -> Optional[str]:
    urls = [thumb.get("url") for thumb in thumbnails if thumb.get("url")]
    return urls[-1] if urls else None


def extract_search_results(data: dict[str, Any]) -> list[VideoCandidate]:
    """Pull video renderers out of an InnerTube search response, preserving order."""
    sections = (
        data.get("contents", {})
        .get("twoColumnSearchResultsRenderer", {})
        .get("primaryContents", {})
        .get("sectionListRenderer", {})
        .get("contents", [])
    )
    item_section = next((s["itemSectionRenderer"] for s in sections if "itemSectionRenderer" in s), None)
    if not item_section:
        return []

    candidates: list[VideoCandidate] = []
    for item in item_section.get("contents", []):
        renderer = item.get("videoRenderer")
        if not renderer:
            continue
        title_runs = renderer.get("title", {}).get("runs") or [{}]
        owner_runs = renderer.get("ownerText", {}).get("runs") or [{}]
        candidates.append(
            VideoCandidate(
                video_id=renderer.get("videoId"),
                title=title_runs[0].get("text", ""),
                channel_name=owner_runs[0].get("text") or None,
                thumbnail_url=_best_thumbnail(renderer.get("thumbnail", {}).get("thumbnails", [])),
                duration_seconds=parse_length_text(renderer.get("lengthText", {}).get("simpleText")),
                views=parse_view_count(renderer.get("viewCountText", {}).get("simpleText")),
            )
        )
    return candidates


class YouTubeClient:
    """Search and metadata calls against YouTube and an Invidious mirror.

    Args:
        cookie: Browser cookie string for the InnerTube backend ("" disables it).
        invidious_base_url: Base URL of the secondary backend.
        search_timeout: Seconds per search request.
        metadata_timeout: Seconds per metadata or probe request.
    """

    def __init__(
        self,
        cookie: str = "",
        invidious_base_url: str = "https://yewtu.be",
        search_timeout: float = 8.0,
        metadata_timeout: float = 8.0,
    ) -> None:
        self.cookie = cookie
        self.invidious_base_url = invidious_base_url.rstrip("/")
        self.search_timeout = search_timeout
        self.metadata_timeout = metadata_timeout

    def has_basic_auth(self) -> bool:
        return bool(self.cookie) and ("VISITOR_INFO1_LIVE=" in self.cookie or "SID=" in self.cookie)

    def request_headers(self, query: Optional[str] = None) -> dict[str, str]:
        referer = "https://www.youtube.com/"
        if query:
            referer = f"https://www.youtube.com/results?search_query={quote_plus(query)}"
        headers = {
            "accept": "*/*",
            "accept-language": "en-US,en;q=0.9",
            "content-type": "application/json",
            "origin": "https://www.youtube.com",
            "referer": referer,
            "user-agent": USER_AGENT,
            "x-youtube-client-name": "1",
            "x-youtube-client-version": CLIENT_VERSION,
        }
        if self.cookie:
            headers["cookie"] = self.cookie
        return headers

    async def search_direct(self, query: str) -> list[VideoCandidate]:
        """Primary backend: InnerTube search."""
        data = await fetch_json(
            INNERTUBE_SEARCH_URL,
            method="POST",
            headers=self.request_headers(query),
            json_body={"context": INNERTUBE_CONTEXT, "query": query},
            timeout=self.search_timeout,
        )
        candidates = extract_search_results(data) if isinstance(data, dict) else []
        logger.debug(f"InnerTube search returned {len(candidates)} videos for '{query}'")
        return candidates

    async def search_invidious(self, query: str) -> list[VideoCandidate]:
        """Secondary backend: Invidious /api/v1/search."""
        data = await fetch_json(
            f"{self.invidious_base_url}/api/v1/search",
            params={"q": query, "type": "video"},
            timeout=self.search_timeout,
        )
        candidates = [
            VideoCandidate(
                video_id=item.get("videoId"),
                title=item.get("title", ""),
                channel_name=item.get("author"),
                thumbnail_url=thumbnail_url(item["videoId"]) if item.get("videoId") else None,
                duration_seconds=item.get("lengthSeconds"),
                views=item.get("viewCount"),
            )
            for item in (data if isinstance(data, list) else [])
            if isinstance(item, dict) and item.get("type", "video") == "video"
        ]
        logger.debug(f"Invidious search returned {len(candidates)} videos for '{query}'")
        return candidates

    async def get_video_info(self, video_id: str) -> Optional[VideoMetadata]:
        """Fetch title/channel (and when available duration/views) for one video.

        Tries oEmbed first, then the InnerTube player endpoint. Errors from
        oEmbed fall through to the player call; errors from the player call propagate.

        Returns:
            VideoMetadata, or None if neither endpoint had details.
        """
        try:
            embed = await fetch_json(
                OEMBED_URL,
                params={"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"},
                headers=self.request_headers(),
                timeout=self.metadata_timeout,
            )
            if isinstance(embed, dict) and embed.get("title"):
                return VideoMetadata(
                    title=embed.get("title"),
                    channel_name=embed.get("author_name"),
                    thumbnail_url=thumbnail_url(video_id),
                )
        except Exception as e:
            logger.debug(f"oEmbed lookup failed for {video_id}: {e}")

        data = await fetch_json(
            INNERTUBE_PLAYER_URL,
            method="POST",
            headers=self.request_headers(),
            json_body={"context": INNERTUBE_CONTEXT, "videoId": video_id},
            timeout=self.metadata_timeout,
        )
        details = data.get("videoDetails") if isinstance(data, dict) else None
        if not details:
            return None
        return VideoMetadata(
            title=details.get("title"),
            channel_name=details.get("author"),
            thumbnail_url=_best_thumbnail(details.get("thumbnail", {}).get("thumbnails", [])) or thumbnail_url(video_id),
            duration_seconds=int(details.get("lengthSeconds") or 0) or None,
            views=int(details.get("viewCount") or 0) or None,
        )

    async def probe_video(self, video_id: str) -> bool:
        """Lightweight existence check through the oEmbed endpoint."""
        url = f"{OEMBED_URL}?url=https://www.youtube.com/watch?v={video_id}&format=json"
        return await probe_url(url, timeout=self.metadata_timeout, headers=self.request_headers())
