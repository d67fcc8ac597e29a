"""
Normalization of upstream payloads into canonical records.

Every function here is total: whatever shape a source sends (missing keys,
numbers as strings, nulls, a list where an object was expected) comes back
as a fully populated ContentItem or EpisodeItem. Nothing in this module
raises on bad input.
"""

import re
import uuid
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_ANIME_ID,
    DEFAULT_DURATION,
    DEFAULT_EPISODE_NUMBER,
    DEFAULT_IMAGE,
    DEFAULT_RATING,
    DEFAULT_STATUS,
    DEFAULT_SYNOPSIS,
    DEFAULT_THUMBNAIL,
    DEFAULT_TITLE,
    DEFAULT_TYPE,
    JIKAN_STATUS_MAP,
    PLACEHOLDER_ID_PREFIX,
    SOURCE_KIND_JIKAN,
)
from .models import ContentItem, EpisodeItem, SubOrDub

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
YEAR_RE = re.compile(r"\b(\d{4})\b")


def placeholder_id() -> str:
    """Random stand-in for a missing upstream id. Display only, never persist."""
    return f"{PLACEHOLDER_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def _as_dict(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _present(value: Any) -> bool:
    return value is not None and value != "" and value != [] and value != {}


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """First present value among alternate key names."""
    for key in keys:
        value = data.get(key)
        if _present(value):
            return value
    return None


def _dig(data: Any, *path: Any) -> Any:
    """Walks nested dicts/lists, returning None on the first miss."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
    return current


def to_int(value: Any) -> Optional[int]:
    """
    parseInt-style coercion: ints pass through, floats truncate, strings
    contribute their leading digits ("12 eps" -> 12). Anything else is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        match = LEADING_INT_RE.match(value)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # Past the interpreter's digit limit for str -> int
                return None
    return None


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _title_text(value: Any) -> Optional[str]:
    # Some mirrors send {"english": ..., "romaji": ...} instead of a string
    if isinstance(value, dict):
        return _to_text(_pick(value, "english", "romaji", "userPreferred", "native"))
    return _to_text(value)


def _rating_text(value: Any) -> str:
    text = _to_text(value)
    if text is None:
        return DEFAULT_RATING
    try:
        float(text)
    except ValueError:
        return DEFAULT_RATING
    return text


def _genres(value: Any) -> List[str]:
    if isinstance(value, str):
        return [g.strip() for g in value.split(",") if g.strip()]
    if not isinstance(value, list):
        return []
    genres = []
    for entry in value:
        name = _to_text(entry.get("name") or entry.get("title")) if isinstance(entry, dict) else _to_text(entry)
        if name:
            genres.append(name)
    return genres


def _year_from(date_text: str) -> Optional[int]:
    match = YEAR_RE.search(date_text)
    return int(match.group(1)) if match else None


def _iso_date(value: Any) -> str:
    # Jikan sends full timestamps ("2019-04-06T00:00:00+00:00"); keep the date
    text = _to_text(value) or ""
    if len(text) > 10 and text[4] == "-" and text[10] == "T":
        return text[:10]
    return text


def _non_negative(value: Optional[int]) -> int:
    return value if value is not None and value > 0 else 0


def normalize_episode(
    data: Any,
    anime_id: Optional[str] = None,
    default_sub_or_dub: SubOrDub = SubOrDub.SUB,
) -> EpisodeItem:
    """
    Maps an upstream episode object onto EpisodeItem.

    Args:
        data: Raw episode object from any source.
        anime_id: Parent id to stamp on the episode, overriding the payload.
        default_sub_or_dub: Language used when the payload has none.
    """
    data = _as_dict(data)

    number = to_int(_pick(data, "number", "episodeNum", "episode_number", "episode"))
    if number is None or number < 1:
        number = DEFAULT_EPISODE_NUMBER

    return EpisodeItem(
        id=_to_text(_pick(data, "id", "episodeId")) or placeholder_id(),
        anime_id=anime_id or _to_text(_pick(data, "animeId", "anime_id")) or DEFAULT_ANIME_ID,
        number=number,
        title=_title_text(_pick(data, "title", "animeTitle", "name")) or f"Episode {number}",
        thumbnail=_to_text(_pick(data, "image", "animeImg", "thumbnail")) or DEFAULT_THUMBNAIL,
        duration=_to_text(data.get("duration")) or DEFAULT_DURATION,
        release_date=_iso_date(_pick(data, "releaseDate", "aired")),
        streaming_url=_to_text(data.get("streamingUrl")),
        download_url=_to_text(data.get("downloadUrl")),
        sub_or_dub=SubOrDub.parse(data.get("subOrDub"), default_sub_or_dub),
        url=_to_text(_pick(data, "url", "episodeUrl")),
    )


def normalize_jikan_content(data: Any) -> ContentItem:
    """Maps a Jikan (MyAnimeList) anime object onto ContentItem."""
    data = _as_dict(data)

    release_date = _iso_date(_dig(data, "aired", "from"))
    raw_status = (_to_text(data.get("status")) or DEFAULT_STATUS).lower()

    return ContentItem(
        id=_to_text(data.get("mal_id")) or placeholder_id(),
        title=_to_text(_pick(data, "title", "title_english")) or DEFAULT_TITLE,
        image=_to_text(
            _dig(data, "images", "jpg", "large_image_url")
            or _dig(data, "images", "jpg", "image_url")
            or _dig(data, "images", "webp", "large_image_url")
        ) or DEFAULT_IMAGE,
        studio=_to_text(_dig(data, "studios", 0, "name")),
        year=to_int(data.get("year")) or _year_from(release_date),
        genres=_genres(data.get("genres")),
        synopsis=_to_text(data.get("synopsis")) or DEFAULT_SYNOPSIS,
        release_date=release_date,
        status=JIKAN_STATUS_MAP.get(raw_status, raw_status),
        total_episodes=_non_negative(to_int(data.get("episodes"))),
        rating=_rating_text(data.get("score")),
        view_count=to_int(data.get("members")),
        type=_to_text(data.get("type")) or DEFAULT_TYPE,
        sub_or_dub=SubOrDub.SUB,
        url=_to_text(data.get("url")),
    )


def normalize_content(
    data: Any,
    kind: Optional[str] = None,
    default_sub_or_dub: SubOrDub = SubOrDub.SUB,
) -> ContentItem:
    """
    Maps an upstream anime object onto ContentItem.

    Reads each field from a prioritized list of alternate keys, so the
    gogoanime-style (`animeTitle`, `animeImg`) and consumet-style (`title`,
    `image`) dialects both land in the same record. Jikan payloads are
    routed to normalize_jikan_content.
    """
    if kind == SOURCE_KIND_JIKAN:
        return normalize_jikan_content(data)

    data = _as_dict(data)

    content_id = _to_text(_pick(data, "id", "animeId")) or placeholder_id()
    release_date = _iso_date(_pick(data, "releaseDate", "releasedDate", "released"))

    raw_episodes = _pick(data, "episodes", "episodesList")
    embedded = raw_episodes if isinstance(raw_episodes, list) else []
    sub_or_dub = SubOrDub.parse(data.get("subOrDub"), default_sub_or_dub)
    episodes = [normalize_episode(ep, content_id, sub_or_dub) for ep in embedded]

    total_episodes = to_int(data.get("totalEpisodes"))
    if total_episodes is None:
        total_episodes = len(episodes)

    return ContentItem(
        id=content_id,
        title=_title_text(_pick(data, "title", "animeTitle", "title_english", "name")) or DEFAULT_TITLE,
        image=_to_text(_pick(data, "image", "animeImg", "cover")) or DEFAULT_IMAGE,
        studio=(
            _to_text(data.get("studio"))
            or _to_text(_dig(data, "studios", 0))
            or _to_text(_dig(data, "studios", 0, "name"))
        ),
        year=to_int(data.get("year")) or _year_from(release_date),
        genres=_genres(_pick(data, "genres", "genre")),
        synopsis=_to_text(_pick(data, "description", "synopsis", "plot")) or DEFAULT_SYNOPSIS,
        release_date=release_date,
        status=(_to_text(data.get("status")) or DEFAULT_STATUS).lower(),
        total_episodes=_non_negative(total_episodes),
        rating=_rating_text(_pick(data, "rating", "score")),
        view_count=to_int(data.get("viewCount")),
        type=_to_text(data.get("type")) or DEFAULT_TYPE,
        sub_or_dub=sub_or_dub,
        url=_to_text(_pick(data, "url", "animeUrl")),
        episodes=episodes,
    )
