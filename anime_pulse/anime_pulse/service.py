"""
Multi-source content aggregation.

ContentAggregator asks an ordered list of unreliable upstream APIs for anime
and episode data, one source at a time, and returns the first usable answer.
Per-source failures are logged and recorded, never raised. When every source
fails each operation applies its own fallback: mock records for lists, None
for single-item lookups and stream links.
"""

import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import AggregatorConfig, SourceEndpoint, get_aggregator_config
from .constants import (
    DEFAULT_STREAM_QUALITY,
    OP_INFO,
    OP_RECENT,
    OP_SEARCH,
    OP_TRENDING,
    OP_WATCH,
    PREFERRED_STREAM_QUALITIES,
    RECENT_KIND_DUB,
    RECENT_KIND_SUB,
    SOURCE_KIND_JIKAN,
)
from .logging import APIError, ShapeError, get_logger
from .mock_data import mock_catalog, mock_episodes, search_mock_catalog
from .models import ContentItem, EpisodeItem, StreamSource, SubOrDub
from .normalizer import normalize_content, normalize_episode, to_int
from .sources import (
    AttemptOutcome,
    Resolution,
    SourceAttempt,
    build_url,
    create_session,
    fetch_json,
)

logger = get_logger(__name__)

# accept(payload, source) -> value, raising ShapeError when the payload is unusable
Acceptor = Callable[[Any, SourceEndpoint], Any]


def parse_stream_sources(raw: Any) -> List[StreamSource]:
    """Keeps only descriptors that carry a playable url."""
    if not isinstance(raw, list):
        return []
    streams = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        url = entry.get("url")
        if not isinstance(url, str) or not url.strip():
            continue
        quality = entry.get("quality")
        streams.append(StreamSource(
            url=url.strip(),
            quality=quality.strip() if isinstance(quality, str) and quality.strip() else DEFAULT_STREAM_QUALITY,
            is_m3u8=bool(entry.get("isM3U8")) or url.split("?")[0].endswith(".m3u8"),
        ))
    return streams


def pick_best_source(streams: List[StreamSource]) -> Optional[StreamSource]:
    """
    1080p beats 720p beats everything else. Unrecognized tags are never
    ranked against each other: the first descriptor in source order wins.
    """
    for wanted in PREFERRED_STREAM_QUALITIES:
        for stream in streams:
            if stream.quality.lower() == wanted:
                return stream
    return streams[0] if streams else None


def _payload_list(payload: Any, source: SourceEndpoint, allow_bare_list: bool = False) -> List[Any]:
    if allow_bare_list and isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = payload.get("data" if source.kind == SOURCE_KIND_JIKAN else "results")
    else:
        items = None
    if not isinstance(items, list) or not items:
        raise ShapeError("Payload has no results")
    return items


def _accept_content_list(payload: Any, source: SourceEndpoint) -> List[ContentItem]:
    return [normalize_content(item, source.kind) for item in _payload_list(payload, source)]


def _accept_detail(payload: Any, source: SourceEndpoint) -> ContentItem:
    detail = payload.get("data") if source.kind == SOURCE_KIND_JIKAN and isinstance(payload, dict) else payload
    if not isinstance(detail, dict):
        raise ShapeError("Payload is not a detail object")
    if not any(detail.get(key) not in (None, "") for key in ("id", "mal_id", "title", "animeTitle")):
        raise ShapeError("Detail object has neither an id nor a title")
    return normalize_content(detail, source.kind)


def _accept_stream(payload: Any, source: SourceEndpoint) -> StreamSource:
    raw = payload.get("sources") if isinstance(payload, dict) else None
    best = pick_best_source(parse_stream_sources(raw))
    if best is None:
        raise ShapeError("Payload has no playable stream sources")
    return best


def _page(page: Any) -> int:
    value = to_int(page)
    return value if value is not None and value >= 1 else 1


class ContentAggregator:
    """
    Resolves anime data from volatile third-party sources with graceful
    degradation. Public operations never raise on upstream failure.

    Holds no state between calls besides its (read-only) configuration: each
    call opens and closes its own HTTP session, so one instance can be shared
    freely across threads.
    """

    def __init__(
        self,
        config: Optional[AggregatorConfig] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
    ):
        self.config = config or get_aggregator_config()
        self._session_factory = session_factory or (lambda: create_session(self.config.user_agent))

    @property
    def sources(self) -> List[SourceEndpoint]:
        return list(self.config.sources)

    def resolve(self, operation: str, params: Dict[str, Any], accept: Acceptor) -> Resolution:
        """
        Walks the source list in priority order and returns the first usable
        result. Sources without a template for `operation` are skipped.

        Args:
            operation: One of the OP_* names (search, trending, recent, info, watch).
            params: Values for the URL template placeholders.
            accept: Turns a decoded payload into the result, raising
                    ShapeError when the payload is unusable.
        """
        resolution = Resolution()

        with self._session_factory() as session:
            for source in self.config.sources:
                template = source.template_for(operation)
                if not template:
                    logger.debug(f"[{operation}] {source.name} has no endpoint, skipping")
                    continue

                url = build_url(template, **params)
                started = time.monotonic()
                try:
                    payload = fetch_json(session, url, self.config.timeout_seconds, source.name)
                    value = accept(payload, source)
                except APIError as e:
                    attempt = SourceAttempt.failed(source.name, url, e, _elapsed_ms(started))
                except Exception as e:
                    logger.exception(f"[{operation}] {source.name} payload could not be handled")
                    attempt = SourceAttempt.failed(
                        source.name, url, ShapeError(f"{type(e).__name__}: {e}"), _elapsed_ms(started)
                    )
                else:
                    resolution.attempts.append(SourceAttempt(
                        source=source.name,
                        url=url,
                        outcome=AttemptOutcome.SUCCESS,
                        elapsed_ms=_elapsed_ms(started),
                    ))
                    resolution.value = value
                    resolution.served_by = source.name
                    logger.info(f"[{operation}] served by {source.name} in {resolution.attempts[-1].elapsed_ms:.0f}ms")
                    return resolution

                resolution.attempts.append(attempt)
                logger.warning(
                    f"[{operation}] {source.name} failed ({attempt.outcome.value}): {attempt.reason}"
                )

        logger.warning(f"[{operation}] all {len(resolution.attempts)} attempted sources failed")
        return resolution

    # Resolutions: the raw first-success result, before any fallback.

    def search_resolution(self, query: str, page: int = 1) -> Resolution:
        return self.resolve(OP_SEARCH, {"query": query or "", "page": _page(page)}, _accept_content_list)

    def trending_resolution(self, page: int = 1) -> Resolution:
        return self.resolve(OP_TRENDING, {"page": _page(page)}, _accept_content_list)

    def recent_resolution(self, page: int = 1, kind: int = RECENT_KIND_SUB) -> Resolution:
        language = SubOrDub.DUB if kind == RECENT_KIND_DUB else SubOrDub.SUB

        def accept(payload: Any, source: SourceEndpoint) -> List[EpisodeItem]:
            items = _payload_list(payload, source, allow_bare_list=True)
            return [normalize_episode(item, default_sub_or_dub=language) for item in items]

        return self.resolve(OP_RECENT, {"page": _page(page), "kind": kind}, accept)

    def detail_resolution(self, content_id: str) -> Resolution:
        return self.resolve(OP_INFO, {"id": content_id}, _accept_detail)

    def stream_resolution(self, episode_id: str) -> Resolution:
        return self.resolve(OP_WATCH, {"id": episode_id}, _accept_stream)

    # Public operations

    def search_content(self, query: str, page: int = 1) -> List[ContentItem]:
        """Searches by title. Falls back to the mock catalog filtered by `query`."""
        resolution = self.search_resolution(query, page)
        if resolution.exhausted:
            logger.warning(f"No source answered search '{query}', using mock catalog")
            return search_mock_catalog(query)
        return resolution.value

    def get_trending_content(self, page: int = 1) -> List[ContentItem]:
        """Trending/popular listing. Falls back to the whole mock catalog."""
        resolution = self.trending_resolution(page)
        if resolution.exhausted:
            logger.warning("No source answered trending, using mock catalog")
            return mock_catalog()
        return resolution.value

    def get_recent_episodes(self, page: int = 1, kind: int = RECENT_KIND_SUB) -> List[EpisodeItem]:
        """
        Latest released episodes from the feed selected by `kind`
        (1 = subbed, 2 = dubbed). Falls back to one placeholder episode.
        """
        resolution = self.recent_resolution(page, kind)
        if resolution.exhausted:
            logger.warning("No source answered recent episodes, using mock episode")
            return mock_episodes(sub_or_dub=SubOrDub.DUB if kind == RECENT_KIND_DUB else SubOrDub.SUB)
        return resolution.value

    def get_content_by_id(self, content_id: str) -> Optional[ContentItem]:
        """Detail lookup. Returns None, never mock data, when no source knows the id."""
        if not content_id or not str(content_id).strip():
            logger.warning("Content lookup called without an id")
            return None
        resolution = self.detail_resolution(str(content_id).strip())
        if resolution.exhausted:
            logger.warning(f"No source has details for '{content_id}'")
            return None
        return resolution.value

    def get_episodes_for_content(self, content_id: str) -> List[EpisodeItem]:
        """Episodes embedded in the content detail, else one mock episode for `content_id`."""
        content = self.get_content_by_id(content_id)
        if content is not None and content.episodes:
            logger.info(f"Found {len(content.episodes)} episodes for {content_id}")
            return [replace(ep, anime_id=content_id) for ep in content.episodes]

        logger.warning(f"Using mock episodes for {content_id}")
        return mock_episodes(content_id)

    def resolve_stream_url(self, episode_id: str) -> Optional[str]:
        """
        Best playable URL for an episode, or None. A missing stream is
        reported as unavailable, never papered over with mock data.
        """
        if not episode_id or not str(episode_id).strip():
            logger.warning("Stream lookup called without an episode id")
            return None
        resolution = self.stream_resolution(str(episode_id).strip())
        if resolution.exhausted:
            logger.warning(f"No stream available for episode '{episode_id}'")
            return None
        stream = resolution.value
        logger.info(f"Stream for {episode_id}: {stream.quality} from {resolution.served_by}")
        return stream.url


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000.0
