"""
Built-in records served when every live source has failed.

Callers should present these as a "limited availability" state. Fresh
objects are built on every call so nobody can mutate the catalog.
"""

from typing import List, Optional

from .constants import DEFAULT_THUMBNAIL, MOCK_EPISODE_RELEASE_DATE
from .models import ContentItem, EpisodeItem, SubOrDub


def mock_catalog() -> List[ContentItem]:
    return [
        ContentItem(
            id="one-piece",
            title="One Piece",
            image="https://cdn.myanimelist.net/images/anime/1244/138851l.jpg",
            studio="Toei Animation",
            year=1999,
            genres=["Action", "Adventure", "Comedy", "Drama", "Shounen"],
            synopsis=(
                "Gol D. Roger was known as the \"Pirate King\", the strongest and "
                "most infamous being to have sailed the Grand Line."
            ),
            release_date="1999-10-20",
            status="ongoing",
            total_episodes=1000,
            rating="9.0",
            view_count=500000,
            type="TV",
            sub_or_dub=SubOrDub.SUB,
        ),
        ContentItem(
            id="demon-slayer",
            title="Demon Slayer: Kimetsu no Yaiba",
            image="https://cdn.myanimelist.net/images/anime/1286/99889l.jpg",
            studio="Ufotable",
            year=2019,
            genres=["Action", "Historical", "Supernatural", "Shounen"],
            synopsis=(
                "Tanjiro is a kind-hearted boy who sells charcoal for a living. "
                "One day his family is slaughtered by demons."
            ),
            release_date="2019-04-06",
            status="completed",
            total_episodes=44,
            rating="8.7",
            view_count=300000,
            type="TV",
            sub_or_dub=SubOrDub.SUB,
        ),
    ]


def search_mock_catalog(query: str) -> List[ContentItem]:
    """Case-insensitive title substring filter over the mock catalog."""
    needle = (query or "").lower()
    return [item for item in mock_catalog() if needle in item.title.lower()]


def is_mock_content(item: ContentItem) -> bool:
    return item in mock_catalog()


def is_mock_episode(episode: EpisodeItem) -> bool:
    return (
        episode in mock_episodes(episode.anime_id, episode.sub_or_dub)
        or episode in mock_episodes(None, episode.sub_or_dub)
    )


def mock_episodes(
    anime_id: Optional[str] = None,
    sub_or_dub: SubOrDub = SubOrDub.SUB,
) -> List[EpisodeItem]:
    """A single placeholder episode, tied to `anime_id` when one is given."""
    return [
        EpisodeItem(
            id=f"{anime_id or 'mock'}-episode-1",
            anime_id=anime_id or "mock-anime",
            number=1,
            title="Episode 1",
            thumbnail=DEFAULT_THUMBNAIL,
            duration="24 min",
            release_date=MOCK_EPISODE_RELEASE_DATE,
            sub_or_dub=sub_or_dub,
        )
    ]
