from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_DURATION,
    DEFAULT_STREAM_QUALITY,
    DUB,
    PLACEHOLDER_ID_PREFIX,
    SUB,
)


class SubOrDub(str, Enum):
    """Language track of an anime or episode."""
    SUB = "SUB"
    DUB = "DUB"

    @classmethod
    def parse(cls, value: Any, default: Optional["SubOrDub"] = None) -> "SubOrDub":
        """Reads loose upstream values ('dub', 'Dubbed') without raising."""
        default = default or cls.SUB
        if isinstance(value, SubOrDub):
            return value
        if isinstance(value, str) and value.strip().upper().startswith(DUB):
            return cls.DUB
        if isinstance(value, str) and value.strip().upper().startswith(SUB):
            return cls.SUB
        return default


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _Record:
    """camelCase dict export shared by the canonical records."""

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, list):
                value = [v.to_dict() if isinstance(v, _Record) else v for v in value]
            out[_camel(f.name)] = value
        return out

    @property
    def has_placeholder_id(self) -> bool:
        """True when the id was invented because the source had none. Never persist these."""
        return self.id.startswith(PLACEHOLDER_ID_PREFIX)


@dataclass
class EpisodeItem(_Record):
    """A single episode as served to callers."""
    id: str
    anime_id: str
    number: int
    title: str
    thumbnail: str
    duration: str = DEFAULT_DURATION
    release_date: str = ""
    streaming_url: Optional[str] = None
    download_url: Optional[str] = None
    sub_or_dub: SubOrDub = SubOrDub.SUB
    url: Optional[str] = None


@dataclass
class ContentItem(_Record):
    """
    Canonical anime record.

    `episodes` holds any episode list the source embedded in a detail
    payload. `view_count` is None when the source does not report one.
    """
    id: str
    title: str
    image: str
    synopsis: str
    status: str
    total_episodes: int
    rating: str
    genres: List[str] = field(default_factory=list)
    release_date: str = ""
    studio: Optional[str] = None
    year: Optional[int] = None
    view_count: Optional[int] = None
    type: str = "TV"
    sub_or_dub: SubOrDub = SubOrDub.SUB
    url: Optional[str] = None
    episodes: List[EpisodeItem] = field(default_factory=list)


@dataclass
class StreamSource:
    """One playable stream descriptor from a watch endpoint."""
    url: str
    quality: str = DEFAULT_STREAM_QUALITY
    is_m3u8: bool = False
