"""
Constants used throughout the AnimePulse aggregator.
"""

# Upstream API Base URLs
CONSUMET_BASE_URL = "https://api.consumet.org"
ANBU_BASE_URL = "https://anbuanime.onrender.com"
BACKUP_BASE_URL = "https://gogoanime.consumet.stream"
JIKAN_BASE_URL = "https://api.jikan.moe/v4"

# Source Kinds
SOURCE_KIND_GENERIC = "generic"
SOURCE_KIND_JIKAN = "jikan"
SOURCE_KINDS = {SOURCE_KIND_GENERIC, SOURCE_KIND_JIKAN}

# Operations a source may define a URL template for
OP_SEARCH = "search"
OP_TRENDING = "trending"
OP_RECENT = "recent"
OP_INFO = "info"
OP_WATCH = "watch"
OPERATIONS = (OP_SEARCH, OP_TRENDING, OP_RECENT, OP_INFO, OP_WATCH)

# Placeholders each operation's URL template may use
OPERATION_PLACEHOLDERS = {
    OP_SEARCH: {"query", "page"},
    OP_TRENDING: {"page"},
    OP_RECENT: {"page", "kind"},
    OP_INFO: {"id"},
    OP_WATCH: {"id"},
}

# Default ordered source list. Templates use {query}, {page}, {kind} and {id}.
DEFAULT_SOURCES = [
    {
        "name": "jikan-top",
        "kind": SOURCE_KIND_JIKAN,
        "trending": f"{JIKAN_BASE_URL}/top/anime?limit=25&page={{page}}",
    },
    {
        "name": "consumet",
        "kind": SOURCE_KIND_GENERIC,
        "search": f"{CONSUMET_BASE_URL}/anime/gogoanime/{{query}}?page={{page}}",
        "trending": f"{CONSUMET_BASE_URL}/anime/gogoanime/top-airing?page={{page}}",
        "recent": f"{CONSUMET_BASE_URL}/anime/gogoanime/recent-episodes?page={{page}}&type={{kind}}",
        "info": f"{CONSUMET_BASE_URL}/anime/gogoanime/info/{{id}}",
        "watch": f"{CONSUMET_BASE_URL}/anime/gogoanime/watch/{{id}}",
    },
    {
        "name": "anbu",
        "kind": SOURCE_KIND_GENERIC,
        "search": f"{ANBU_BASE_URL}/search/{{query}}?page={{page}}",
        "trending": f"{ANBU_BASE_URL}/popular?page={{page}}",
        "recent": f"{ANBU_BASE_URL}/recent-release?type={{kind}}&page={{page}}",
        "info": f"{ANBU_BASE_URL}/anime-details/{{id}}",
        "watch": f"{ANBU_BASE_URL}/vidcdn/watch/{{id}}",
    },
    {
        "name": "gogoanime-backup",
        "kind": SOURCE_KIND_GENERIC,
        "search": f"{BACKUP_BASE_URL}/search/{{query}}?page={{page}}",
        "trending": f"{BACKUP_BASE_URL}/popular?page={{page}}",
        "recent": f"{BACKUP_BASE_URL}/recent-release?type={{kind}}&page={{page}}",
        "info": f"{BACKUP_BASE_URL}/anime-details/{{id}}",
        "watch": f"{BACKUP_BASE_URL}/vidcdn/watch/{{id}}",
    },
    {
        "name": "jikan",
        "kind": SOURCE_KIND_JIKAN,
        "search": f"{JIKAN_BASE_URL}/anime?q={{query}}&limit=25&page={{page}}",
        "info": f"{JIKAN_BASE_URL}/anime/{{id}}",
    },
]

# Request Configuration
REQUEST_TIMEOUT_MS = 15000
AGGREGATOR_USER_AGENT = "AnimePulse/1.0"
BODY_CHUNK_SIZE = 8192
REQUEST_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# Recent episode feeds
RECENT_KIND_SUB = 1
RECENT_KIND_DUB = 2

# Stream quality preference, best first. Anything else is a last resort.
PREFERRED_STREAM_QUALITIES = ("1080p", "720p")
DEFAULT_STREAM_QUALITY = "default"

# Normalization Defaults
PLACEHOLDER_ID_PREFIX = "tmp-"
DEFAULT_TITLE = "Title unavailable"
DEFAULT_SYNOPSIS = "Synopsis unavailable"
DEFAULT_IMAGE = "https://via.placeholder.com/400x600"
DEFAULT_THUMBNAIL = "https://via.placeholder.com/400x225"
DEFAULT_STATUS = "unknown"
DEFAULT_RATING = "0"
DEFAULT_TYPE = "TV"
DEFAULT_DURATION = "24 min"
DEFAULT_EPISODE_NUMBER = 1
DEFAULT_ANIME_ID = "unknown"
MOCK_EPISODE_RELEASE_DATE = "2024-01-01"
SUB = "SUB"
DUB = "DUB"

# Jikan reports airing state in words; map onto our status vocabulary
JIKAN_STATUS_MAP = {
    "currently airing": "ongoing",
    "finished airing": "completed",
    "not yet aired": "upcoming",
}

# Logging
LOG_FILENAME = "anime_pulse.log"
SENSITIVE_PARAM_KEYS = ("api_key", "token", "password", "secret", "key")
