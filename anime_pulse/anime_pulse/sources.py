"""
Outbound HTTP for the aggregator.

One bounded-time JSON GET per source attempt, with failures mapped onto the
error taxonomy (TransportError, ProtocolError, ShapeError) and recorded as
tagged SourceAttempt results rather than swallowed.
"""

import json
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import BODY_CHUNK_SIZE, REQUEST_HEADERS
from .logging import APIError, ProtocolError, ShapeError, TransportError, get_logger, log_api_call

logger = get_logger(__name__)

T = TypeVar("T")


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    SHAPE = "shape"


@dataclass
class SourceAttempt:
    """What happened when one source was asked for data."""
    source: str
    url: str
    outcome: AttemptOutcome
    reason: Optional[str] = None
    status_code: Optional[int] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS

    @classmethod
    def failed(cls, source: str, url: str, error: APIError, elapsed_ms: float) -> "SourceAttempt":
        if isinstance(error, TransportError):
            outcome = AttemptOutcome.TRANSPORT
        elif isinstance(error, ProtocolError):
            outcome = AttemptOutcome.PROTOCOL
        else:
            outcome = AttemptOutcome.SHAPE
        return cls(
            source=source,
            url=url,
            outcome=outcome,
            reason=str(error),
            status_code=getattr(error, "status_code", None),
            elapsed_ms=elapsed_ms,
        )


@dataclass
class Resolution(Generic[T]):
    """
    Result of walking the ordered source list once.

    `value` is whatever the first usable source produced, or None when every
    source failed. `attempts` lists each source actually tried, in order.
    """
    value: Optional[T] = None
    served_by: Optional[str] = None
    attempts: List[SourceAttempt] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.served_by is None


def create_session(user_agent: str) -> requests.Session:
    """
    Creates a session with the aggregator headers and retries disabled.
    A failing source is abandoned for the next one, never retried.
    """
    session = requests.Session()
    session.headers.update(REQUEST_HEADERS)
    session.headers["User-Agent"] = user_agent
    adapter = HTTPAdapter(max_retries=Retry(total=0, read=False))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def build_url(template: str, **params: Any) -> str:
    """Fills a source template, URL-quoting every value."""
    return template.format(**{k: quote(str(v), safe="") for k, v in params.items()})


def _cut_off(resp: requests.Response, expired: threading.Event) -> None:
    """Watchdog callback: unblocks a body read that outlived its deadline."""
    expired.set()
    try:
        resp.raw.shutdown()
    except (ValueError, OSError) as e:
        # Connection already gone; the reader is not blocked on it
        logger.debug(f"Could not shut down response socket: {e}")


def fetch_json(
    session: requests.Session,
    url: str,
    timeout_seconds: float,
    source: Optional[str] = None,
) -> Any:
    """
    GETs a URL and returns the decoded JSON body.

    `timeout_seconds` bounds connecting and every read, and also the whole
    exchange: a source that answers but trickles its body is cut off once
    the deadline passes, however steadily bytes keep arriving.

    Raises:
        TransportError: Connection, DNS or timeout failure.
        ProtocolError: Non-2xx response.
        ShapeError: Body is not JSON.
    """
    log_api_call(url, "GET", source)
    deadline = time.monotonic() + timeout_seconds

    try:
        resp = session.get(url, timeout=(timeout_seconds, timeout_seconds), stream=True)
    except requests.Timeout as e:
        raise TransportError(f"Timed out after {timeout_seconds:.1f}s") from e
    except requests.RequestException as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e

    expired = threading.Event()
    watchdog = threading.Timer(max(deadline - time.monotonic(), 0.0), _cut_off, args=(resp, expired))
    watchdog.daemon = True
    watchdog.start()
    try:
        if not resp.ok:
            raise ProtocolError(f"HTTP {resp.status_code}: {resp.reason}", resp.status_code)
        body = b"".join(resp.iter_content(chunk_size=BODY_CHUNK_SIZE))
    except (requests.RequestException, OSError) as e:
        if expired.is_set() or isinstance(e, requests.Timeout):
            raise TransportError(f"Timed out after {timeout_seconds:.1f}s") from e
        raise TransportError(f"{type(e).__name__}: {e}") from e
    finally:
        watchdog.cancel()
        resp.close()

    # A body without Content-Length just ends early when cut off
    if expired.is_set():
        raise TransportError(f"Timed out after {timeout_seconds:.1f}s")

    try:
        return json.loads(body)
    except ValueError as e:
        raise ShapeError(f"Response is not JSON: {e}") from e
