"""Song → playback URL resolution and hand-off to an external opener."""
from __future__ import annotations

import asyncio
import json
import webbrowser
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, Union

from rich.text import Text

from .models import Song
from .video_url import extract_video_id, to_embed_url

RESOLVED = "RESOLVED"
PLAYING = "PLAYING"
FAILED = "FAILED"
NO_MATCH = "NO MATCH"

STATUS_MAP = {
    RESOLVED:  ("[ REDY ]", "bright_white"),
    PLAYING:   ("[ PLAY ]", "bright_green"),
    FAILED:    ("[ FAIL ]", "bright_red"),
    NO_MATCH:  ("[ MISS ]", "orange1"),
}

SUCCESS_MARKER = "▶ NOW PLAYING"
ERROR_MARKER = "✖ PLAYBACK FAILED"

UrlOpener = Callable[[str], Awaitable[bool]]


@dataclass(frozen=True)
class PlaybackResult:
    status: str
    source_url: str
    playback_url: str
    song: Optional[Song] = None
    error: str = ""
    log_error: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (RESOLVED, PLAYING)

    @property
    def status_text(self) -> str:
        if self.song is None:
            return f"NO SONG MATCHES {self.source_url}"
        if self.status == PLAYING:
            return f"{self.song.title} {SUCCESS_MARKER}"
        if self.status == FAILED:
            detail = f" ({self.error})" if self.error else ""
            return f"{self.song.title} {ERROR_MARKER}{detail}"
        return f"{self.song.title} READY"


def render_status_badge(status: str) -> Text:
    """Fixed-width status badge for tables and status lines."""
    label, color = STATUS_MAP.get(status, ("[ ???? ]", "white"))
    return Text.assemble(("■ ", color), (f"{label:<12}", f"bold {color}"))


async def open_in_browser(url: str) -> bool:
    """Hand ``url`` to the system browser without blocking the event loop."""
    return await asyncio.to_thread(webbrowser.open, url)


def write_failure_log(log_path: Path, entry: dict) -> None:
    """Append a structured failure entry to the JSON failure log."""
    history = []
    if log_path.exists():
        try:
            with open(log_path, 'r', encoding='utf-8') as f:
                history = json.load(f)
                if not isinstance(history, list): history = []
        except (json.JSONDecodeError, UnicodeDecodeError):
            history = []
    history.append(entry)
    with open(log_path, 'w', encoding='utf-8') as f:
        json.dump(history, f, indent=2)


class PlaybackRequest:
    """Handle for one in-flight open.

    The opener cannot be cancelled; detaching only makes its eventual
    completion a no-op, so a dismissed screen is never touched.
    """

    def __init__(self, result: PlaybackResult, on_done: Callable[[PlaybackResult], None]):
        self.result = result
        self._on_done = on_done
        self.detached = False
        self.delivered = False
        self.task: Optional[asyncio.Task] = None

    def detach(self) -> None:
        self.detached = True

    def deliver(self, result: PlaybackResult) -> bool:
        self.result = result
        if self.detached or self.delivered:
            return False
        self.delivered = True
        self._on_done(result)
        return True


class PlaybackSelector:
    """Resolves songs to playback URLs and reports the opener's outcome as text."""

    def __init__(self, opener: UrlOpener = open_in_browser, failure_log: Union[str, Path, None] = None):
        self.opener = opener
        self.failure_log = Path(failure_log) if failure_log else None

    def select(self, songs: Sequence[Song], source_url: str) -> PlaybackResult:
        # Duplicates are kept; the first song in list order wins.
        song = next((s for s in songs if s.source_url == source_url), None)
        if song is None:
            return PlaybackResult(NO_MATCH, source_url, source_url)
        return PlaybackResult(RESOLVED, source_url, to_embed_url(source_url), song=song)

    def play(self, songs: Sequence[Song], source_url: str,
             on_done: Callable[[PlaybackResult], None]) -> PlaybackRequest:
        """Resolve and open ``source_url``; ``on_done`` gets the final result once.

        Must be called from a running event loop. A song that is not in
        ``songs`` is reported immediately and nothing is opened.
        """
        request = PlaybackRequest(self.select(songs, source_url), on_done)
        if request.result.song is None:
            request.deliver(request.result)
            return request
        request.task = asyncio.ensure_future(self._open(request))
        return request

    async def _open(self, request: PlaybackRequest) -> PlaybackResult:
        resolved = request.result
        try:
            opened = await self.opener(resolved.playback_url)
            error = "" if opened else "no handler accepted the URL"
        except Exception as e:
            opened = False
            error = str(e) or type(e).__name__

        if opened:
            result = replace(resolved, status=PLAYING)
        else:
            result = replace(resolved, status=FAILED, error=error)
            result = replace(result, log_error=self._record_failure(result))
        request.deliver(result)
        return result

    def _record_failure(self, result: PlaybackResult) -> str:
        """Append ``result`` to the failure log; returns the write error, if any."""
        if self.failure_log is None:
            return ""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "title": result.song.title if result.song else "",
            "source_url": result.source_url,
            "playback_url": result.playback_url,
            "video_id": extract_video_id(result.source_url),
            "error": result.error,
        }
        try:
            write_failure_log(self.failure_log, entry)
        except OSError as e:
            return f"{self.failure_log}: {e.strerror or e}"
        return ""
