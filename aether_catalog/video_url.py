"""Video URL normalisation.

Pulls a platform video id out of the URL shapes people actually paste
(long watch links, short links, embed/shorts paths, mobile and music hosts)
and turns it into an embeddable playback URL.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse

from yt_dlp.extractor.youtube import YoutubeIE

EMBED_BASE = "https://www.youtube.com/embed/"

# Fixed playback directives: autoplay on, no related-content sidebar, minimal branding.
PLAYBACK_DIRECTIVES = (
    ("autoplay", "1"),
    ("rel", "0"),
    ("modestbranding", "1"),
)

SHORT_LINK_HOSTS = frozenset(["youtu.be", "www.youtu.be"])
VIDEO_HOSTS = frozenset([
    "youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com",
    "youtube-nocookie.com", "www.youtube-nocookie.com",
])
PATH_PREFIXES = ("embed", "shorts", "live", "v", "e")
VIDEO_ID_RE = re.compile(r'^[A-Za-z0-9_-]+$')


def _with_scheme(url: str) -> str:
    if "://" in url or url.startswith("//"):
        return url
    if re.match(r'^[\w.-]+\.[a-z]{2,}/', url, re.IGNORECASE):
        return "https://" + url
    return url


def _clean(candidate: Optional[str]) -> Optional[str]:
    if candidate and VIDEO_ID_RE.match(candidate):
        return candidate
    return None


def extract_video_id(url: str) -> Optional[str]:
    """Return the video id referenced by ``url``, or None when there is none."""
    raw = (url or "").strip()
    if not raw:
        return None

    parsed = urlparse(_with_scheme(raw))
    host = (parsed.netloc or "").lower()
    segments = [s for s in (parsed.path or "").split("/") if s]

    # Long form: ...?v=<id>&t=30
    vid = _clean((parse_qs(parsed.query).get("v") or [None])[0])
    if vid:
        return vid

    # Short link: youtu.be/<id>
    if host in SHORT_LINK_HOSTS and segments:
        return _clean(segments[0])

    # /embed/<id>, /shorts/<id>, ...
    if host in VIDEO_HOSTS and len(segments) >= 2 and segments[0] in PATH_PREFIXES:
        return _clean(segments[1])

    # Anything else the YouTube extractor knows about; bare words are not URLs.
    if not host:
        return None
    return _clean(YoutubeIE.get_temp_id(raw))


def to_embed_url(url: str) -> str:
    """Embeddable playback URL for ``url``; the input itself if no id is found."""
    vid = extract_video_id(url)
    if vid is None:
        return url
    return f"{EMBED_BASE}{vid}?{urlencode(PLAYBACK_DIRECTIVES)}"
