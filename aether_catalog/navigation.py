"""Screen stack with typed payload hand-off.

Each transition carries a fixed-shape payload. The song list payload copies
the artist's display name at transition time so the song list never has to
walk back up the ownership tree.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import ConfigurationError
from .models import Album, Artist
from .observable import Observable


class ScreenKind(str, Enum):
    ARTIST_LIST = "artist_list"
    ARTIST_DETAIL = "artist_detail"
    SONG_LIST = "song_list"


@dataclass(frozen=True)
class ArtistDetailPayload:
    artist: Artist

    def __post_init__(self):
        if not isinstance(self.artist, Artist):
            raise ConfigurationError(f"ArtistDetailPayload.artist must be an Artist, got {type(self.artist).__name__}")


@dataclass(frozen=True)
class SongListPayload:
    album: Album
    artist_display_name: str

    def __post_init__(self):
        if not isinstance(self.album, Album):
            raise ConfigurationError(f"SongListPayload.album must be an Album, got {type(self.album).__name__}")
        if not isinstance(self.artist_display_name, str):
            raise ConfigurationError("SongListPayload.artist_display_name must be a string")


Payload = Union[ArtistDetailPayload, SongListPayload]

PAYLOAD_TYPES: Dict[ScreenKind, Optional[type]] = {
    ScreenKind.ARTIST_LIST: None,
    ScreenKind.ARTIST_DETAIL: ArtistDetailPayload,
    ScreenKind.SONG_LIST: SongListPayload,
}


@dataclass(frozen=True)
class NavigationEntry:
    screen: ScreenKind
    payload: Optional[Payload] = None


ROOT_ENTRY = NavigationEntry(ScreenKind.ARTIST_LIST)


def screen_kind(screen: Any) -> ScreenKind:
    try:
        return ScreenKind(screen)
    except ValueError:
        raise ConfigurationError(f"Unknown screen: {screen!r}") from None


def build_payload(screen: Any, payload: Any) -> Optional[Payload]:
    """Validate ``payload`` for ``screen``; mappings are converted to the typed form."""
    screen = screen_kind(screen)
    expected = PAYLOAD_TYPES[screen]

    if expected is None:
        if payload:
            raise ConfigurationError(f"{screen.value} takes no payload")
        return None
    if isinstance(payload, expected):
        return payload
    if isinstance(payload, Mapping):
        required = [f.name for f in fields(expected)]
        missing = [key for key in required if key not in payload]
        if missing:
            raise ConfigurationError(
                f"Payload for {screen.value} is missing required key(s): {', '.join(missing)}"
            )
        return expected(**{key: payload[key] for key in required})
    raise ConfigurationError(
        f"{screen.value} expects {expected.__name__}, got {type(payload).__name__}"
    )


class NavigationCoordinator(Observable):
    """Stack of screens rooted at the artist list.

    Subscribers receive ``(action, entry)`` where action is "push" or "pop"
    and entry is the entry pushed or discarded.
    """

    def __init__(self) -> None:
        super().__init__()
        self._stack: List[NavigationEntry] = [ROOT_ENTRY]

    @property
    def current(self) -> NavigationEntry:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    def history(self) -> List[NavigationEntry]:
        return list(self._stack)

    def current_payload(self) -> Optional[Payload]:
        return self.current.payload

    def push(self, screen: ScreenKind, payload: Union[Payload, Mapping[str, Any], None] = None) -> NavigationEntry:
        screen = screen_kind(screen)
        entry = NavigationEntry(screen, build_payload(screen, payload))
        self._stack.append(entry)
        self._notify("push", entry)
        return entry

    def pop(self) -> Optional[NavigationEntry]:
        """Go back one screen. The artist list is never popped."""
        if len(self._stack) == 1:
            return None
        entry = self._stack.pop()
        self._notify("pop", entry)
        return entry

    def select_artist(self, artist: Artist) -> NavigationEntry:
        return self.push(ScreenKind.ARTIST_DETAIL, ArtistDetailPayload(artist))

    def select_album(self, album: Album) -> NavigationEntry:
        payload = self.current_payload()
        if not isinstance(payload, ArtistDetailPayload):
            raise ConfigurationError(
                f"Album selection needs an artist detail screen, current is {self.current.screen.value}"
            )
        return self.push(ScreenKind.SONG_LIST, SongListPayload(album, payload.artist.name))
