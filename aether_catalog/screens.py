from __future__ import annotations

import functools
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Input, Label, Log, Select, Static

from .catalog import CatalogStore
from .filters import ArtistFilterModel
from .models import ANY_GENRE, Artist
from .navigation import ArtistDetailPayload, SongListPayload
from .playback import FAILED, NO_MATCH, PLAYING, RESOLVED, PlaybackRequest, PlaybackResult, render_status_badge

ANY_YEAR_OPTION = "any"
FRAME = "=" * 50


def genre_options(catalog: CatalogStore) -> list:
    return [("ALL GENRES", ANY_GENRE)] + [(g.upper(), g) for g in catalog.genres()]


def year_options(catalog: CatalogStore) -> list:
    return [("ANY YEAR", ANY_YEAR_OPTION)] + [(str(y), str(y)) for y in catalog.years()]


def parse_year_option(value) -> Optional[int]:
    """Select value → year filter; the "any" option and blanks mean no constraint."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _album_years(artist: Artist) -> str:
    years = sorted({a.year for a in artist.albums})
    if not years:
        return "-"
    if len(years) == 1:
        return str(years[0])
    return f"{years[0]}-{years[-1]}"


class ArtistListScreen(Screen):
    """Filterable artist index. Root of the navigation stack."""

    BINDINGS = [
        Binding("slash", "focus_search", "Search"),
        Binding("c", "clear_filters", "Clear Filters"),
        Binding("t", "app.cycle_theme", "Theme"),
        Binding("q", "app.quit", "Quit"),
    ]

    def __init__(self, model: ArtistFilterModel):
        super().__init__()
        self.model = model
        self._shown_artists: Sequence[Artist] = ()
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        catalog = self.model.catalog
        yield Header()
        with Container(id="artist-list-box", classes="frame-box"):
            yield Static(FRAME, classes="frame-line")
            yield Static("      AETHER CATALOG // ARTIST INDEX      ", classes="frame-title")
            yield Static(FRAME, classes="frame-line")
            yield Label("SEARCH ARTISTS:")
            yield Input(placeholder="Type part of an artist name...", id="search-input")
            with Horizontal(id="filter-row"):
                yield Select(genre_options(catalog), value=ANY_GENRE, allow_blank=False, id="genre-select")
                yield Select(year_options(catalog), value=ANY_YEAR_OPTION, allow_blank=False, id="year-select")
            yield DataTable(id="artist-table")
            yield Label("", id="artist-count")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#artist-table", DataTable)
        table.add_column("ARTIST")
        table.add_column("GENRE", width=16)
        table.add_column("ALBUMS", width=8)
        table.add_column("YEARS", width=11)
        table.cursor_type = "row"
        self._unsubscribe = self.model.subscribe(self.render_artists)
        self.render_artists(self.model.visible)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def render_artists(self, visible: Sequence[Artist]) -> None:
        self._shown_artists = visible
        table = self.query_one("#artist-table", DataTable)
        table.clear()
        for idx, artist in enumerate(visible):
            table.add_row(
                Text(artist.name),
                Text(artist.genre or "-"),
                str(len(artist.albums)),
                _album_years(artist),
                key=str(idx),
            )
        self.query_one("#artist-count", Label).update(
            f"SHOWING {len(visible)} / {len(self.model.catalog)} ARTISTS"
        )

    @on(Input.Changed, "#search-input")
    def update_search(self, event: Input.Changed) -> None:
        self.model.set_search_text(event.value)

    @on(Select.Changed, "#genre-select")
    def update_genre(self, event: Select.Changed) -> None:
        self.model.set_genre_filter(str(event.value))

    @on(Select.Changed, "#year-select")
    def update_year(self, event: Select.Changed) -> None:
        self.model.set_year_filter(parse_year_option(event.value))

    @on(DataTable.RowSelected, "#artist-table")
    def open_artist(self, event: DataTable.RowSelected) -> None:
        idx = int(str(event.row_key.value))
        if 0 <= idx < len(self._shown_artists):
            self.app.select_artist(self._shown_artists[idx])

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_clear_filters(self) -> None:
        self.query_one("#search-input", Input).value = ""
        self.query_one("#genre-select", Select).value = ANY_GENRE
        self.query_one("#year-select", Select).value = ANY_YEAR_OPTION
        self.model.clear_filters()
        self.app.notify("Filters cleared", severity="information")


class ArtistDetailScreen(Screen):
    """One artist and their albums."""

    BINDINGS = [
        Binding("escape", "app.navigate_back", "Back to Artists"),
    ]

    def __init__(self, payload: ArtistDetailPayload):
        super().__init__()
        self.payload = payload

    def compose(self) -> ComposeResult:
        artist = self.payload.artist
        yield Header()
        with Container(id="artist-detail-box", classes="frame-box"):
            yield Static(FRAME, classes="frame-line")
            yield Static(Text(artist.name.upper()), classes="frame-title")
            yield Static(FRAME, classes="frame-line")
            yield Label(Text(f"GENRE: {artist.genre or 'UNKNOWN'}"))
            yield Static(Text(artist.bio or "No biography on file."), id="artist-bio")
            yield DataTable(id="album-table")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#album-table", DataTable)
        table.add_column("ALBUM")
        table.add_column("YEAR", width=6)
        table.add_column("SONGS", width=7)
        table.cursor_type = "row"
        for idx, album in enumerate(self.payload.artist.albums):
            table.add_row(Text(album.title), str(album.year), str(len(album.songs)), key=str(idx))

    @on(DataTable.RowSelected, "#album-table")
    def open_album(self, event: DataTable.RowSelected) -> None:
        idx = int(str(event.row_key.value))
        albums = self.payload.artist.albums
        if 0 <= idx < len(albums):
            self.app.select_album(albums[idx])


class SongListScreen(Screen):
    """Songs of one album; selecting a row hands it to the playback opener."""

    BINDINGS = [
        Binding("escape", "app.navigate_back", "Back to Albums"),
    ]

    def __init__(self, payload: SongListPayload):
        super().__init__()
        self.payload = payload
        self.col_keys = {}
        self._playback_requests: List[PlaybackRequest] = []

    def compose(self) -> ComposeResult:
        album = self.payload.album
        yield Header()
        with Container(id="song-list-box", classes="frame-box"):
            yield Static(FRAME, classes="frame-line")
            yield Static(Text(f"{self.payload.artist_display_name.upper()} // {album.title} ({album.year})"),
                         classes="frame-title")
            yield Static(FRAME, classes="frame-line")
            yield DataTable(id="song-table")
            yield Static("", id="playback-status")
            yield Log(id="song-log", highlight=True)
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#song-table", DataTable)
        self.col_keys["NO"] = table.add_column("#", width=4)
        self.col_keys["TITLE"] = table.add_column("TITLE")
        self.col_keys["STATUS"] = table.add_column("STATUS", width=16)
        table.cursor_type = "row"
        for idx, song in enumerate(self.payload.album.songs):
            table.add_row(str(idx + 1), Text(song.title), "", key=str(idx))
        self.log_kernel(f"ALBUM LOADED: {self.payload.album.title} ({len(self.payload.album.songs)} TRACKS)")

    def on_unmount(self) -> None:
        for request in self._playback_requests:
            request.detach()
        self._playback_requests.clear()

    def log_kernel(self, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#song-log", Log).write_line(f"[{timestamp}] {message}")

    @on(DataTable.RowSelected, "#song-table")
    def select_song(self, event: DataTable.RowSelected) -> None:
        self.play_song(int(str(event.row_key.value)))

    def play_song(self, idx: int) -> Optional[PlaybackRequest]:
        songs = self.payload.album.songs
        if not 0 <= idx < len(songs):
            return None
        song = songs[idx]
        self._set_row_status(idx, RESOLVED)
        self.log_kernel(f"RESOLVING: {song.title}")
        request = self.app.playback.play(songs, song.source_url, functools.partial(self._playback_done, idx))
        if not request.delivered:
            self.log_kernel(f"OPENING: {request.result.playback_url}")
            self._playback_requests.append(request)
        return request

    def _playback_done(self, idx: int, result: PlaybackResult) -> None:
        self._playback_requests = [r for r in self._playback_requests if not r.delivered]
        self._set_row_status(idx, result.status)
        self.query_one("#playback-status", Static).update(
            Text.assemble(render_status_badge(result.status), Text(result.status_text))
        )
        self.log_kernel(result.status_text)
        if result.log_error:
            self.log_kernel(f"FAILURE LOG NOT WRITTEN: {result.log_error}")
        if result.status == PLAYING:
            self.app.notify(result.status_text, severity="information")
        elif result.status in (FAILED, NO_MATCH):
            self.app.notify(result.status_text, severity="error")

    def _set_row_status(self, idx: int, status: str) -> None:
        table = self.query_one("#song-table", DataTable)
        table.update_cell(str(idx), self.col_keys["STATUS"], render_status_badge(status))
