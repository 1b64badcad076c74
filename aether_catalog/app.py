from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Union

from textual.app import App
from textual.reactive import reactive
from textual.screen import Screen

from .catalog import DEFAULT_SEED_PATH, CatalogStore
from .errors import CatalogError
from .filters import ArtistFilterModel
from .models import Album, Artist
from .navigation import NavigationCoordinator, NavigationEntry, ScreenKind
from .playback import PlaybackSelector, UrlOpener, open_in_browser
from .screens import ArtistDetailScreen, ArtistListScreen, SongListScreen

DEFAULT_THEME = "matrix"
DEFAULT_FAILURE_LOG = "failure_log.json"


class CatalogBrowserApp(App):
    """Artist → album → song browser."""

    TITLE = "AETHER CATALOG BROWSER"
    SUB_TITLE = "ARTIST // ALBUM // SONG"

    # ==========================================================================
    # CHROMA-SHIFT DESIGN SYSTEM
    # ==========================================================================
    THEMES = {
        "matrix": {
            "aether-bg": "#050505",
            "aether-surface": "#0a0a0a",
            "aether-accent": "#00ff00",
            "aether-text": "#00ff00",
            "aether-dim": "#004400",
        },
        "cyberpunk": {
            "aether-bg": "#0d0221",
            "aether-surface": "#0f084b",
            "aether-accent": "#00f5d4",
            "aether-text": "#fee440",
            "aether-dim": "#9b5de5",
        },
        "molten": {
            "aether-bg": "#1a0f0f",
            "aether-surface": "#2d1616",
            "aether-accent": "#ff4d4d",
            "aether-text": "#ffcc00",
            "aether-dim": "#800000",
        },
    }

    visual_theme = reactive(DEFAULT_THEME)
    palette_name = DEFAULT_THEME

    DEFAULT_CSS = """
    Screen {
        background: $aether-bg;
        color: $aether-text;
    }

    .frame-box {
        height: 1fr;
        border: heavy $aether-accent;
        padding: 1 3;
        background: $aether-surface;
    }

    .frame-line, .frame-title {
        text-align: center;
        width: 100%;
        color: $aether-accent;
        text-style: bold;
    }

    Label {
        margin-top: 1;
        color: $aether-dim;
        text-style: italic;
    }

    #filter-row {
        height: auto;
    }

    #filter-row Select {
        width: 1fr;
    }

    DataTable {
        height: 1fr;
        margin-top: 1;
    }

    #artist-bio {
        text-align: left;
        color: $aether-text;
        margin-top: 1;
    }

    #playback-status {
        height: 1;
        margin-top: 1;
    }

    #song-log {
        height: 8;
        border: solid $aether-dim;
    }
    """

    def __init__(self, catalog: CatalogStore, theme: str = DEFAULT_THEME,
                 opener: UrlOpener = open_in_browser,
                 failure_log: Union[str, Path, None] = None):
        super().__init__()
        self.catalog = catalog
        self.artist_filter = ArtistFilterModel(catalog)
        self.navigator = NavigationCoordinator()
        self.playback = PlaybackSelector(opener=opener, failure_log=failure_log)
        self.palette_name = theme if theme in self.THEMES else DEFAULT_THEME
        self.visual_theme = self.palette_name
        self.navigator.subscribe(self._sync_screen_stack)

    def get_css_variables(self) -> dict[str, str]:
        """Inject theme color tokens into the CSS variable system."""
        variables = super().get_css_variables()
        variables.update(self.THEMES[self.palette_name])
        return variables

    def watch_visual_theme(self, theme: str) -> None:
        self.palette_name = theme
        if self.is_running:
            self.refresh_css()

    def action_cycle_theme(self) -> None:
        names = list(self.THEMES)
        self.visual_theme = names[(names.index(self.palette_name) + 1) % len(names)]
        self.notify(f"VISUAL VECTOR: {self.visual_theme.upper()}", severity="information")

    def on_mount(self) -> None:
        self.push_screen(ArtistListScreen(self.artist_filter))

    # ── User intents ────────────────────────────────────────────
    def select_artist(self, artist: Artist) -> NavigationEntry:
        return self.navigator.select_artist(artist)

    def select_album(self, album: Album) -> NavigationEntry:
        return self.navigator.select_album(album)

    def action_navigate_back(self) -> None:
        self.navigator.pop()

    def screen_for(self, entry: NavigationEntry) -> Screen:
        if entry.screen is ScreenKind.ARTIST_DETAIL:
            return ArtistDetailScreen(entry.payload)
        if entry.screen is ScreenKind.SONG_LIST:
            return SongListScreen(entry.payload)
        return ArtistListScreen(self.artist_filter)

    def _sync_screen_stack(self, action: str, entry: NavigationEntry) -> None:
        """Mirror coordinator pushes/pops onto the Textual screen stack."""
        if action == "push":
            self.push_screen(self.screen_for(entry))
        elif action == "pop":
            self.pop_screen()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aether-catalog", description="Browse an artist/album/song catalog.")
    parser.add_argument("--seed", default=str(DEFAULT_SEED_PATH), help="JSON seed catalog to load")
    parser.add_argument("--theme", default=DEFAULT_THEME, choices=sorted(CatalogBrowserApp.THEMES))
    parser.add_argument("--failure-log", default=DEFAULT_FAILURE_LOG,
                        help="JSON file for playback failures (empty string disables)")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        catalog = CatalogStore.from_file(args.seed)
    except CatalogError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1

    failure_log = Path.cwd() / args.failure_log if args.failure_log else None
    app = CatalogBrowserApp(catalog, theme=args.theme, failure_log=failure_log)
    app.run()
    return 0
