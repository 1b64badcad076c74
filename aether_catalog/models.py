from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

# ── Filter sentinels ───────────────────────────────────────────
ANY_GENRE = "All"
ANY_YEAR = None


@dataclass(frozen=True)
class Song:
    title: str
    source_url: str


@dataclass(frozen=True)
class Album:
    title: str
    year: int
    cover_url: str = ""
    songs: Tuple[Song, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Artist:
    name: str
    photo_url: str = ""
    genre: str = ""
    bio: str = ""
    albums: Tuple[Album, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FilterCriteria:
    """Current search/genre/year constraint set for the artist list."""
    search_text: str = ""
    genre: str = ANY_GENRE
    year: Optional[int] = ANY_YEAR

    def with_search_text(self, text: str) -> "FilterCriteria":
        return replace(self, search_text=text or "")

    def with_genre(self, genre: str) -> "FilterCriteria":
        return replace(self, genre=ANY_GENRE if genre is None else genre)

    def with_year(self, year: Optional[int]) -> "FilterCriteria":
        return replace(self, year=year)

    @property
    def is_identity(self) -> bool:
        return self.search_text == "" and self.genre == ANY_GENRE and self.year is ANY_YEAR
