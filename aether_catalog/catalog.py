"""In-memory artist → album → song catalog.

The store is populated once from a seed (a list of plain dicts, usually read
from a JSON file) and is read-only afterwards.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import SeedDataError
from .models import Album, Artist, Song

DEFAULT_SEED_PATH = Path(__file__).parent / "data" / "seed_catalog.json"

ArtistRef = Union[Artist, str]
AlbumRef = Union[Album, str]


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def _song_from_record(record: Mapping[str, Any]) -> Song:
    return Song(title=_text(record, "title"), source_url=_text(record, "source_url"))


def _album_from_record(record: Mapping[str, Any]) -> Album:
    try:
        year = int(record["year"])
    except (KeyError, TypeError, ValueError):
        raise SeedDataError(f"Album {record.get('title')!r} has no valid year: {record.get('year')!r}")
    return Album(
        title=_text(record, "title"),
        year=year,
        cover_url=_text(record, "cover_url"),
        songs=tuple(_song_from_record(s) for s in record.get("songs") or []),
    )


def _artist_from_record(record: Mapping[str, Any]) -> Artist:
    if not isinstance(record, Mapping):
        raise SeedDataError(f"Artist record must be an object, got {type(record).__name__}")
    name = _text(record, "name").strip()
    if not name:
        raise SeedDataError("Artist record is missing a name")
    return Artist(
        name=name,
        photo_url=_text(record, "photo_url"),
        genre=_text(record, "genre"),
        bio=_text(record, "bio"),
        albums=tuple(_album_from_record(a) for a in record.get("albums") or []),
    )


class CatalogStore:
    """Read-only view over the artist tree."""

    def __init__(self, artists: Iterable[Artist]):
        self._artists: Tuple[Artist, ...] = tuple(artists)
        self._album_ids = {id(album) for artist in self._artists for album in artist.albums}

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "CatalogStore":
        return cls(_artist_from_record(r) for r in records)

    @classmethod
    def from_file(cls, path: Union[str, Path] = DEFAULT_SEED_PATH) -> "CatalogStore":
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SeedDataError(f"Cannot read seed catalog {path}: {e}") from e
        if isinstance(data, Mapping):
            data = data.get("artists", [])
        if not isinstance(data, list):
            raise SeedDataError(f"Seed catalog {path} must hold a list of artists")
        return cls.from_records(data)

    def __len__(self) -> int:
        return len(self._artists)

    def list_artists(self) -> Tuple[Artist, ...]:
        return self._artists

    def find_artist(self, artist_ref: ArtistRef) -> Optional[Artist]:
        if isinstance(artist_ref, Artist):
            return next((a for a in self._artists if a is artist_ref), None)
        key = (artist_ref or "").casefold()
        return next((a for a in self._artists if a.name.casefold() == key), None)

    def find_album(self, artist_ref: ArtistRef, album_ref: AlbumRef) -> Optional[Album]:
        artist = self.find_artist(artist_ref)
        if artist is None:
            return None
        if isinstance(album_ref, Album):
            return next((a for a in artist.albums if a is album_ref), None)
        key = (album_ref or "").casefold()
        return next((a for a in artist.albums if a.title.casefold() == key), None)

    def find_song(self, album_ref: AlbumRef, song_id: str) -> Optional[Song]:
        """Look a song up by source URL (its identity) or, failing that, by title."""
        if isinstance(album_ref, Album):
            album = album_ref if id(album_ref) in self._album_ids else None
        else:
            key = (album_ref or "").casefold()
            album = next(
                (al for ar in self._artists for al in ar.albums if al.title.casefold() == key),
                None,
            )
        if album is None:
            return None
        for song in album.songs:
            if song.source_url == song_id:
                return song
        key = (song_id or "").casefold()
        return next((s for s in album.songs if s.title.casefold() == key), None)

    def genres(self) -> List[str]:
        """Distinct genres in catalog order, first spelling wins."""
        seen: Dict[str, str] = {}
        for artist in self._artists:
            if artist.genre and artist.genre.casefold() not in seen:
                seen[artist.genre.casefold()] = artist.genre
        return list(seen.values())

    def years(self) -> List[int]:
        return sorted({album.year for artist in self._artists for album in artist.albums}, reverse=True)
