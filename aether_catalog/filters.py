"""Artist list filtering.

Up to three independent predicates (search text, genre, album year) are
AND-ed together and evaluated left to right per artist. The whole artist
sequence is re-scanned on every criteria change; catalogs are small enough
that an index is not worth the extra state.
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .catalog import CatalogStore
from .models import ANY_GENRE, Artist, FilterCriteria
from .observable import Observable

Predicate = Callable[[Artist], bool]


def _name_contains(text: str) -> Predicate:
    needle = text.casefold()
    return lambda artist: needle in artist.name.casefold()


def _genre_is(genre: str) -> Predicate:
    wanted = genre.casefold()
    return lambda artist: artist.genre.casefold() == wanted


def _has_album_from(year: int) -> Predicate:
    # Year lives on albums; an artist matches if any of its albums does.
    return lambda artist: any(album.year == year for album in artist.albums)


def build_predicates(criteria: FilterCriteria) -> List[Predicate]:
    """Ordered predicate list for ``criteria``: search, genre, year."""
    predicates: List[Predicate] = []
    text = criteria.search_text or ""
    if text:
        predicates.append(_name_contains(text))
    if criteria.genre != ANY_GENRE:
        predicates.append(_genre_is(criteria.genre))
    if criteria.year is not None:
        predicates.append(_has_album_from(criteria.year))
    return predicates


def apply_filters(artists: Iterable[Artist], criteria: FilterCriteria) -> List[Artist]:
    """Stable filter: matching artists in their original relative order."""
    predicates = build_predicates(criteria)
    return [artist for artist in artists if all(p(artist) for p in predicates)]


class ArtistFilterModel(Observable):
    """Filter state behind the artist list screen.

    Every setter recomputes the visible list before notifying, so subscribers
    never observe a half-applied criteria change.
    """

    def __init__(self, catalog: CatalogStore, criteria: Optional[FilterCriteria] = None):
        super().__init__()
        self.catalog = catalog
        self._criteria = criteria or FilterCriteria()
        self._visible: Tuple[Artist, ...] = tuple(apply_filters(catalog.list_artists(), self._criteria))

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def visible(self) -> Tuple[Artist, ...]:
        return self._visible

    def set_search_text(self, text: str) -> Sequence[Artist]:
        return self._update(self._criteria.with_search_text(text))

    def set_genre_filter(self, genre: str) -> Sequence[Artist]:
        return self._update(self._criteria.with_genre(genre))

    def set_year_filter(self, year: Optional[int]) -> Sequence[Artist]:
        return self._update(self._criteria.with_year(year))

    def clear_filters(self) -> Sequence[Artist]:
        return self._update(FilterCriteria())

    def _update(self, criteria: FilterCriteria) -> Sequence[Artist]:
        self._criteria = criteria
        self._visible = tuple(apply_filters(self.catalog.list_artists(), criteria))
        self._notify(self._visible)
        return self._visible
