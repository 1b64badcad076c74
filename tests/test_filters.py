from unittest.mock import MagicMock

import pytest

from aether_catalog import Album, Artist, ArtistFilterModel, FilterCriteria, apply_filters
from aether_catalog.filters import build_predicates


def names(artists):
    return [a.name for a in artists]


class TestApplyFilters:
    def test_identity_criteria_returns_input_in_order(self, artists):
        result = apply_filters(artists, FilterCriteria(search_text="", genre="All", year=None))
        assert result == artists
        assert all(a is b for a, b in zip(result, artists))

    def test_genre_scenario(self):
        nova = Artist("Nova", genre="Pop", albums=(Album("A", 2020),))
        echo = Artist("Echo", genre="Rock", albums=(Album("B", 2018),))
        assert apply_filters([nova, echo], FilterCriteria(genre="Pop")) == [nova]

    def test_search_is_case_insensitive_substring_and_stable(self, artists):
        assert names(apply_filters(artists, FilterCriteria(search_text="NOV"))) == ["Nova", "The Novaks"]

    def test_search_text_is_matched_as_typed(self):
        nova = Artist("Nova")
        lights = Artist("Nova Lights")
        novaks = Artist("The Novaks")
        assert names(apply_filters([nova, lights, novaks], FilterCriteria(search_text="Nova "))) == ["Nova Lights"]

    def test_empty_genre_is_a_value_not_a_wildcard(self):
        untagged = Artist("Untagged", genre="")
        pop = Artist("Poppy", genre="Pop")
        assert apply_filters([untagged, pop], FilterCriteria(genre="")) == [untagged]

    def test_genre_is_case_insensitive_exact_match(self, artists):
        assert names(apply_filters(artists, FilterCriteria(genre="ROCK"))) == ["Echo", "The Novaks"]
        assert apply_filters(artists, FilterCriteria(genre="Ro")) == []

    def test_year_matches_any_album(self, artists):
        assert names(apply_filters(artists, FilterCriteria(year=2022))) == ["Marisol Vega"]
        assert names(apply_filters(artists, FilterCriteria(year=2019))) == ["Marisol Vega"]
        assert apply_filters(artists, FilterCriteria(year=1999)) == []

    def test_artist_without_albums_never_matches_a_year(self):
        empty = Artist("Empty", genre="Pop")
        for year in (0, 2020, 2024):
            assert apply_filters([empty], FilterCriteria(year=year)) == []

    def test_all_three_predicates_are_conjunctive(self, artists):
        criteria = FilterCriteria(search_text="o", genre="rock", year=2018)
        assert names(apply_filters(artists, criteria)) == ["Echo"]

    def test_sequential_filters_equal_single_pass(self, artists):
        for genre in ("All", "Pop", "rock", "Jazz", "Metal"):
            for year in (None, 2018, 2019, 2020, 2022, 1990):
                two_pass = apply_filters(apply_filters(artists, FilterCriteria(genre=genre)), FilterCriteria(year=year))
                one_pass = apply_filters(artists, FilterCriteria(genre=genre, year=year))
                assert two_pass == one_pass, (genre, year)

    def test_results_are_drawn_from_input(self, artists):
        result = apply_filters(artists, FilterCriteria(search_text="a"))
        assert all(any(r is a for a in artists) for r in result)

    def test_empty_string_artist_name_is_valid(self):
        blank = Artist("", genre="Pop")
        assert apply_filters([blank], FilterCriteria(genre="pop")) == [blank]
        assert apply_filters([blank], FilterCriteria(search_text="x")) == []

    def test_predicates_are_evaluated_in_order_and_short_circuit(self):
        artist = MagicMock()
        artist.name = "Zed"
        artist.genre = "Pop"
        type(artist).albums = property(lambda self: pytest.fail("year checked after search failed"))
        assert apply_filters([artist], FilterCriteria(search_text="nova", year=2020)) == []


class TestBuildPredicates:
    @pytest.mark.parametrize("criteria, count", [
        (FilterCriteria(), 0),
        (FilterCriteria(search_text="x"), 1),
        (FilterCriteria(genre="Pop"), 1),
        (FilterCriteria(genre=""), 1),
        (FilterCriteria(search_text=" "), 1),
        (FilterCriteria(year=2020), 1),
        (FilterCriteria(search_text="x", genre="Pop", year=2020), 3),
    ])
    def test_predicate_count(self, criteria, count):
        assert len(build_predicates(criteria)) == count


class TestArtistFilterModel:
    def test_starts_with_identity_view(self, catalog):
        model = ArtistFilterModel(catalog)
        assert model.visible == catalog.list_artists()
        assert model.criteria.is_identity

    def test_setters_recompute_and_notify(self, catalog):
        model = ArtistFilterModel(catalog)
        seen = []
        model.subscribe(lambda visible: seen.append(names(visible)))

        model.set_search_text("nov")
        model.set_genre_filter("Rock")
        model.set_year_filter(2018)

        assert seen == [["Nova", "The Novaks"], ["The Novaks"], []]
        assert model.criteria == FilterCriteria(search_text="nov", genre="Rock", year=2018)

    def test_subscriber_sees_completed_update(self, catalog):
        model = ArtistFilterModel(catalog)
        observed = []
        model.subscribe(lambda visible: observed.append((model.criteria.genre, names(model.visible))))
        model.set_genre_filter("Jazz")
        assert observed == [("Jazz", ["Marisol Vega"])]

    def test_clear_filters_restores_full_list(self, catalog):
        model = ArtistFilterModel(catalog)
        model.set_genre_filter("Pop")
        model.set_year_filter(2020)
        assert names(model.visible) == ["Nova"]
        model.clear_filters()
        assert model.visible == catalog.list_artists()
        assert model.criteria == FilterCriteria()

    def test_empty_genre_filters_to_untagged_artists(self, catalog):
        model = ArtistFilterModel(catalog)
        model.set_genre_filter("")
        assert model.criteria.genre == ""
        assert not model.criteria.is_identity
        assert model.visible == ()

    def test_unsubscribe(self, catalog):
        model = ArtistFilterModel(catalog)
        callback = MagicMock()
        unsubscribe = model.subscribe(callback)
        model.set_search_text("e")
        unsubscribe()
        unsubscribe()
        model.set_search_text("echo")
        callback.assert_called_once()
