import pytest

from aether_catalog import Album, Artist, CatalogStore, Song


def make_artists():
    """Small catalog covering the filter edge cases (empty discography, genre casing)."""
    return [
        Artist("Nova", genre="Pop", albums=(
            Album("First Light", 2020, songs=(
                Song("Dawn", "https://youtu.be/dawn0000001"),
                Song("Dusk", "https://www.youtube.com/watch?v=dusk0000002"),
            )),
        )),
        Artist("Echo", genre="Rock", albums=(
            Album("Canyon", 2018, songs=(
                Song("Ridge", "https://www.youtube.com/watch?v=ridge000003&t=30"),
            )),
        )),
        Artist("The Novaks", genre="rock", albums=()),
        Artist("Marisol Vega", genre="Jazz", albums=(
            Album("Blue Hour", 2019),
            Album("Live at the Lantern", 2022),
        )),
    ]


@pytest.fixture
def artists():
    return make_artists()


@pytest.fixture
def catalog(artists):
    return CatalogStore(artists)
