"""Aether Catalog Browser: artist → album → song browsing with video hand-off."""

from .catalog import CatalogStore
from .errors import CatalogError, ConfigurationError, SeedDataError
from .filters import ArtistFilterModel, apply_filters
from .models import ANY_GENRE, ANY_YEAR, Album, Artist, FilterCriteria, Song
from .navigation import (
    ArtistDetailPayload,
    NavigationCoordinator,
    NavigationEntry,
    ScreenKind,
    SongListPayload,
)
from .playback import PlaybackRequest, PlaybackResult, PlaybackSelector
from .video_url import extract_video_id, to_embed_url

__version__ = "1.0.0"
