class CatalogError(Exception):
    """Base class for catalog browser errors."""


class ConfigurationError(CatalogError):
    """A collaborator wired a screen transition incorrectly."""


class SeedDataError(CatalogError):
    """The seed catalog could not be turned into an artist tree."""
