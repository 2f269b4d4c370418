"""Resolution pipeline errors."""


class ResolutionError(Exception):
    """Base exception for reference resolution."""


class MaterializationError(ResolutionError):
    """Raised when bytes cannot be copied into the cache directory."""


class ContentError(ResolutionError):
    """Raised by content resolvers when a lookup or open cannot be served."""


class CacheDirectoryError(ResolutionError):
    """Raised when the cache directory cannot be created or written to."""
