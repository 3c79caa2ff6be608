class ScrapeError(Exception):
    """Base class for everything the smalls pipeline raises on purpose."""
    pass


class FetchError(ScrapeError):
    """Raised when a page cannot be downloaded."""

    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load url {url}: {reason}")


class StructuralParseError(ScrapeError):
    """
    Raised when an expected markup node or attribute is absent.
    unit is one of "day", "event" or "musician"; context names the offending record.
    """

    def __init__(self, unit, context, message):
        self.unit = unit
        self.context = context
        super().__init__(f"{message} ({unit}: {context})")


class CacheIOError(ScrapeError):
    """Raised when a cache file cannot be read or written."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Cache I/O failed for {path}: {reason}")
