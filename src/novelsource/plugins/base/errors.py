class NovelSourceError(Exception):
    """Base class for errors raised by the book source engine."""


class ConfigurationError(NovelSourceError):
    """A book source cannot be run as configured (e.g. unknown dialect)."""


class ExtractionError(NovelSourceError):
    """A selector could not be evaluated against a document."""
