"""
Exceptions raised while turning model objects into tidy tables.
"""


class SweepError(Exception):
    """Base class for every error raised by sweepframe."""


class UnsupportedVariant(SweepError, TypeError):
    """
    No extraction rule is registered for the object, or the matching rule has
    no extractor for the requested operation (e.g., tidy() on a decomposition).
    """


class MalformedInput(SweepError, ValueError):
    """
    The object matched a registered variant but is missing fields its extractor
    needs, or user-supplied data can't be aligned with it.
    """
