"""Exception hierarchy for ranking and catalog lookups."""

from __future__ import annotations


class RelatedPostsError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgument(RelatedPostsError, ValueError):
    """Bad ``limit`` or ``mode`` passed to the ranker."""


class NotFound(RelatedPostsError, KeyError):
    """A reference post could not be located in the catalog."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class CatalogError(RelatedPostsError):
    """A catalog snapshot or remote payload is unusable."""
