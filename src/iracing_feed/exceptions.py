"""Exception hierarchy for iracing_feed."""

from __future__ import annotations


class IRacingFeedError(Exception):
    """Base exception for all iracing_feed errors."""


class InvalidArgumentError(IRacingFeedError, ValueError):
    """Malformed caller input, e.g. a non-numeric car number string."""


class OutOfRangeError(IRacingFeedError, IndexError):
    """A value or index fell outside its valid range."""


class ProviderError(IRacingFeedError):
    """The iRacing SDK boundary failed (native call error, lost mapping)."""
