"""Exception hierarchy for the tracker pipeline."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for pipeline errors."""


class ModelUnavailableError(TrackerError):
    """The generation API could not be used (no credential, transport or shape error)."""


class PersistenceError(TrackerError):
    """A collection could not be written to disk."""
