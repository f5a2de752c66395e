"""Exceptions raised by the layout engine."""

from __future__ import annotations


class TopologyLayoutError(Exception):
    """Base class for every error raised by ``topology_layout``."""


class InvalidDeviceInputError(TopologyLayoutError, ValueError):
    """The device collection cannot be turned into a graph.

    Raised before any layout stage runs, so no partial layout is produced.
    """


class InvalidOptionError(TopologyLayoutError, ValueError):
    """A ``LayoutOptions`` field holds an unsupported value."""


class UnknownLayeringModeError(InvalidOptionError):
    """No layering strategy is registered under the requested mode name."""
