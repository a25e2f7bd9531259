"""Failure categories for pipeline stages.

A stage raises one of these when its preconditions fail. The pipeline
runner turns them into a skipped visualization instead of an abort.
"""


class LandscapeError(Exception):
    """Base class for recoverable stage failures."""


class EmptyInputError(LandscapeError):
    """No records left to work with after filtering."""


class DegenerateGraphError(LandscapeError):
    """The graph has no nodes or no edges after filtering."""


class NumericDegeneracyError(LandscapeError):
    """A metric came out non-finite."""
