"""
Exceptions raised by the analysis engine.

Recoverable errors mean the caller should route the run to manual entry.
None of them are fatal to the process.
"""


class FibAnalysisError(Exception):
    """Base class for analysis errors."""


class RecoverableAnalysisError(FibAnalysisError):
    """The chart could not be read automatically; manual entry is required."""

    reason = "recoverable"


class InsufficientLabelsError(RecoverableAnalysisError):
    """Fewer than two usable axis labels were recognized."""

    reason = "insufficient_labels"


class DegenerateSwingError(RecoverableAnalysisError):
    """Swing bounds are missing or swing_high <= swing_low."""

    reason = "degenerate_swing"
