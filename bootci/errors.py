"""Error taxonomy for resampling and interval estimation"""


class BootciError(Exception):
    """Base class for all bootci errors."""


class InvalidInputError(BootciError, ValueError):
    """Empty dataset, missing column, or non-numeric value where numeric expected."""


class ConfigurationError(BootciError, ValueError):
    """Scheme/evaluator mismatch, e.g. grouped resampling without a group key."""


class SingularInputError(BootciError):
    """Statistic is undefined for a particular resample.

    Recoverable: the bootstrap driver skips the replicate and counts it.
    """


class InsufficientDataError(BootciError):
    """Empirical distribution too small to compute the requested percentiles."""

    def __init__(self, achieved: int, required: int = 2):
        self.achieved = achieved
        self.required = required
        super().__init__(
            f"Need at least {required} successful replicates, got {achieved}"
        )
