"""Typed failures raised by tempo estimation."""


class TempoEstimationError(Exception):
    """Base class for conditions that leave the tempo unknown."""

    kind = "tempo_estimation_error"


class InvalidSampleRate(TempoEstimationError):
    """Sample rate is zero or negative."""

    kind = "invalid_sample_rate"


class InsufficientData(TempoEstimationError):
    """Buffer is empty or no peak was found at any threshold."""

    kind = "insufficient_data"


class NoViableTempo(TempoEstimationError):
    """Peaks were found but every interval between them was zero."""

    kind = "no_viable_tempo"
