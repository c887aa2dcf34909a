"""Core data models for tempo estimation."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DetectionParams:
    """Tunables for peak detection and interval counting."""
    initial_threshold: float = 1.0
    threshold_step: float = 0.05
    min_threshold: float = 0.7
    min_peaks: int = 30
    refractory_samples: int = 950  # ~21ms at 44.1kHz
    lookahead_peaks: int = 10

    def __post_init__(self):
        if self.threshold_step <= 0:
            raise ValueError("threshold_step must be positive")
        if self.refractory_samples < 1:
            raise ValueError("refractory_samples must be at least 1")
        if self.min_peaks < 1 or self.lookahead_peaks < 1:
            raise ValueError("min_peaks and lookahead_peaks must be at least 1")


@dataclass
class IntervalCount:
    """How often a given sample distance occurs between nearby peaks."""
    interval: int  # samples
    count: int


@dataclass
class TempoCount:
    """Aggregated tally for one rounded tempo candidate."""
    tempo: int  # BPM
    count: int


@dataclass
class PeakSearchResult:
    """Peaks found by the threshold search and the threshold that produced them."""
    peaks: list[int]
    threshold: float
    iterations: int = 1


@dataclass
class TempoEstimate:
    """Full output of the tempo pipeline, kept for diagnostics."""
    bpm: int
    threshold: float
    peak_count: int
    intervals: list[IntervalCount] = field(default_factory=list)
    tempos: list[TempoCount] = field(default_factory=list)


@dataclass
class TempoResult:
    """Tempo as reported past the analysis boundary.

    ``bpm`` is None when estimation failed; ``error`` then holds the
    failure kind (see ``peaktempo.analysis.errors``).
    """
    bpm: int | None
    error: str | None = None
    threshold: float | None = None
    peak_count: int = 0
    candidates: list[TempoCount] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Complete analysis result."""
    tempo: TempoResult
    duration: float = 0.0
    sample_rate: int = 0
