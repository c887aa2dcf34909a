"""Tempo estimation from a histogram of intervals between amplitude peaks."""

import logging
import math
from collections.abc import Sequence

import numpy as np

from peaktempo.analysis.errors import InsufficientData, InvalidSampleRate, NoViableTempo
from peaktempo.analysis.models import DetectionParams, IntervalCount, TempoCount, TempoEstimate
from peaktempo.analysis.peaks import search_peaks

logger = logging.getLogger(__name__)


def count_intervals(peaks: Sequence[int], lookahead_peaks: int = 10) -> list[IntervalCount]:
    """Histogram of sample distances from each peak to its next few neighbours.

    Each peak is compared with itself and the following ``lookahead_peaks - 1``
    peaks. The self-comparison always gives interval 0; it is tallied like
    any other interval and dropped later in ``group_by_tempo``. Look-aheads
    past the end of the list are skipped.
    """
    counts: dict[int, int] = {}
    n = len(peaks)
    for index, peak in enumerate(peaks):
        for offset in range(lookahead_peaks):
            if index + offset >= n:
                break
            interval = int(peaks[index + offset] - peak)
            counts[interval] = counts.get(interval, 0) + 1

    return [IntervalCount(interval=i, count=c) for i, c in counts.items()]


def interval_to_tempo(interval: int, sample_rate: int) -> int:
    """BPM implied by a peak distance of *interval* samples, rounded half up."""
    bpm = 60.0 / (interval / sample_rate)
    return int(math.floor(bpm + 0.5))


def group_by_tempo(intervals: Sequence[IntervalCount], sample_rate: int) -> list[TempoCount]:
    """Merge interval tallies that round to the same tempo.

    Zero intervals are skipped. Table order is the order in which each tempo
    was first produced.
    """
    counts: dict[int, int] = {}
    for ic in intervals:
        if ic.interval == 0:
            continue
        tempo = interval_to_tempo(ic.interval, sample_rate)
        counts[tempo] = counts.get(tempo, 0) + ic.count

    return [TempoCount(tempo=t, count=c) for t, c in counts.items()]


def select_tempo(tempos: Sequence[TempoCount]) -> TempoCount:
    """Return the candidate with the highest count, first one on ties."""
    if not tempos:
        raise NoViableTempo("no nonzero interval between peaks")
    return max(tempos, key=lambda tc: tc.count)


def estimate_tempo(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    params: DetectionParams = DetectionParams(),
) -> TempoEstimate:
    """Run the full peak → interval → tempo pipeline.

    Raises
    ------
    InvalidSampleRate
        If *sample_rate* is not positive.
    InsufficientData
        If the buffer is empty or holds no peak at any threshold.
    NoViableTempo
        If the peaks yield no nonzero interval (a single peak).
    """
    if sample_rate <= 0:
        raise InvalidSampleRate(f"sample rate must be positive, got {sample_rate}")

    audio = np.asarray(samples, dtype=np.float64)
    if audio.size == 0:
        raise InsufficientData("empty sample buffer")

    search = search_peaks(audio, params)
    logger.debug(f"  {len(search.peaks)} peaks at threshold {search.threshold:.2f} "
                 f"after {search.iterations} iterations")
    if not search.peaks:
        raise InsufficientData(
            f"no peaks above {params.min_threshold:.2f} in {audio.size} samples"
        )

    intervals = count_intervals(search.peaks, params.lookahead_peaks)
    tempos = group_by_tempo(intervals, sample_rate)
    best = select_tempo(tempos)

    return TempoEstimate(
        bpm=best.tempo,
        threshold=search.threshold,
        peak_count=len(search.peaks),
        intervals=intervals,
        tempos=tempos,
    )


def estimate_bpm(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    params: DetectionParams = DetectionParams(),
) -> int:
    """Estimate the tempo of a mono buffer as an integer BPM.

    See ``estimate_tempo`` for the exceptions raised.
    """
    return estimate_tempo(samples, sample_rate, params).bpm
