"""Amplitude peak picking with a descending threshold search."""

import logging
from collections.abc import Iterator, Sequence

import numpy as np

from peaktempo.analysis.models import DetectionParams, PeakSearchResult

logger = logging.getLogger(__name__)


def detect_peaks(
    samples: Sequence[float] | np.ndarray,
    threshold: float,
    refractory_samples: int = 950,
) -> Iterator[int]:
    """Yield indices of samples strictly above *threshold*.

    After each peak the scan jumps ahead by *refractory_samples*, so no two
    peaks are closer than that. The raw signed value is compared: negative
    excursions never register.
    """
    audio = np.asarray(samples, dtype=np.float64)
    if audio.size == 0:
        return

    candidates = np.flatnonzero(audio > threshold)
    next_allowed = 0
    for idx in candidates:
        if idx < next_allowed:
            continue
        yield int(idx)
        next_allowed = idx + refractory_samples


def threshold_schedule(params: DetectionParams = DetectionParams()) -> Iterator[float]:
    """Thresholds to try, from the initial value down to the floor inclusive.

    The first threshold is always tried, even if it already sits below the
    floor.
    """
    step = 0
    while True:
        # rounded so repeated steps do not drift below the floor
        threshold = round(params.initial_threshold - step * params.threshold_step, 10)
        if step > 0 and threshold < params.min_threshold:
            return
        yield threshold
        step += 1


def search_peaks(
    samples: Sequence[float] | np.ndarray,
    params: DetectionParams = DetectionParams(),
) -> PeakSearchResult:
    """Lower the threshold until at least ``params.min_peaks`` peaks are found.

    If the floor is reached first, the peaks from the last threshold tried
    are returned anyway. An empty peak list is a valid result.
    """
    audio = np.asarray(samples, dtype=np.float64)
    peaks: list[int] = []
    threshold = params.initial_threshold
    iterations = 0

    for threshold in threshold_schedule(params):
        iterations += 1
        peaks = list(detect_peaks(audio, threshold, params.refractory_samples))
        logger.debug(f"  threshold {threshold:.2f}: {len(peaks)} peaks")
        if len(peaks) >= params.min_peaks:
            break
    else:
        logger.debug(
            f"  floor {params.min_threshold:.2f} reached with {len(peaks)} peaks "
            f"(wanted {params.min_peaks})"
        )

    return PeakSearchResult(peaks=peaks, threshold=threshold, iterations=iterations)
