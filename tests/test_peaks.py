"""Tests for peak detection and the threshold search."""

import numpy as np
import pytest

from peaktempo.analysis.models import DetectionParams
from peaktempo.analysis.peaks import detect_peaks, search_peaks, threshold_schedule
from tests.conftest import generate_pulse_train


def test_detect_peaks_finds_samples_above_threshold():
    audio = np.zeros(5000)
    audio[[10, 2000, 4500]] = 0.9
    assert list(detect_peaks(audio, 0.5)) == [10, 2000, 4500]


def test_detect_peaks_is_strictly_greater():
    audio = np.zeros(3000)
    audio[100] = 0.8
    audio[2000] = 0.81
    assert list(detect_peaks(audio, 0.8)) == [2000]


def test_detect_peaks_skips_refractory_window():
    audio = np.zeros(5000)
    audio[[100, 500, 1049, 1050, 3000]] = 1.0
    # 500 and 1049 fall inside the window opened at 100
    assert list(detect_peaks(audio, 0.5)) == [100, 1050, 3000]


def test_detect_peaks_ignores_negative_excursions():
    audio = np.zeros(3000)
    audio[100] = -1.0
    audio[2000] = 1.0
    assert list(detect_peaks(audio, 0.5)) == [2000]


def test_detect_peaks_empty_buffer():
    assert list(detect_peaks([], 0.5)) == []
    assert list(detect_peaks(np.zeros(1000), 0.5)) == []


def test_detect_peaks_is_lazy_and_restartable():
    audio = generate_pulse_train(bpm=120, n_beats=5)
    it = detect_peaks(audio, 0.5)
    assert next(it) == 0
    assert list(detect_peaks(audio, 0.5)) == list(detect_peaks(audio, 0.5))


def test_consecutive_peaks_respect_refractory_spacing():
    rng = np.random.default_rng(0)
    audio = rng.uniform(-1.0, 1.0, 200_000)
    peaks = list(detect_peaks(audio, 0.7, refractory_samples=950))
    assert len(peaks) > 10
    assert all(b - a >= 950 for a, b in zip(peaks, peaks[1:]))


def test_peak_count_non_increasing_with_threshold():
    rng = np.random.default_rng(1)
    audio = rng.normal(0.0, 0.4, 300_000)
    counts = [len(list(detect_peaks(audio, t))) for t in np.arange(0.0, 1.6, 0.05)]
    assert all(a >= b for a, b in zip(counts, counts[1:]))


def test_threshold_schedule_reaches_floor_inclusive():
    assert list(threshold_schedule()) == [1.0, 0.95, 0.9, 0.85, 0.8, 0.75, 0.7]


def test_threshold_schedule_tries_initial_below_floor():
    params = DetectionParams(initial_threshold=0.5, min_threshold=0.7)
    assert list(threshold_schedule(params)) == [0.5]


def test_search_stops_once_enough_peaks():
    audio = generate_pulse_train(bpm=120, n_beats=40, amplitude=1.5)
    result = search_peaks(audio)
    assert result.threshold == 1.0
    assert result.iterations == 1
    assert len(result.peaks) == 40


def test_search_lowers_threshold_until_enough_peaks():
    audio = generate_pulse_train(bpm=120, n_beats=40, amplitude=0.88)
    result = search_peaks(audio)
    assert result.threshold == 0.85
    assert result.iterations == 4
    assert len(result.peaks) == 40


def test_search_falls_back_to_last_peak_set_at_floor():
    audio = generate_pulse_train(bpm=120, n_beats=10, amplitude=0.8)
    result = search_peaks(audio)
    assert result.threshold == 0.7
    assert result.iterations == 7
    assert len(result.peaks) == 10


def test_search_on_silence_returns_no_peaks():
    result = search_peaks(np.zeros(44100))
    assert result.peaks == []
    assert result.threshold == 0.7


def test_search_honours_custom_params():
    audio = generate_pulse_train(bpm=120, n_beats=8, amplitude=0.5)
    params = DetectionParams(initial_threshold=0.6, threshold_step=0.1, min_threshold=0.4, min_peaks=8)
    result = search_peaks(audio, params)
    assert result.threshold == 0.4
    assert len(result.peaks) == 8


@pytest.mark.parametrize("kwargs", [
    {"threshold_step": 0.0},
    {"refractory_samples": 0},
    {"min_peaks": 0},
    {"lookahead_peaks": 0},
])
def test_detection_params_reject_invalid_values(kwargs):
    with pytest.raises(ValueError):
        DetectionParams(**kwargs)


def test_peak_exactly_one_window_later_is_kept():
    audio = np.zeros(3000)
    audio[[0, 949, 950]] = 1.0
    assert list(detect_peaks(audio, 0.5, refractory_samples=950)) == [0, 950]
