"""Shared test fixtures for tempo estimation tests."""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from peaktempo.main import app

SR = 44100


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


def generate_pulse_train(
    bpm: float,
    n_beats: int = 40,
    sr: int = SR,
    amplitude: float = 1.0,
    offset: int = 0,
) -> np.ndarray:
    """Silence with a single-sample pulse on every beat."""
    spacing = int(round(sr * 60.0 / bpm))
    audio = np.zeros(offset + spacing * n_beats, dtype=np.float32)
    audio[offset::spacing] = amplitude
    return audio


def generate_click_track(
    bpm: float,
    duration_seconds: float = 20.0,
    sr: int = SR,
) -> np.ndarray:
    """Generate a synthetic click track, peak-normalized to 1.0.

    Returns mono audio at the given sample rate.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)

    beat_interval = 60.0 / bpm  # seconds per beat
    click_samples = int(0.015 * sr)  # shorter than the refractory window

    # Short sine burst with envelope
    t_click = np.arange(click_samples) / sr
    click = np.sin(2 * np.pi * 1000 * t_click) * np.exp(-t_click * 100)

    time = 0.0
    while time < duration_seconds:
        sample_pos = int(round(time * sr))
        end = min(sample_pos + click_samples, n_samples)
        length = end - sample_pos
        if length > 0:
            audio[sample_pos:end] += click[:length]
        time += beat_interval

    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak

    return audio


@pytest.fixture
def pulses_120():
    """Pulse train at 120 BPM (22050 samples apart at 44.1kHz)."""
    return generate_pulse_train(bpm=120)


@pytest.fixture
def click_100():
    """Click track at 100 BPM."""
    return generate_click_track(bpm=100)
