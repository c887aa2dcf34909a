"""Audio preprocessing utilities."""

from __future__ import annotations

import numpy as np
from scipy.signal import butter, sosfilt


def low_pass_filter(
    audio: np.ndarray,
    sr: int,
    cutoff: float = 3000.0,
) -> np.ndarray:
    """Apply a Butterworth low-pass filter.

    Parameters
    ----------
    audio:
        Input audio signal.
    sr:
        Sample rate in Hz.
    cutoff:
        Low-pass cutoff frequency in Hz. Defaults to 3 kHz. Must be below
        the Nyquist frequency.
    """
    if not 0 < cutoff < sr / 2:
        raise ValueError(f"cutoff {cutoff} Hz outside (0, {sr / 2}) for sr={sr}")
    sos = butter(N=4, Wn=cutoff, btype="low", fs=sr, output="sos")
    return sosfilt(sos, audio)


def preprocess(audio: np.ndarray, sr: int, lowpass_cutoff: float | None = None) -> np.ndarray:
    """Prepare audio for tempo estimation.

    Amplitudes are left unscaled since peak thresholds are absolute; the
    signal is only low-passed when *lowpass_cutoff* is given.
    """
    if lowpass_cutoff is None or len(audio) == 0:
        return audio
    return low_pass_filter(audio, sr, lowpass_cutoff)
