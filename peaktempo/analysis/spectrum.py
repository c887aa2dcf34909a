"""Byte-scaled frequency spectrum frames for live display.

Reproduces the data a browser analyser node hands to a canvas: a Blackman
windowed FFT over the most recent ``fft_size`` samples, smoothed over time,
converted to decibels and mapped onto 0-255.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np


class SpectrumAnalyser:
    """Stateful spectrum analyser fed with consecutive audio chunks.

    Parameters
    ----------
    fft_size:
        Window length in samples; must be a power of two. The output frame
        has ``fft_size // 2`` bins.
    smoothing_time_constant:
        Weight of the previous frame in the exponential smoothing, in [0, 1).
    min_decibels, max_decibels:
        Level range mapped onto byte values 0 and 255.
    """

    def __init__(
        self,
        fft_size: int = 2048,
        smoothing_time_constant: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing_time_constant < 1.0:
            raise ValueError("smoothing_time_constant must be in [0, 1)")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be below max_decibels")

        self.fft_size = fft_size
        self.smoothing_time_constant = smoothing_time_constant
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels

        # periodic window, as a browser analyser uses
        self.window = np.blackman(fft_size + 1)[:-1]
        self._time_domain = np.zeros(fft_size, dtype=np.float64)
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def push(self, chunk: np.ndarray) -> np.ndarray:
        """Feed a chunk of samples and return the current byte frame."""
        chunk = np.asarray(chunk, dtype=np.float64).ravel()
        n = len(chunk)
        if n >= self.fft_size:
            self._time_domain[:] = chunk[-self.fft_size:]
        elif n > 0:
            self._time_domain = np.roll(self._time_domain, -n)
            self._time_domain[-n:] = chunk
        return self.byte_frequency_data()

    def byte_frequency_data(self) -> np.ndarray:
        """Smooth the current window into the running spectrum and byte-scale it."""
        spectrum = np.fft.rfft(self._time_domain * self.window)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        tau = self.smoothing_time_constant
        self._smoothed = tau * self._smoothed + (1.0 - tau) * magnitude

        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(self._smoothed)
        scale = 255.0 / (self.max_decibels - self.min_decibels)
        scaled = np.floor(scale * (db - self.min_decibels))
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)

    def reset(self) -> None:
        """Forget buffered samples and smoothing history."""
        self._time_domain[:] = 0.0
        self._smoothed[:] = 0.0


def spectrum_frames(
    audio: np.ndarray,
    hop_size: int = 1024,
    analyser: SpectrumAnalyser | None = None,
    **analyser_kwargs,
) -> Iterator[np.ndarray]:
    """Yield one byte frame per *hop_size* samples of *audio*.

    Pass *analyser* to carry smoothing state across calls; otherwise a
    fresh one is built from *analyser_kwargs*.
    """
    if hop_size < 1:
        raise ValueError(f"hop_size must be positive, got {hop_size}")
    if analyser is None:
        analyser = SpectrumAnalyser(**analyser_kwargs)
    audio = np.asarray(audio, dtype=np.float64).ravel()
    for start in range(0, len(audio), hop_size):
        yield analyser.push(audio[start:start + hop_size])
