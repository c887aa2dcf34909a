"""Ring-buffer for live audio streaming."""

from __future__ import annotations

import numpy as np

_DEFAULT_SR = 44100
_MAX_DURATION_SECONDS = 60


class StreamBuffer:
    """Fixed-capacity ring buffer holding the most recent streamed samples.

    Parameters
    ----------
    sr:
        Sample rate in Hz. Defaults to 44100.
    max_duration:
        Maximum buffer duration in seconds. Defaults to 60. Storage is
        allocated on the first append, not up front.
    """

    def __init__(self, sr: int = _DEFAULT_SR, max_duration: float = _MAX_DURATION_SECONDS) -> None:
        if sr <= 0:
            raise ValueError(f"sample rate must be positive, got {sr}")
        self._sr = sr
        self._max_samples = max(1, int(sr * max_duration))
        self._buffer: np.ndarray | None = None
        self._write_pos = 0
        self._length = 0  # valid samples held

    @property
    def sample_rate(self) -> int:
        return self._sr

    def append(self, chunk: np.ndarray) -> None:
        """Append samples; once full, the oldest samples are overwritten."""
        chunk = np.asarray(chunk, dtype=np.float32).ravel()
        n = len(chunk)
        if n == 0:
            return
        if self._buffer is None:
            self._buffer = np.zeros(self._max_samples, dtype=np.float32)

        if n >= self._max_samples:
            self._buffer[:] = chunk[-self._max_samples:]
            self._write_pos = 0
            self._length = self._max_samples
            return

        end = self._write_pos + n
        if end <= self._max_samples:
            self._buffer[self._write_pos:end] = chunk
        else:
            first = self._max_samples - self._write_pos
            self._buffer[self._write_pos:] = chunk[:first]
            self._buffer[:n - first] = chunk[first:]

        self._write_pos = end % self._max_samples
        self._length = min(self._length + n, self._max_samples)

    def get_audio(self, last_n_seconds: float | None = None) -> np.ndarray:
        """Return buffered samples in chronological order.

        If *last_n_seconds* is given, only that much of the newest audio is
        returned.
        """
        if self._length == 0:
            return np.zeros(0, dtype=np.float32)

        n_samples = self._length
        if last_n_seconds is not None:
            n_samples = min(int(self._sr * last_n_seconds), self._length)

        start = (self._write_pos - n_samples) % self._max_samples
        if start + n_samples <= self._max_samples:
            return self._buffer[start:start + n_samples].copy()

        first = self._max_samples - start
        return np.concatenate([self._buffer[start:], self._buffer[:n_samples - first]])

    @property
    def nbytes(self) -> int:
        """Bytes currently held by the backing array."""
        return 0 if self._buffer is None else self._buffer.nbytes

    @property
    def duration(self) -> float:
        """Buffered duration in seconds."""
        return self._length / self._sr

    def clear(self) -> None:
        self._buffer = None
        self._write_pos = 0
        self._length = 0
