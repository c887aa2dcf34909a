"""Audio file loading utilities."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Union

import librosa
import numpy as np


def load_audio(
    file_path_or_buffer: Union[str, Path, BytesIO],
    sr: int | None = None,
) -> tuple[np.ndarray, int]:
    """Decode an audio file or buffer to its first channel as float32.

    Multichannel files are not downmixed: averaging channels can flatten
    transients that only one channel carries.

    Parameters
    ----------
    file_path_or_buffer:
        Path to an audio file or a BytesIO buffer containing audio data.
    sr:
        Target sample rate. ``None`` keeps the file's native rate, which
        the default peak refractory window is tuned for.

    Returns
    -------
    tuple[np.ndarray, int]
        A tuple of (audio_array, sample_rate).
    """
    audio, sample_rate = librosa.load(file_path_or_buffer, sr=sr, mono=False)
    if audio.ndim > 1:
        audio = audio[0]
    return audio.astype(np.float32, copy=False), int(sample_rate)
