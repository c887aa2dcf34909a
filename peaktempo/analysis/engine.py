"""Analysis orchestrator - loads audio and runs tempo estimation."""

import logging

import numpy as np

from peaktempo.analysis.errors import TempoEstimationError
from peaktempo.analysis.models import AnalysisResult, DetectionParams, TempoResult
from peaktempo.analysis.tempo import estimate_tempo
from peaktempo.audio.loader import load_audio
from peaktempo.audio.preprocessing import preprocess
from peaktempo.config import settings

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 5


class AnalysisEngine:
    """Runs the tempo pipeline and turns failures into a typed result."""

    def __init__(self, params: DetectionParams | None = None, lowpass_cutoff: float | None = None):
        self.params = params if params is not None else settings.detection_params()
        self.lowpass_cutoff = lowpass_cutoff if lowpass_cutoff is not None else settings.lowpass_cutoff

    def analyze_file(self, file_path: str) -> AnalysisResult:
        """Analyze an audio file."""
        audio, sr = load_audio(file_path, sr=settings.sample_rate)
        audio = preprocess(audio, sr, self.lowpass_cutoff)
        return self.analyze_audio(audio, sr)

    def analyze_audio(self, audio: np.ndarray, sr: int) -> AnalysisResult:
        """Analyze pre-loaded mono audio.

        Never raises for tempo failures: the result carries ``bpm=None`` and
        the failure kind instead.
        """
        duration = len(audio) / sr if sr > 0 else 0.0
        logger.info(f"Analyzing {duration:.1f}s of audio at {sr}Hz")

        try:
            estimate = estimate_tempo(audio, sr, self.params)
        except TempoEstimationError as e:
            logger.warning(f"  Tempo unknown ({e.kind}): {e}")
            tempo = TempoResult(bpm=None, error=e.kind)
        else:
            ranked = sorted(estimate.tempos, key=lambda tc: tc.count, reverse=True)
            tempo = TempoResult(
                bpm=estimate.bpm,
                threshold=estimate.threshold,
                peak_count=estimate.peak_count,
                candidates=ranked[:MAX_CANDIDATES],
            )
            logger.info(f"  {estimate.peak_count} peaks at threshold {estimate.threshold:.2f} "
                        f"-> {estimate.bpm} BPM")

        return AnalysisResult(tempo=tempo, duration=duration, sample_rate=sr)
