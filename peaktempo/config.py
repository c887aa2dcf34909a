"""Application configuration."""

from pydantic_settings import BaseSettings

from peaktempo.analysis.models import DetectionParams


class Settings(BaseSettings):
    """App settings with env var overrides."""

    # Audio
    sample_rate: int | None = None  # None keeps the file's native rate
    lowpass_cutoff: float | None = None  # Hz, applied before tempo estimation

    # Tempo detection
    initial_threshold: float = 1.0
    threshold_step: float = 0.05
    min_threshold: float = 0.7
    min_peaks: int = 30
    refractory_samples: int = 950
    lookahead_peaks: int = 10

    # Spectrum
    fft_size: int = 2048
    hop_size: int = 1024  # samples per live spectrum frame
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0

    # Live streaming
    stream_sample_rate: int = 44100
    stream_buffer_seconds: float = 300.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_mb: int = 50

    model_config = {"env_prefix": "PEAKTEMPO_"}

    def detection_params(self) -> DetectionParams:
        return DetectionParams(
            initial_threshold=self.initial_threshold,
            threshold_step=self.threshold_step,
            min_threshold=self.min_threshold,
            min_peaks=self.min_peaks,
            refractory_samples=self.refractory_samples,
            lookahead_peaks=self.lookahead_peaks,
        )

    def spectrum_options(self) -> dict:
        return {
            "fft_size": self.fft_size,
            "smoothing_time_constant": self.smoothing_time_constant,
            "min_decibels": self.min_decibels,
            "max_decibels": self.max_decibels,
        }


settings = Settings()
