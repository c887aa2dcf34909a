"""Pydantic response models for API."""

from pydantic import BaseModel


class TempoCandidateResponse(BaseModel):
    tempo: int
    count: int


class TempoResponse(BaseModel):
    bpm: int | None
    error: str | None = None
    threshold: float | None = None
    peak_count: int = 0
    candidates: list[TempoCandidateResponse] = []


class AnalysisResponse(BaseModel):
    tempo: TempoResponse
    duration: float = 0.0
    sample_rate: int = 0


# WebSocket message types

class SpectrumMessage(BaseModel):
    type: str = "spectrum"
    data: list[int]


class TempoMessage(BaseModel):
    type: str = "tempo"
    data: TempoResponse
    duration: float = 0.0


class ErrorMessage(BaseModel):
    type: str = "error"
    message: str
