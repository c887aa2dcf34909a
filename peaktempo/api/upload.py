"""File upload endpoint for tempo analysis."""

import logging
import os
import tempfile

from fastapi import APIRouter, UploadFile, File, HTTPException

from peaktempo.api.schemas import AnalysisResponse, TempoCandidateResponse, TempoResponse
from peaktempo.analysis.engine import AnalysisEngine
from peaktempo.analysis.models import AnalysisResult, TempoResult
from peaktempo.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".aac", ".wma"}


def tempo_to_response(tempo: TempoResult) -> TempoResponse:
    return TempoResponse(
        bpm=tempo.bpm,
        error=tempo.error,
        threshold=tempo.threshold,
        peak_count=tempo.peak_count,
        candidates=[
            TempoCandidateResponse(tempo=c.tempo, count=c.count)
            for c in tempo.candidates
        ],
    )


def result_to_response(result: AnalysisResult) -> AnalysisResponse:
    return AnalysisResponse(
        tempo=tempo_to_response(result.tempo),
        duration=result.duration,
        sample_rate=result.sample_rate,
    )


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_file(file: UploadFile = File(...)):
    """Estimate the tempo of an uploaded audio file.

    An unknown tempo is not an HTTP error: the response carries
    ``bpm: null`` and the failure kind.
    """
    suffix = ""
    if file.filename and "." in file.filename:
        suffix = "." + file.filename.rsplit(".", 1)[-1].lower()
        if suffix not in ALLOWED_EXTENSIONS:
            raise HTTPException(400, f"Unsupported format. Use: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

    content = await file.read()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(400, f"File too large (max {settings.max_upload_mb} MB)")

    tmp_path = None
    try:
        # librosa needs a file path for some formats
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(content)
            tmp_path = tmp.name

        engine = AnalysisEngine()
        result = engine.analyze_file(tmp_path)
        return result_to_response(result)
    except Exception:
        logger.exception(f"Analysis of {file.filename!r} failed")
        raise HTTPException(500, "Analysis failed")
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
