"""WebSocket endpoint for live spectrum frames and on-demand tempo."""

import asyncio
import json
import logging

import numpy as np
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from peaktempo.analysis.engine import AnalysisEngine
from peaktempo.analysis.spectrum import SpectrumAnalyser, spectrum_frames
from peaktempo.audio.stream import StreamBuffer
from peaktempo.api.schemas import ErrorMessage, SpectrumMessage, TempoMessage
from peaktempo.api.upload import tempo_to_response
from peaktempo.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


class LiveSession:
    """Per-connection state: the buffered track and the spectrum analyser."""

    def __init__(self, sample_rate: int):
        self.buffer = StreamBuffer(sr=sample_rate, max_duration=settings.stream_buffer_seconds)
        self.analyser = SpectrumAnalyser(**settings.spectrum_options())
        self.engine = AnalysisEngine()

    @property
    def sample_rate(self) -> int:
        return self.buffer.sample_rate

    def feed(self, data: bytes) -> list[SpectrumMessage]:
        """Buffer a PCM chunk and return one spectrum frame per hop."""
        chunk = np.frombuffer(data, dtype=np.float32)
        self.buffer.append(chunk)
        return [
            SpectrumMessage(data=frame.tolist())
            for frame in spectrum_frames(chunk, settings.hop_size, analyser=self.analyser)
        ]

    def estimate(self) -> TempoMessage:
        result = self.engine.analyze_audio(self.buffer.get_audio(), self.sample_rate)
        return TempoMessage(data=tempo_to_response(result.tempo), duration=result.duration)


def _parse_control(text: str) -> dict:
    try:
        message = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e.msg}")
    if not isinstance(message, dict) or "type" not in message:
        raise ValueError("control message must be an object with a 'type'")
    return message


@router.websocket("/ws/live")
async def live_analysis(websocket: WebSocket):
    """Live spectrum and tempo via WebSocket.

    Protocol:
    - Client may send {"type": "start", "sample_rate": N} to (re)start a track
    - Client sends binary Float32 PCM chunks (mono)
    - Server answers each chunk with one {"type": "spectrum", "data": [0..255, ...]}
      per hop_size samples
    - Client sends {"type": "estimate"} to get {"type": "tempo", "data": {...}}
      for everything buffered so far
    """
    await websocket.accept()
    session = LiveSession(settings.stream_sample_rate)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            data = message.get("bytes")
            if data is not None:
                if len(data) % 4:
                    await websocket.send_json(ErrorMessage(
                        message=f"chunk of {len(data)} bytes is not Float32 PCM").model_dump())
                    continue
                for reply in session.feed(data):
                    await websocket.send_json(reply.model_dump())
                continue

            try:
                control = _parse_control(message.get("text") or "")
            except ValueError as e:
                await websocket.send_json(ErrorMessage(message=str(e)).model_dump())
                continue

            if control["type"] == "start":
                sample_rate = control.get("sample_rate", settings.stream_sample_rate)
                if not isinstance(sample_rate, int) or sample_rate <= 0:
                    await websocket.send_json(ErrorMessage(
                        message=f"invalid sample_rate: {sample_rate!r}").model_dump())
                    continue
                session = LiveSession(sample_rate)
                logger.info(f"Live session started at {sample_rate}Hz")
            elif control["type"] == "estimate":
                # Run analysis in thread pool to avoid blocking
                loop = asyncio.get_running_loop()
                reply = await loop.run_in_executor(None, session.estimate)
                await websocket.send_json(reply.model_dump())
            else:
                await websocket.send_json(ErrorMessage(
                    message=f"unknown message type: {control['type']!r}").model_dump())

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.exception("Live session failed")
        try:
            await websocket.send_json(ErrorMessage(message=str(e)).model_dump())
        except Exception:
            pass
