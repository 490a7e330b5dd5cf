"""Text-to-speech requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from assistclient.transport import ApiResponse, Transport


class SpeechModel(str, Enum):
    TTS_1 = "tts-1"
    TTS_1_HD = "tts-1-hd"
    CANARY_TTS = "canary-tts"


class SpeechVoice(str, Enum):
    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"


class SpeechResponseFormat(str, Enum):
    MP3 = "mp3"
    OPUS = "opus"
    AAC = "aac"
    FLAC = "flac"
    WAV = "wav"
    PCM = "pcm"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class CreateSpeechRequest:
    model: Union[SpeechModel, str]
    input: str
    voice: Union[SpeechVoice, str]
    response_format: Optional[Union[SpeechResponseFormat, str]] = None  # server default: mp3
    speed: float = 0.0  # server default: 1.0

    def to_dict(self) -> dict:
        data = {"model": _text(self.model), "input": self.input, "voice": _text(self.voice)}
        if self.response_format:
            data["response_format"] = _text(self.response_format)
        if self.speed:
            data["speed"] = self.speed
        return data


def create_speech(transport: Transport, request: CreateSpeechRequest) -> ApiResponse:
    """Request synthesized audio; the caller reads and closes the response."""
    return transport.request(
        "POST",
        "/audio/speech",
        body=request.to_dict(),
        model=_text(request.model),
        content_type="application/json",
        raw=True,
    )