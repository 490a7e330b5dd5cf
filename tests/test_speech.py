import io
import json

import pytest

from assistclient.speech import (
    CreateSpeechRequest,
    SpeechModel,
    SpeechResponseFormat,
    SpeechVoice,
    create_speech,
)
from assistclient.transport import APIError, ApiResponse, Transport

AUDIO = b"\xff\xfbfake-mp3-data"


class SpeechServer:
    def __init__(self):
        self.requests = []

    def __call__(self, prepared):
        self.requests.append(prepared)
        if prepared.method != "POST":
            return ApiResponse(405, {}, io.BytesIO(b"method not allowed"))
        if prepared.headers.get("Content-Type") != "application/json":
            return ApiResponse(400, {}, io.BytesIO(b"request is not json"))
        params = json.loads(prepared.body)
        for name in ("model", "input", "voice"):
            if name not in params:
                return ApiResponse(400, {}, io.BytesIO(f"no {name} in params".encode()))
        return ApiResponse(200, {"Content-Type": "audio/mpeg"}, io.BytesIO(AUDIO))


@pytest.fixture
def server():
    return SpeechServer()


def test_create_speech_happy_path(server):
    transport = Transport("token", "http://localhost/v1", sender=server)
    request = CreateSpeechRequest(model=SpeechModel.TTS_1, input="Hello!", voice=SpeechVoice.ALLOY)
    with create_speech(transport, request) as response:
        assert response.read() == AUDIO
        assert response.headers["Content-Type"] == "audio/mpeg"
    assert server.requests[0].url == "http://localhost/v1/audio/speech"
    assert server.requests[0].model == "tts-1"


def test_create_speech_missing_field_is_error(server):
    transport = Transport("token", "http://localhost/v1", sender=server)
    request = CreateSpeechRequest(model=SpeechModel.TTS_1, input="Hello!", voice=SpeechVoice.ALLOY)
    request.to_dict()
    server_body = {"model": "tts-1"}
    with pytest.raises(APIError) as info:
        transport.request("POST", "/audio/speech", body=server_body, raw=True)
    assert info.value.message == "no input in params"


def test_request_omits_optional_fields():
    request = CreateSpeechRequest(model=SpeechModel.TTS_1_HD, input="hi", voice=SpeechVoice.NOVA)
    assert request.to_dict() == {"model": "tts-1-hd", "input": "hi", "voice": "nova"}


def test_request_includes_optional_fields():
    request = CreateSpeechRequest(
        model="tts-1",
        input="hi",
        voice="echo",
        response_format=SpeechResponseFormat.OPUS,
        speed=1.5,
    )
    data = request.to_dict()
    assert data["response_format"] == "opus"
    assert data["speed"] == 1.5
    assert data["voice"] == "echo"


def test_enum_values():
    assert SpeechModel.CANARY_TTS == "canary-tts"
    assert SpeechVoice("shimmer") is SpeechVoice.SHIMMER
    assert SpeechResponseFormat("pcm") is SpeechResponseFormat.PCM