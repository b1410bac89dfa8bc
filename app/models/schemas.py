from typing import Any

from pydantic import BaseModel, Field

MAX_TEXT_LENGTH = 5000


class TTSRequest(BaseModel):
    text: str
    voice: str
    speed: Any


class SynthesisInput(BaseModel):
    text: str


class VoiceSelection(BaseModel):
    languageCode: str
    name: str


class AudioConfig(BaseModel):
    audioEncoding: str = "MP3"
    pitch: int = 0
    speakingRate: Any


class ProviderRequest(BaseModel):
    input: SynthesisInput
    voice: VoiceSelection
    audioConfig: AudioConfig


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable failure message")
