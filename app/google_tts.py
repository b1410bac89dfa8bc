import json
from typing import Any, Optional

import httpx

from app.config import Settings
from app.errors import ConfigurationError, ProviderError, TransportError
from app.models.schemas import (
    AudioConfig,
    ProviderRequest,
    SynthesisInput,
    TTSRequest,
    VoiceSelection,
)

MISSING_API_KEY_MESSAGE = "API キーが設定されていません"


def build_provider_request(tts_request: TTSRequest, language_code: str = "ja-JP") -> dict[str, Any]:
    """Project a caller request onto the Google synthesize payload."""
    payload = ProviderRequest(
        input=SynthesisInput(text=tts_request.text),
        voice=VoiceSelection(languageCode=language_code, name=tts_request.voice),
        audioConfig=AudioConfig(audioEncoding="MP3", pitch=0, speakingRate=tts_request.speed),
    )
    return payload.model_dump()


def encode_payload(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=True).encode("ascii")


class GoogleTTSClient:
    """Single-shot client for the Google Cloud Text-to-Speech REST API.

    Each call opens its own connection and performs exactly one request.
    Failures are raised as ``SynthesisError`` subclasses.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def synthesize(self, payload: dict[str, Any]) -> dict[str, Any]:
        if self.settings.google_api_key is None:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        api_key = self.settings.google_api_key.get_secret_value()
        timeout = self.settings.timeout_seconds()

        body = encode_payload(payload)
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        async with httpx.AsyncClient(transport=self.transport, timeout=timeout) as client:
            try:
                response = await client.post(
                    self.settings.tts_endpoint,
                    params={"key": api_key},
                    content=body,
                    headers=headers,
                )
            except httpx.RequestError as e:
                # httpx messages can include the request URL, which carries the key
                message = str(e).replace(api_key, "***") or type(e).__name__
                raise TransportError(message) from e

        if response.status_code != 200:
            raise ProviderError(f"API Error: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("API Error: invalid JSON in provider response", status_code=200) from e
        if not isinstance(data, dict):
            raise ProviderError("API Error: unexpected provider response", status_code=200)
        return data
