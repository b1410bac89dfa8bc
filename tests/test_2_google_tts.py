import asyncio
import pytest
import httpx
from pydantic import SecretStr
from app.config import GOOGLE_TTS_ENDPOINT, Settings, get_settings
from app.errors import ConfigurationError, ProviderError, TransportError
from app.google_tts import GoogleTTSClient, build_provider_request, encode_payload
from app.models.schemas import TTSRequest


def make_client(handler, api_key="secret-key"):
    settings = Settings(google_api_key=SecretStr(api_key) if api_key else None)
    return GoogleTTSClient(settings, transport=httpx.MockTransport(handler))


def test_build_provider_request():
    payload = build_provider_request(TTSRequest(text="おはよう", voice="ja-JP-Wavenet-A", speed=0.8))
    assert payload == {
        "input": {"text": "おはよう"},
        "voice": {"languageCode": "ja-JP", "name": "ja-JP-Wavenet-A"},
        "audioConfig": {"audioEncoding": "MP3", "pitch": 0, "speakingRate": 0.8},
    }


def test_build_provider_request_is_idempotent():
    tts_request = TTSRequest(text="同じ入力", voice="ja-JP-Standard-C", speed=1)
    first = encode_payload(build_provider_request(tts_request))
    second = encode_payload(build_provider_request(tts_request))
    assert first == second


def test_encode_payload_escapes_non_ascii():
    body = encode_payload({"input": {"text": "日本語\ud800"}})
    assert body == b'{"input": {"text": "\\u65e5\\u672c\\u8a9e\\ud800"}}'


def test_synthesize_returns_provider_json():
    def handler(request):
        return httpx.Response(200, json={"audioContent": "AAAA"})

    result = asyncio.run(make_client(handler).synthesize({"input": {"text": "x"}}))
    assert result == {"audioContent": "AAAA"}


def test_synthesize_sends_one_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(make_client(handler).synthesize({"input": {"text": "x"}}))
    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "API Error: 500"
    assert len(calls) == 1
    assert str(calls[0].url).startswith(GOOGLE_TTS_ENDPOINT)


def test_synthesize_without_key():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ConfigurationError, match="API キーが設定されていません"):
        asyncio.run(make_client(handler, api_key=None).synthesize({}))


def test_synthesize_transport_error_redacts_key():
    def handler(request):
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(make_client(handler).synthesize({}))
    assert "secret-key" not in str(exc_info.value)
    assert "***" in str(exc_info.value)


def test_synthesize_rejects_non_json_body():
    def handler(request):
        return httpx.Response(200, content=b"<html></html>")

    with pytest.raises(ProviderError):
        asyncio.run(make_client(handler).synthesize({}))


def test_get_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    monkeypatch.setenv("TTS_TIMEOUT", "12.5")
    monkeypatch.delenv("TTS_ENDPOINT", raising=False)
    monkeypatch.delenv("TTS_LANGUAGE_CODE", raising=False)
    settings = get_settings()
    assert settings.google_api_key.get_secret_value() == "env-key"
    assert "env-key" not in repr(settings)
    assert settings.timeout_seconds() == 12.5
    assert settings.tts_endpoint == GOOGLE_TTS_ENDPOINT
    assert settings.language_code == "ja-JP"


def test_get_settings_without_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("TTS_TIMEOUT", raising=False)
    settings = get_settings()
    assert settings.google_api_key is None
    assert settings.timeout_seconds() is None


@pytest.mark.parametrize("value", ["thirty", "0", "-5"])
def test_invalid_timeout_raises_before_request(value):
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(handler)
    client.settings.request_timeout = value
    with pytest.raises(ConfigurationError, match="TTS_TIMEOUT"):
        asyncio.run(client.synthesize({}))


def test_get_settings_keeps_bad_timeout_until_used(monkeypatch):
    monkeypatch.setenv("TTS_TIMEOUT", "thirty")
    settings = get_settings()
    with pytest.raises(ConfigurationError):
        settings.timeout_seconds()
