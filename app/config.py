import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, SecretStr

from app.errors import ConfigurationError

load_dotenv()

GOOGLE_TTS_ENDPOINT = "https://texttospeech.googleapis.com/v1/text:synthesize"


class Settings(BaseModel):
    google_api_key: Optional[SecretStr] = None
    tts_endpoint: str = GOOGLE_TTS_ENDPOINT
    language_code: str = "ja-JP"
    # raw TTS_TIMEOUT value, parsed by timeout_seconds() at call time
    request_timeout: Optional[str] = None

    def timeout_seconds(self) -> Optional[float]:
        if not self.request_timeout:
            return None
        try:
            seconds = float(self.request_timeout)
        except ValueError:
            raise ConfigurationError(f"TTS_TIMEOUT is not a number: {self.request_timeout!r}")
        if not seconds > 0:
            raise ConfigurationError(f"TTS_TIMEOUT must be positive: {self.request_timeout!r}")
        return seconds


def get_settings() -> Settings:
    """Read settings from the environment. Called per request, not at startup."""
    api_key = os.getenv("GOOGLE_API_KEY")
    return Settings(
        google_api_key=SecretStr(api_key) if api_key else None,
        tts_endpoint=os.getenv("TTS_ENDPOINT", GOOGLE_TTS_ENDPOINT),
        language_code=os.getenv("TTS_LANGUAGE_CODE", "ja-JP"),
        request_timeout=os.getenv("TTS_TIMEOUT"),
    )
