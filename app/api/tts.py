from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from app.config import Settings, get_settings
from app.google_tts import GoogleTTSClient, build_provider_request
from app.models.schemas import MAX_TEXT_LENGTH, ErrorResponse, TTSRequest
import logging
import time

logging.basicConfig(level=logging.INFO)
# httpx logs each request URL at INFO, and the URL carries the API key
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_tts_client(settings: Settings = Depends(get_settings)) -> GoogleTTSClient:
    return GoogleTTSClient(settings)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


def text_length(text: str) -> int:
    """Length in UTF-16 code units, so an emoji counts as two."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def parse_tts_request(body) -> TTSRequest | None:
    """Return the request if text, voice and speed are all given, else None.

    ``speed`` only has to be present, so ``0`` is accepted.
    """
    if not isinstance(body, dict):
        return None
    text = body.get("text")
    voice = body.get("voice")
    if not text or not isinstance(text, str):
        return None
    if not voice or not isinstance(voice, str):
        return None
    if "speed" not in body:
        return None
    return TTSRequest(text=text, voice=voice, speed=body["speed"])


@router.api_route(
    "/api/tts",
    methods=ALL_METHODS,
    responses={code: {"model": ErrorResponse} for code in (400, 405, 500)},
)
async def synthesize(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: GoogleTTSClient = Depends(get_tts_client),
):
    """Proxy a synthesis request to Google Cloud Text-to-Speech"""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    if request.method != "POST":
        logger.info(f"Rejected {request.method} request")
        return error_response(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")

    try:
        body = await request.json()
    except ValueError:
        body = None

    tts_request = parse_tts_request(body)
    if tts_request is None:
        logger.warning("Missing required fields in TTS request")
        return error_response(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    length = text_length(tts_request.text)
    if length > MAX_TEXT_LENGTH:
        logger.warning(f"Text too long: {length} characters")
        return error_response(status.HTTP_400_BAD_REQUEST, f"テキストは{MAX_TEXT_LENGTH}文字以下にしてください")

    start_time = time.time()
    try:
        payload = build_provider_request(tts_request, language_code=settings.language_code)
        result = await client.synthesize(payload)
    except Exception as e:
        logger.error(f"TTS error ({type(e).__name__}): {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or type(e).__name__)

    elapsed = time.time() - start_time
    logger.info(f"Time taken : {elapsed:.2f} | Voice : {tts_request.voice} | Length : {length}")
    return JSONResponse(status_code=status.HTTP_200_OK, content=result, headers=CORS_HEADERS)
