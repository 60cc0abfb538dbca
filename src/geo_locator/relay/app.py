import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..analysis.service import LocationInferenceClient
from ..errors import LocatorError
from ..genai_client import GeminiClient
from ..media.encoder import is_supported_mime_type
from ..media.types import Coordinates, MediaPayload
from ..settings import Settings, settings as runtime_settings
from ..speech import SpeechSynthesisClient
from .schemas import AnalyzeRequest, AudioRequest, RelayEnvelope

app = FastAPI(title="geo-locator relay")
logger = logging.getLogger(__name__)

inference_client: Optional[LocationInferenceClient] = None
synthesis_client: Optional[SpeechSynthesisClient] = None


def configure_services(cfg: Optional[Settings] = None) -> None:
    """Build the model clients; raises ConfigurationError without a credential."""

    global inference_client, synthesis_client
    cfg = cfg or runtime_settings
    client = GeminiClient(cfg.gemini)
    inference_client = LocationInferenceClient(client=client)
    synthesis_client = SpeechSynthesisClient(client=client)
    logger.info(
        "relay.configured",
        extra={"image_model": cfg.gemini.image_model, "video_model": cfg.gemini.video_model},
    )


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    if message:
        body["message"] = message
    return JSONResponse(body, status_code=status_code)


def _failure(exc: LocatorError) -> JSONResponse:
    return _error(500, "Internal Server Error", exc.user_message)


@app.get("/health")
async def health() -> Dict[str, Any]:
    cfg = runtime_settings.gemini
    return {
        "status": "ok",
        "service": "geo-locator-relay",
        "configured": inference_client is not None and synthesis_client is not None,
        "image_model": cfg.image_model,
        "video_model": cfg.video_model,
        "tts_model": cfg.tts_model,
    }


async def _handle_analyze(payload: Dict[str, Any]) -> JSONResponse:
    try:
        req = AnalyzeRequest.model_validate(payload)
    except ValidationError:
        return _error(400, "Missing base64Data or mimeType for analysis")
    if not is_supported_mime_type(req.mimeType):
        return _error(400, "Unsupported media type. Use an image or video.")

    coordinates = Coordinates.from_dict(req.coordinates)
    if req.coordinates is not None and coordinates is None:
        logger.warning("relay.analyze.bad_coordinates", extra={"coordinates": repr(req.coordinates)[:200]})

    if inference_client is None:
        return _error(503, "Service Unavailable", "Server is not configured.")
    media = MediaPayload(encoded_bytes=req.base64Data, mime_type=req.mimeType)
    try:
        result = await inference_client.analyze(media, coordinates)
    except LocatorError as exc:
        logger.warning("relay.analyze.failed", extra={"error": repr(exc)})
        return _failure(exc)
    return JSONResponse(result.to_dict())


async def _handle_audio(payload: Dict[str, Any]) -> JSONResponse:
    try:
        req = AudioRequest.model_validate(payload)
    except ValidationError:
        return _error(400, "Missing text for audio generation")
    if synthesis_client is None:
        return _error(503, "Service Unavailable", "Server is not configured.")
    try:
        audio = await synthesis_client.synthesize(req.text)
    except LocatorError as exc:
        logger.warning("relay.audio.failed", extra={"error": repr(exc)})
        return _failure(exc)
    return JSONResponse({"audio": audio})


@app.post("/api/gemini")
async def gemini_relay(request: Request) -> JSONResponse:
    try:
        body = await request.json()
    except Exception:
        return _error(400, "Invalid JSON body")
    if not isinstance(body, dict):
        return _error(400, "Invalid JSON body")

    envelope = RelayEnvelope.model_validate(body)
    if envelope.action == "analyze":
        return await _handle_analyze(envelope.payload)
    if envelope.action == "audio":
        return await _handle_audio(envelope.payload)
    return _error(400, 'Invalid action specified. Use "analyze" or "audio".')


@app.on_event("startup")
async def _on_startup() -> None:
    if inference_client is None or synthesis_client is None:
        configure_services()


def main(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import uvicorn

    from ..logging_setup import setup_logging
    from ..settings import require_api_key

    setup_logging()
    require_api_key(runtime_settings.gemini)
    uvicorn.run(
        app,
        host=host or runtime_settings.relay.host,
        port=port or runtime_settings.relay.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
