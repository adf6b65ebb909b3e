from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
import httpx
import logging
from pydantic import BaseModel, Field

from config.settings import Settings, get_settings
from integrations import (
    AdviceResult,
    DedalusAdvisor,
    ElevenLabsSpeech,
    GeminiSummarizer,
    ProviderError,
    ProviderNotConfigured,
)
from integrations.core.canned import canned_advice
from integrations.dedalus import NOTE_UPSTREAM_FAILED


logging.basicConfig(
    level=get_settings().log_level,
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("farmfeed")

router = APIRouter()


class SummarizeRequest(BaseModel):
    text: Optional[str] = Field(None, description="Post text to summarize")


class AdviceRequest(BaseModel):
    input: Optional[str] = Field(None, description="Question or post text to answer")
    model: Optional[str] = Field(None, description="Model override, e.g. 'openai/gpt-5-mini'")


class SpeechRequest(BaseModel):
    text: Optional[str] = Field(None, description="Text to read aloud")
    voice_id: Optional[str] = Field(None, description="Provider voice identifier")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@router.post("/api/gemini")
async def summarize(req: SummarizeRequest, request: Request):
    if _blank(req.text):
        return JSONResponse(status_code=400, content={"error": "text is required"})

    summarizer: GeminiSummarizer = request.app.state.summarizer
    logger.info("Summarize: text_len=%s key_set=%s", len(req.text), summarizer.configured)
    try:
        summary = await summarizer.summarize(req.text)
    except ProviderNotConfigured as exc:
        logger.error("Summarization unavailable: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except ProviderError as exc:
        logger.warning("Summarization failed: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except Exception as exc:
        logger.exception("Summarization crashed: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Failed to summarize"})
    return {"summary": summary}


@router.post("/api/dedalus")
async def advise(req: AdviceRequest, request: Request) -> Any:
    if _blank(req.input):
        return JSONResponse(status_code=400, content={"success": False, "error": "input is required"})

    advisor: DedalusAdvisor = request.app.state.advisor
    logger.info(
        "Advice: input_len=%s model=%s key_set=%s",
        len(req.input),
        req.model or request.app.state.settings.dedalus_model,
        advisor.configured,
    )
    try:
        result = await advisor.advise(req.input, model=req.model)
    except Exception as exc:
        logger.exception("Advice crashed, using canned response: %s", exc)
        result = AdviceResult(canned_advice(req.input), note=NOTE_UPSTREAM_FAILED)
    return result.to_response()


@router.post("/api/elevenlabs-tts")
async def speak(req: SpeechRequest, request: Request):
    if _blank(req.text):
        return JSONResponse(status_code=400, content={"success": False, "error": "text is required"})

    speech: ElevenLabsSpeech = request.app.state.speech
    logger.info("Speech: text_len=%s voice=%s key_set=%s", len(req.text), req.voice_id, speech.configured)
    try:
        audio = await speech.synthesize(req.text, voice_id=req.voice_id)
    except ProviderNotConfigured as exc:
        logger.info("Speech unavailable: %s", exc)
        return JSONResponse(status_code=503, content={"success": False, "error": str(exc)})
    except ProviderError as exc:
        logger.warning("Speech failed: %s", exc)
        status = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
        return JSONResponse(status_code=status, content={"success": False, "error": str(exc)})
    except Exception as exc:
        logger.exception("Speech crashed: %s", exc)
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to synthesize speech"})
    return Response(content=audio.content, media_type=audio.media_type)


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


# Routes whose error bodies carry a "success" flag
_FLAGGED_ERROR_PATHS = {"/api/dedalus", "/api/elevenlabs-tts"}


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request body")
    logger.info("Rejected request to %s: %s", request.url.path, errors)
    content: Dict[str, Any] = {"error": f"{location}: {message}" if location else message}
    if request.url.path in _FLAGGED_ERROR_PATHS:
        content = {"success": False, **content}
    return JSONResponse(status_code=400, content=content)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the proxy application.

    ``transport`` is handed to every provider client; tests pass an
    ``httpx.MockTransport`` to stand in for the real providers.
    """
    settings = settings or get_settings()
    app = FastAPI(title="Farm Community Feed AI Proxy", version="1.0.0")

    # CORS: allow local frontend during development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.settings = settings
    app.state.summarizer = GeminiSummarizer(settings, transport=transport)
    app.state.advisor = DedalusAdvisor(settings, transport=transport)
    app.state.speech = ElevenLabsSpeech(settings, transport=transport)

    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.include_router(router)

    logger.info(
        "Config: env=%s gemini_model=%s gemini_key_set=%s dedalus_key_set=%s elevenlabs_key_set=%s",
        settings.app_env,
        settings.gemini_model,
        bool(settings.gemini_api_key),
        bool(settings.dedalus_api_key),
        bool(settings.elevenlabs_api_key),
    )
    return app


app = create_app()
