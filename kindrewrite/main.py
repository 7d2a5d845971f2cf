import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from .errors import KindRewriteError
from .schemas import (
    ErrorResponse,
    ModerateRequest,
    ModerateResponse,
    RewriteRequest,
    RewriteResponse,
)
from .moderation import ModerationService
from .rewrite import RuleBasedRewriter, TONE_CHOICES
from .metrics import ERRORS, REQUESTS, LATENCY
from .settings import ModerationConfig, settings

logger = logging.getLogger(__name__)

moderation_svc = ModerationService(ModerationConfig.from_settings(settings))
rewriter = RuleBasedRewriter()


def get_moderation_service() -> ModerationService:
    return moderation_svc


def get_rewriter() -> RuleBasedRewriter:
    return rewriter


@asynccontextmanager
async def lifespan(app: FastAPI):
    configured = moderation_svc.config.configured
    logger.info("KindRewrite listening on http://%s:%d", settings.HOST, settings.PORT)
    logger.info("HF_TOKEN configured: %s", "yes" if configured else "no")
    if not configured:
        logger.warning("HF_TOKEN not set; /api/moderate will answer 500 until it is (use a .env file)")
    yield


app = FastAPI(title="KindRewrite", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------ Error mapping ------------------------
_FIELD_ERRORS = {
    "text": "Invalid input: text field is required and must be a string",
    "tone": f"Invalid input: tone must be one of: {TONE_CHOICES}",
    "safer": "Invalid input: safer must be a number between 0 and 1",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(KindRewriteError)
async def handle_app_error(request: Request, exc: KindRewriteError):
    ERRORS.labels(request.url.path, exc.kind).inc()
    if exc.status_code >= 500 and exc.__cause__ is not None:
        logger.error("%s %s: %s", request.url.path, exc.kind, exc, exc_info=exc.__cause__)
    else:
        logger.warning("%s %s: %s", request.url.path, exc.kind, exc)
    return _error(exc.status_code, exc.public_message)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    ERRORS.labels(request.url.path, "InvalidInput").inc()
    message = "Invalid input: request body must be a JSON object"
    for err in exc.errors():
        loc = err.get("loc", ())
        field = loc[1] if len(loc) > 1 else None
        if field in _FIELD_ERRORS:
            message = _FIELD_ERRORS[field]
            break
    logger.warning("%s rejected: %s", request.url.path, message)
    return _error(400, message)


# ------------------------ Routes ------------------------
@app.get("/healthz")
def healthz(svc: ModerationService = Depends(get_moderation_service)):
    return {"status": "ok", "moderation_configured": svc.config.configured}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.post("/api/moderate", response_model=ModerateResponse)
def moderate(req: ModerateRequest, svc: ModerationService = Depends(get_moderation_service)):
    REQUESTS.labels("/api/moderate").inc()
    with LATENCY.labels("/api/moderate").time():
        result = svc.moderate(req.text, req.safer)
    return ModerateResponse(scorePct=result.score_percent, score01=result.score_fraction, raw=result.raw_payload)


@app.post("/api/rewrite", response_model=RewriteResponse)
def rewrite(req: RewriteRequest, svc: RuleBasedRewriter = Depends(get_rewriter)):
    REQUESTS.labels("/api/rewrite").inc()
    with LATENCY.labels("/api/rewrite").time():
        result = svc.rewrite(req.text, req.tone)
    return RewriteResponse(rewritten=result.rewritten_text, tone=result.tone.value)
