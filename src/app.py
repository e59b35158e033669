# ============================================================
# Stimuli Gateway FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Generation endpoints bound to one RequestPipeline
#   - Gemini backend client (or any client passed in)
#   - Open CORS, ping probe, static landing page
# ============================================================

from pathlib import Path
from typing import Optional
import random

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

# --- Local imports ---
from src.settings import Settings, get_settings
from src.logging_config import get_logger, set_level
from src.generate import build_operations
from src.generate.operations import BackendClient
from src.pipeline import BODY_READ_ERROR, ROUTES, RequestPipeline, error_body

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS, GET",
    "Access-Control-Allow-Headers": "Content-Type",
}


# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
def make_client(settings: Settings) -> BackendClient:
    from src.generate.clients.gemini_client import GeminiClient
    return GeminiClient(
        api_key=settings.GEMINI_STIMULI_KEY,
        model=settings.AI_MODEL_NAME,
        base_url=settings.GEMINI_API_BASE,
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
    )


def _generation_endpoint(pipeline: RequestPipeline, slug: str):
    async def endpoint(request: Request):
        try:
            body = await request.body()
        except ClientDisconnect:
            logger.warning("client disconnected while sending body for %s", slug)
            return JSONResponse(error_body(BODY_READ_ERROR), status_code=400)
        status, payload = await pipeline.handle(slug, body)
        return JSONResponse(payload, status_code=status)

    endpoint.__name__ = slug.replace("-", "_")
    return endpoint


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    client: Optional[BackendClient] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    settings = settings or get_settings()
    set_level(settings.LOG_LEVEL)
    client = client if client is not None else make_client(settings)
    pipeline = RequestPipeline(build_operations(client, rng=rng))

    docs = "/docs" if settings.DEBUG else None
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0",
        docs_url=docs,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )
    app.state.pipeline = pipeline

    # --------------------------------------------------------
    # 🌐 CORS + preflight
    # --------------------------------------------------------
    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        for k, v in CORS_HEADERS.items():
            response.headers[k] = v
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # unknown routes and wrong methods both read as Not Found
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    # --------------------------------------------------------
    # 💬 Generation routes
    # --------------------------------------------------------
    for slug in ROUTES:
        app.add_api_route(f"/api/{slug}", _generation_endpoint(pipeline, slug), methods=["POST"])

    # --------------------------------------------------------
    # 🧭 Liveness + landing page
    # --------------------------------------------------------
    @app.get("/api/ping")
    def ping():
        return {"status": "awake"}

    @app.get("/")
    def index():
        path = Path(settings.STATIC_DIR) / "index.html"
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return PlainTextResponse("404 Not Found: index.html missing.", status_code=404)
        except OSError:
            logger.exception("failed to read %s", path)
            return PlainTextResponse("500 Internal Server Error.", status_code=500)
        return HTMLResponse(content)

    logger.info(
        "gateway ready env=%s model=%s engine=%s",
        settings.ENV, getattr(client, "model", None), type(client).__name__,
    )
    return app
