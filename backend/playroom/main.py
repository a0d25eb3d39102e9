"""
Playroom API: чат и крестики-нолики поверх in-memory хранилищ.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config, get_config
from .constants import GLOBAL_REQUEST_WINDOW_SECONDS
from .errors import MissingParameter, PlayroomError, RateLimitExceeded
from .handlers import handle_chat, handle_tic_tac_toe
from .state import AppState

logging.basicConfig(
    level=logging.DEBUG if get_config().debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

POST_ONLY = {"error": "This endpoint only supports POST requests."}


async def sweep_expired(state: AppState) -> None:
    state.sweep()


def _error_body(config: Config, message: str) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if config.documentation_url:
        body["documentation"] = config.documentation_url
    return body


async def _read_body(request: Request) -> dict[str, Any]:
    try:
        data = await request.json()
    except ValueError:
        raise MissingParameter("Invalid JSON body.")
    if not isinstance(data, dict):
        raise MissingParameter("Invalid JSON body.")
    return data


def create_app(config: Config | None = None) -> FastAPI:
    config = config or get_config()
    state = AppState(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = AsyncIOScheduler()
        app.state.scheduler = scheduler
        if config.sweep_interval_seconds > 0:
            scheduler.add_job(
                sweep_expired,
                "interval",
                seconds=config.sweep_interval_seconds,
                args=[state],
            )
            scheduler.start()
            logger.info("Sweep scheduled every %ss", config.sweep_interval_seconds)
        try:
            yield
        finally:
            if scheduler.running:
                scheduler.shutdown()
            logger.info("Stop Server")

    app = FastAPI(title="Playroom API", lifespan=lifespan)
    app.state.config = config
    app.state.playroom = state
    app.state.requests = 0
    app.state.reset_at = time.time() + GLOBAL_REQUEST_WINDOW_SECONDS

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        now = time.time()
        if now > app.state.reset_at:
            app.state.requests = 0
            app.state.reset_at = now + GLOBAL_REQUEST_WINDOW_SECONDS
        app.state.requests += 1
        if app.state.requests > config.global_request_limit:
            logger.warning("Global request limit reached (%s)", config.global_request_limit)
            return JSONResponse(status_code=429, content={"message": "Too Many Requests"})
        return await call_next(request)

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        resp = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, resp.status_code)
        return resp

    @app.exception_handler(PlayroomError)
    async def playroom_error(request: Request, exc: PlayroomError):
        body = _error_body(config, exc.message)
        if isinstance(exc, RateLimitExceeded):
            body["retry_after"] = exc.retry_after
            return JSONResponse(
                status_code=429,
                content=body,
                headers={"Retry-After": str(exc.retry_after)},
            )
        logger.debug("%s on %s: %s", exc.kind, request.url.path, exc.message)
        return JSONResponse(status_code=200, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "message": "Not Found",
                    "error": f"Endpoint '{request.url.path}' does not exist.",
                    "status": "404",
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s: %s", request.url.path, exc)
        body = {"message": "Internal Server Error", "error": "An unexpected error occurred.", "status": "500"}
        if config.documentation_url:
            body["documentation"] = config.documentation_url
        return JSONResponse(status_code=500, content=body)

    version = config.api_version

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/")
    def index():
        return {"versions": {version: f"/{version}"}}

    @app.get(f"/{version}")
    def endpoints():
        return {
            "version": version,
            "endpoints": {
                "chat": f"/{version}/chat",
                "tic_tac_toe": f"/{version}/tic-tac-toe",
            },
        }

    @app.get(f"/{version}/chat")
    def chat_get():
        return POST_ONLY

    @app.post(f"/{version}/chat")
    async def chat_post(request: Request):
        data = await _read_body(request)
        return handle_chat(state.chat, data)

    @app.get(f"/{version}/tic-tac-toe")
    def tic_tac_toe_get():
        return POST_ONLY

    @app.post(f"/{version}/tic-tac-toe")
    async def tic_tac_toe_post(request: Request):
        data = await _read_body(request)
        return handle_tic_tac_toe(state.games, data)

    return app


app = create_app()
