# data_server.py

import sys
import threading
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config import ServerConfig, load_config
from routes.data_api import router as data_router
from server_log.logger_singleton import getLogger

logger = getLogger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# --- crash hooks: unhandled process + thread exceptions -----------------------
def _log_unhandled(exc_type, exc_value, exc_tb):
    try:
        logger.error("[CRASH HOOK] Unhandled exception:\n" + "".join(traceback.format_exception(exc_type, exc_value, exc_tb)))
    except Exception:
        print("Failed to log unhandled exception", file=sys.stderr)


def _thread_excepthook(args):
    try:
        logger.error(
            f"[THREAD CRASH] Thread {args.thread.name if args.thread else '?'} crashed with exception:\n"
            f"{args.exc_type.__name__}: {args.exc_value}\n" + "".join(traceback.format_tb(args.exc_traceback))
        )
    except Exception:
        print("Failed to log thread exception", file=sys.stderr)


def install_crash_hooks() -> None:
    sys.excepthook = _log_unhandled
    threading.excepthook = _thread_excepthook
# -------------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: ServerConfig = app.state.config
    logger.logMessage(f"Listening on {config.host}:{config.port}")
    logger.logMessage(f"Saving data under {config.data_dir}")
    try:
        yield
    finally:
        logger.logMessage("Server shutdown complete.")


def create_app(config: Optional[ServerConfig] = None, clock: Optional[Clock] = None) -> FastAPI:
    if config is None:
        config = load_config()

    app = FastAPI(title="data-backs", lifespan=lifespan)
    app.state.config = config
    app.state.clock = clock or utc_now

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.logMessage(
                f"[HTTP] {request.method} {request.url.path} -> {status_code} ({duration_ms} ms)"
            )

    app.include_router(data_router)
    return app


install_crash_hooks()
app = create_app()
