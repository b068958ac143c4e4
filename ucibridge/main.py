import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ucibridge.config import configure_logging, get_settings
from ucibridge.routes import analyze, health, probe

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("ucibridge")


# 🌟 Log engine configuration and set up admission control on startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    current = get_settings()
    logger.info(f"✅ Using STOCKFISH_PATH: {current.engine_path}")
    logger.info(f"✅ Using SYZYGY_PATH: {current.syzygy_path}")
    if current.max_sessions > 0:
        app.state.engine_slots = asyncio.Semaphore(current.max_sessions)
        logger.info(f"Engine sessions capped at {current.max_sessions}")
    else:
        app.state.engine_slots = None
    yield


app = FastAPI(title="ucibridge", lifespan=lifespan)


# 🌟 Middleware to log every request with its duration
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)"
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze.router)
app.include_router(probe.router)
app.include_router(health.router)

# The built front-end, when present, owns "/"; otherwise "/" is a status probe.
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    logger.info(f"Serving static files from {settings.static_dir}")
else:

    @app.get("/")
    def root():
        return {"status": "ok"}
