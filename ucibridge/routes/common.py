import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ucibridge.config import Settings
from ucibridge.engine import SearchMode, SpawnError
from ucibridge.services import run_engine

logger = logging.getLogger(__name__)


def missing_fen(fen: Optional[str]) -> bool:
    return fen is None or not fen.strip()


async def engine_endpoint(
    request: Request, fen: Optional[str], mode: SearchMode, settings: Settings
):
    if missing_fen(fen):
        return JSONResponse(status_code=400, content={"error": "missing fen"})
    if "\n" in fen or "\r" in fen:
        # a newline would smuggle extra UCI commands into the engine
        return JSONResponse(status_code=400, content={"error": "invalid fen"})

    slots = getattr(request.app.state, "engine_slots", None)
    try:
        return await run_engine(fen, mode, settings, slots=slots)
    except SpawnError as e:
        logger.error(f"❌ {mode.value} failed: {e}")
        return JSONResponse(
            status_code=500, content={"error": f"engine failed to start: {e}"}
        )
