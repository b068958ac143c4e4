import asyncio
import logging
from typing import Any, Dict, Optional

from ucibridge.config import Settings
from ucibridge.engine import EngineSession, SearchMode

logger = logging.getLogger("ucibridge.services")


async def run_engine(
    fen: str,
    mode: SearchMode,
    settings: Settings,
    slots: Optional[asyncio.Semaphore] = None,
) -> Dict[str, Any]:
    """
    Run one engine session for `fen` and return its response body.
    When `slots` is given, the session waits for a free slot before spawning;
    the wait does not count against the engine timeout.
    """
    session = EngineSession.from_settings(fen, mode, settings)
    if slots is None:
        settlement = await session.run()
    else:
        if slots.locked():
            logger.info(f"⏳ All engine slots busy, queueing {mode.value} request")
        async with slots:
            settlement = await session.run()
    return settlement.to_response()
