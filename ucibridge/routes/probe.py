from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ucibridge.config import Settings, get_settings
from ucibridge.engine import SearchMode
from ucibridge.routes.common import engine_endpoint
from ucibridge.schemas import EngineResponse, ErrorResponse

router = APIRouter(prefix="/api")


@router.get(
    "/probe",
    response_model=EngineResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Probe Tablebase",
    description=(
        "Runs a depth-1 search and answers with the first tablebase (WDL/DTZ) "
        "line the engine prints, or the transcript up to `bestmove`."
    ),
)
async def probe(
    request: Request,
    fen: Optional[str] = Query(None),
    settings: Settings = Depends(get_settings),
):
    return await engine_endpoint(request, fen, SearchMode.PROBE, settings)
