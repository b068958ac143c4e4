from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ucibridge.config import Settings, get_settings
from ucibridge.engine import SearchMode
from ucibridge.routes.common import engine_endpoint
from ucibridge.schemas import EngineResponse, ErrorResponse

router = APIRouter(prefix="/api")


@router.get(
    "/analyze",
    response_model=EngineResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Analyze FEN Position",
    description="Runs a fixed-time engine search and returns the raw UCI transcript up to `bestmove`.",
)
async def analyze(
    request: Request,
    fen: Optional[str] = Query(None),
    settings: Settings = Depends(get_settings),
):
    return await engine_endpoint(request, fen, SearchMode.ANALYZE, settings)
