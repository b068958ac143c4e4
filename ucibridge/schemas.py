from typing import Optional

from pydantic import BaseModel


class EngineResponse(BaseModel):
    raw: str  # newline-joined engine transcript
    hint: Optional[str] = None  # "tablebase-info-line" when a probe hint settled it
    line: Optional[str] = None  # the matched hint line
    code: Optional[int] = None  # engine exit code, when it exited before answering


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
