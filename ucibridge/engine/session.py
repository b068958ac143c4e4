"""
Session Coordinator.

One EngineSession serves one request: it spawns the engine, feeds the command
sequence, classifies output as it arrives, and settles exactly once on
whichever comes first of a terminal line, a probe hint, process exit or the
wall-clock timeout. The process is closed on every exit path.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ucibridge.config import Settings
from ucibridge.engine.classifier import LineKind, classify_line
from ucibridge.engine.commands import SearchMode, build_commands, feed_commands
from ucibridge.engine.process import EngineProcess

logger = logging.getLogger(__name__)

HINT_TAG = "tablebase-info-line"


class SessionState(Enum):
    CREATED = "created"
    RUNNING = "running"
    SETTLED = "settled"
    CLOSED = "closed"


@dataclass(frozen=True)
class Settlement:
    reason: str  # "bestmove" | "hint" | "exit" | "timeout"
    raw: str
    line: Optional[str] = None
    code: Optional[int] = None

    def to_response(self) -> Dict[str, Any]:
        if self.reason == "hint":
            return {"hint": HINT_TAG, "line": self.line, "raw": self.raw}
        if self.reason in ("exit", "timeout"):
            return {"raw": self.raw, "code": self.code}
        return {"raw": self.raw}


class EngineSession:
    def __init__(
        self,
        engine_command: Sequence[str],
        commands: Sequence[str],
        mode: SearchMode,
        timeout: float = 20.0,
        kill_grace: float = 1.0,
    ):
        self.engine_command = tuple(engine_command)
        self.commands = tuple(commands)
        self.mode = mode
        self.timeout = timeout
        self.kill_grace = kill_grace

        self.state = SessionState.CREATED
        self.transcript: List[str] = []
        self.process: Optional[EngineProcess] = None
        self.timed_out = False

        self._settled: Optional["asyncio.Future[Settlement]"] = None
        self._reader: Optional["asyncio.Task[None]"] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._terminator: Optional["asyncio.Task[None]"] = None

    @classmethod
    def from_settings(cls, fen: str, mode: SearchMode, settings: Settings) -> "EngineSession":
        commands = build_commands(
            fen,
            mode,
            settings.syzygy_path,
            movetime_ms=settings.analyze_movetime_ms,
            depth=settings.probe_depth,
        )
        return cls(
            settings.engine_command,
            commands,
            mode,
            timeout=settings.timeout_ms / 1000,
            kill_grace=settings.kill_grace_ms / 1000,
        )

    @property
    def raw(self) -> str:
        return "\n".join(self.transcript)

    # ─── Run ────────────────────────────────────────────────────────────────

    async def run(self) -> Settlement:
        """Drive the session to its single settlement. SpawnError propagates."""
        if self.state is not SessionState.CREATED:
            raise RuntimeError(f"session already {self.state.value}")

        loop = asyncio.get_running_loop()
        self._settled = loop.create_future()
        try:
            self.process = await EngineProcess.start(*self.engine_command)
            logger.info(f"♟️ {self.mode.value} session started (pid={self.process.pid})")

            feed_commands(self.process, self.commands)
            self.state = SessionState.RUNNING

            self._reader = asyncio.create_task(self._consume())
            self._timer = loop.call_later(self.timeout, self._on_timeout)

            settlement = await self._settled
            logger.info(
                f"✅ {self.mode.value} session settled by {settlement.reason} "
                f"after {len(self.transcript)} lines (pid={self.process.pid})"
            )
            return settlement
        finally:
            await self.close()

    def _settle(self, settlement: Settlement) -> bool:
        # first settlement wins; later events are no-ops
        if self.state is not SessionState.RUNNING:
            return False
        self.state = SessionState.SETTLED
        if self._timer is not None:
            self._timer.cancel()
        if self._settled is not None and not self._settled.done():
            self._settled.set_result(settlement)
        return True

    async def _consume(self) -> None:
        process = self.process
        if process is None:
            return
        async for line in process.lines():
            # keep draining after settlement so the engine never blocks on a full pipe
            if self.state is not SessionState.RUNNING:
                continue
            self.transcript.append(line)

            kind = classify_line(line, self.mode)
            if kind is LineKind.TERMINAL:
                self._settle(Settlement("bestmove", self.raw))
            elif kind is LineKind.HINT:
                self._settle(Settlement("hint", self.raw, line=line))

        code = await process.wait()
        self._settle(self._fallback(code))

    def _fallback(self, code: Optional[int]) -> Settlement:
        return Settlement("timeout" if self.timed_out else "exit", self.raw, code=code)

    def _on_timeout(self) -> None:
        if self.state is not SessionState.RUNNING or self.process is None:
            return
        logger.warning(
            f"⏱️ {self.mode.value} session timed out after {self.timeout:.1f}s "
            f"(pid={self.process.pid}), terminating engine"
        )
        self.timed_out = True
        self._terminator = asyncio.create_task(self._reap())

    async def _reap(self) -> None:
        process = self.process
        if process is None:
            return
        await process.terminate(self.kill_grace)
        # stdout can outlive the process (e.g. a wrapper script's child holds it);
        # give the reader one grace period to reach EOF, then settle from the exit code
        if self._reader is not None and not self._reader.done():
            await asyncio.wait({self._reader}, timeout=self.kill_grace)
        if self.state is SessionState.RUNNING:
            logger.warning(
                f"Engine pid={process.pid} exited but its output stayed open, settling"
            )
        self._settle(self._fallback(process.returncode))

    # ─── Teardown ───────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self.state is SessionState.CLOSED:
            return
        if self._timer is not None:
            self._timer.cancel()
        try:
            if self.process is not None:
                await self.process.close(self.kill_grace)
        finally:
            for task in (self._reader, self._terminator):
                if task is not None and not task.done():
                    task.cancel()
            for task in (self._reader, self._terminator):
                if task is not None:
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass
            if self._settled is not None and not self._settled.done():
                self._settled.cancel()
            self.state = SessionState.CLOSED
