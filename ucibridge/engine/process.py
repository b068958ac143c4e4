"""
Engine Process Handle.

Owns one spawned UCI engine subprocess for the lifetime of a single request:
a writable stdin, a line-segmented stdout, and a stderr that is drained in the
background so the engine never blocks on it.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


class EngineError(Exception):
    """Base class for engine-side failures."""


class SpawnError(EngineError):
    """The engine executable could not be located or launched."""


class WriteError(EngineError):
    """A command could not be delivered because the engine is gone."""


class EngineProcess:
    def __init__(self, proc: asyncio.subprocess.Process, executable: str):
        self.proc = proc
        self.executable = executable
        self._closed = False
        self._stderr_task = asyncio.create_task(self._drain_stderr())

    # ─── Lifecycle ──────────────────────────────────────────────────────────

    @classmethod
    async def start(cls, executable: str, *args: str) -> "EngineProcess":
        """Spawn the engine. Raises SpawnError, never retries."""
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.warning(f"❌ Engine not launchable: {executable} ({e})")
            raise SpawnError(f"{executable}: {e.strerror or e}") from e
        except OSError as e:
            logger.warning(f"❌ Engine spawn failed: {executable} ({e})")
            raise SpawnError(f"{executable}: {e}") from e

        logger.debug(f"Spawned engine {executable} pid={proc.pid}")
        return cls(proc, executable)

    @property
    def pid(self) -> int:
        return self.proc.pid

    @property
    def returncode(self) -> Optional[int]:
        return self.proc.returncode

    @property
    def closed(self) -> bool:
        return self._closed

    # ─── I/O ────────────────────────────────────────────────────────────────

    def write(self, line: str) -> None:
        """Send one newline-terminated command. Failures are logged, not raised."""
        try:
            stdin = self.proc.stdin
            if stdin is None or stdin.is_closing() or self.proc.returncode is not None:
                raise WriteError("engine has exited")
            stdin.write((line + "\n").encode("utf-8"))
            logger.debug(f"[{self.pid}] >> {line}")
        except (WriteError, BrokenPipeError, ConnectionResetError) as e:
            logger.warning(f"[{self.pid}] dropped {line!r}: {e}")

    async def lines(self) -> AsyncIterator[str]:
        """
        Yield stdout lines in arrival order until the stream closes.
        Lines of any length are supported; stdout is read in chunks.
        """
        stdout = self.proc.stdout
        if stdout is None:
            return
        pending = bytearray()
        while True:
            chunk = await stdout.read(CHUNK_SIZE)
            if not chunk:
                if pending:
                    yield self._decode(pending)
                return
            pending.extend(chunk)
            *complete, rest = pending.split(b"\n")
            pending = bytearray(rest)
            for data in complete:
                yield self._decode(data)

    def _decode(self, data: bytes) -> str:
        line = bytes(data).decode("utf-8", errors="replace").rstrip("\r")
        logger.debug(f"[{self.pid}] << {line[:200]}")
        return line

    async def wait(self) -> int:
        return await self.proc.wait()

    async def _drain_stderr(self) -> None:
        if self.proc.stderr is None:
            return
        while True:
            data = await self.proc.stderr.read(4096)
            if not data:
                return
            logger.debug(
                f"[{self.pid}] stderr: {data.decode('utf-8', errors='replace').rstrip()}"
            )

    # ─── Teardown ───────────────────────────────────────────────────────────

    def kill(self) -> None:
        if self.proc.returncode is not None:
            return
        try:
            self.proc.kill()
        except ProcessLookupError:
            pass

    async def terminate(self, grace: float) -> None:
        """Ask the engine to quit, then kill it if it is still alive after `grace` seconds."""
        if self.proc.returncode is not None:
            return
        self.write("quit")
        try:
            await asyncio.wait_for(self.proc.wait(), timeout=grace)
        except asyncio.TimeoutError:
            logger.warning(f"⏱️ Engine pid={self.pid} ignored quit, killing")
            self.kill()
            await self.proc.wait()

    async def close(self, grace: float = 1.0) -> None:
        """Release the process. Safe to call more than once; only the first call acts."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.terminate(grace)
        finally:
            if self.proc.stdin is not None and not self.proc.stdin.is_closing():
                self.proc.stdin.close()
            self.kill()
            try:
                await asyncio.wait_for(self._stderr_task, timeout=grace)
            except asyncio.TimeoutError:
                pass
            logger.debug(f"Engine pid={self.pid} closed (code={self.proc.returncode})")
