from enum import Enum
from typing import Iterable, Tuple

from ucibridge.engine.process import EngineProcess

ANALYZE_MOVETIME_MS = 800
PROBE_DEPTH = 1


class SearchMode(str, Enum):
    ANALYZE = "analyze"
    PROBE = "probe"


def build_commands(
    fen: str,
    mode: SearchMode,
    syzygy_path: str,
    movetime_ms: int = ANALYZE_MOVETIME_MS,
    depth: int = PROBE_DEPTH,
) -> Tuple[str, ...]:
    """
    The fixed UCI sequence for one session: handshake, tablebase path,
    position, search. Analyze searches for a fixed time; probe runs a minimal
    depth so the tablebase lines show up early.
    """
    if mode is SearchMode.ANALYZE:
        go = f"go movetime {movetime_ms}"
    else:
        go = f"go depth {depth}"

    return (
        "uci",
        f"setoption name SyzygyPath value {syzygy_path}",
        f"position fen {fen}",
        go,
    )


def feed_commands(process: EngineProcess, commands: Iterable[str]) -> None:
    for command in commands:
        process.write(command)
