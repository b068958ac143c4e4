from ucibridge.engine.classifier import LineKind, classify_line
from ucibridge.engine.commands import SearchMode, build_commands, feed_commands
from ucibridge.engine.process import EngineError, EngineProcess, SpawnError, WriteError
from ucibridge.engine.session import EngineSession, SessionState, Settlement

__all__ = [
    "EngineError",
    "EngineProcess",
    "EngineSession",
    "LineKind",
    "SearchMode",
    "SessionState",
    "Settlement",
    "SpawnError",
    "WriteError",
    "build_commands",
    "classify_line",
    "feed_commands",
]
