"""
Loguru based logging, gated by the verbosity of a connected state.

The loader core never passes a state object around, so LOG() looks the
verbosity up from a context variable. The CLI connects its ProgramState
once at startup; library users who never connect a state get no log
output at all.

Usage:
    from vuegister.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)

    LOG("Loading component...", level=1)
    LOG("Extracted 2 sections", level=2)
    LOG("Token 'module' at 1:0", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# State whose verbosity gates LOG(), None when nothing is connected
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <12}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)


def logger_configure() -> int:
    """
    Replace loguru's sinks with the vuegister stderr format.

    Only the CLI calls this; importing vuegister as a library leaves the
    application's sinks alone.

    Returns:
        Id of the added sink
    """
    logger.remove()
    return logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make LOG() follow the verbosity of state.

    Args:
        state: ProgramState, or any object with an int `verbosity`
    """
    _program_state.set(state)


def state_disconnectFromLogger() -> None:
    """Silence LOG() again for the current context"""
    _program_state.set(None)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when none is connected"""
    return getattr(_program_state.get(), 'verbosity', 0)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit message when the connected verbosity reaches level.

    Records are attributed to the caller, not to this function.

    Args:
        message: Text to log
        level: 1 = normal, 2 = verbose (-v), 3 = debug (-vv)
        **kwargs: Passed on to loguru
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
