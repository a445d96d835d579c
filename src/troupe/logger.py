"""Colourised console logging for troupe.

``configure_logging`` installs a stderr handler on the ``troupe`` logger
with one of three formatters. ``logging_listeners`` builds a listener set
that reports actor lifecycle events through a logger.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any, Protocol, TYPE_CHECKING

from troupe.config import LoggingConfig
from troupe.listeners import NodeListeners

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.registry import Status


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"


class FormatterFn(Protocol):
    def __call__(
        self,
        *,
        time: datetime,
        level: int,
        location: str,
        message: str,
    ) -> str: ...


_use_colors: bool = sys.stderr.isatty()


def _color(text: str, *codes: str) -> str:
    if not _use_colors:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def _format_level(level: int) -> str:
    if level >= logging.ERROR:
        return _color("[ERROR]", Colors.RED, Colors.BOLD)
    if level >= logging.WARNING:
        return _color("[WARN]", Colors.YELLOW, Colors.BOLD)
    if level >= logging.INFO:
        return _color("[INFO]", Colors.CYAN)
    return _color("[DEBUG]", Colors.MAGENTA)


class formatters:
    @staticmethod
    def verbose(*, time: datetime, level: int, location: str, message: str) -> str:
        time_str = _color(time.strftime("%H:%M:%S.%f")[:-3], Colors.DIM)
        loc = _color(location, Colors.BLUE)
        if level >= logging.ERROR:
            message = _color(message, Colors.RED)
        elif level >= logging.WARNING:
            message = _color(message, Colors.YELLOW)
        return f"{time_str} {_format_level(level)} {loc} {message}"

    @staticmethod
    def compact(*, time: datetime, level: int, location: str, message: str) -> str:
        del location
        time_str = _color(time.strftime("%H:%M:%S"), Colors.DIM)
        return f"{time_str} {_format_level(level)} {message}"

    @staticmethod
    def minimal(*, time: datetime, level: int, location: str, message: str) -> str:
        del time, location
        return f"{_format_level(level)} {message}"


class TroupeFormatter(logging.Formatter):
    def __init__(self, fn: FormatterFn = formatters.verbose) -> None:
        super().__init__()
        self._fn = fn

    def format(self, record: logging.LogRecord) -> str:
        text = self._fn(
            time=datetime.fromtimestamp(record.created),
            level=record.levelno,
            location=f"{record.name}:{record.funcName}:{record.lineno}",
            message=record.getMessage(),
        )
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


_handler: logging.Handler | None = None


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Install a console handler on the ``troupe`` logger.

    Calling it again replaces the handler installed by the previous call.

    Parameters
    ----------
    config : LoggingConfig | None
        Level, colour and format settings. Defaults to ``LoggingConfig()``.

    Examples
    --------
    >>> from troupe.config import LoggingConfig
    >>> configure_logging(LoggingConfig(level="DEBUG", format="compact"))
    <Logger troupe (DEBUG)>
    """
    global _handler, _use_colors
    config = config or LoggingConfig()

    if config.colors is not None:
        _use_colors = config.colors

    logger = logging.getLogger("troupe")
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(TroupeFormatter(getattr(formatters, config.format)))
    logger.addHandler(_handler)
    logger.setLevel(config.level.upper())
    return logger


def logging_listeners(logger: logging.Logger, level: int = logging.DEBUG) -> NodeListeners:
    """Build a listener set that logs every lifecycle event.

    Handler failures and dead letters are reported by the node itself,
    so only the four lifecycle notifications plus stops are covered here.

    Examples
    --------
    >>> import logging
    >>> from troupe import Node
    >>> node = Node(listeners=[logging_listeners(logging.getLogger("bank"))])
    """

    def addr(address: ActorAddress) -> str:
        return _color(address, Colors.BOLD, Colors.BLUE)

    def on_spawned(address: ActorAddress) -> None:
        logger.log(level, "New actor spawned at address %s.", addr(address))

    def on_state_changed(address: ActorAddress, current: Any, previous: Any) -> None:
        logger.log(
            level,
            "Actor at address %s changed state from %r to %r.",
            addr(address),
            previous,
            current,
        )

    def on_status_changed(address: ActorAddress, status: Status) -> None:
        logger.log(
            level,
            "Actor at address %s is now %s.",
            addr(address),
            _color(status.value, Colors.BOLD, Colors.YELLOW),
        )

    def on_message_sent(message: Any, address: ActorAddress) -> None:
        logger.log(level, "Message %r was sent to actor at address %s.", message, addr(address))

    def on_stopped(address: ActorAddress) -> None:
        logger.log(level, "Actor at address %s stopped.", addr(address))

    return NodeListeners(
        on_actor_spawned=on_spawned,
        on_actor_state_changed=on_state_changed,
        on_actor_status_changed=on_status_changed,
        on_message_sent=on_message_sent,
        on_actor_stopped=on_stopped,
    )
