"""TOML-based configuration for troupe nodes.

Provides ``load_config`` / ``discover_config`` for loading ``troupe.toml``
and the frozen dataclasses describing node and logging settings.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from troupe.exceptions import ConfigError


__all__ = [
    "IdGeneratorKind",
    "LogFormat",
    "LoggingConfig",
    "NodeConfig",
    "TroupeConfig",
    "discover_config",
    "load_config",
]


type IdGeneratorKind = Literal["uuid4", "sequential"]
type LogFormat = Literal["verbose", "compact", "minimal"]

_ID_GENERATORS = ("uuid4", "sequential")
_LOG_FORMATS = ("verbose", "compact", "minimal")


@dataclass(frozen=True)
class NodeConfig:
    """Settings for a single node.

    Parameters
    ----------
    name : str
        Logical node name, used in logger names (``troupe.node.<name>``).
    id_generator : IdGeneratorKind
        ``"uuid4"`` for random identifiers, ``"sequential"`` for
        deterministic ``1, 2, 3, ...`` identifiers.
    suppress_dead_letters_on_shutdown : bool
        When ``True``, messages still queued at shutdown are discarded
        without ``on_dead_letter`` notifications.

    Examples
    --------
    >>> NodeConfig(name="bank", id_generator="sequential")
    NodeConfig(name='bank', id_generator='sequential', suppress_dead_letters_on_shutdown=False)
    """

    name: str = "troupe"
    id_generator: IdGeneratorKind = "uuid4"
    suppress_dead_letters_on_shutdown: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    """Console logging settings, applied by ``troupe.logger.configure_logging``.

    Parameters
    ----------
    level : str
        Level name for the ``troupe`` logger (``"DEBUG"``, ``"INFO"``, ...).
    colors : bool | None
        Force ANSI colours on or off. ``None`` enables them on a TTY.
    format : LogFormat
        One of ``"verbose"``, ``"compact"`` or ``"minimal"``.
    lifecycle_events : bool
        Attach the logging listener set to every node built from this
        config, so spawns, sends and transitions are logged.

    Examples
    --------
    >>> LoggingConfig(level="DEBUG", lifecycle_events=True)
    LoggingConfig(level='DEBUG', colors=None, format='verbose', lifecycle_events=True)
    """

    level: str = "INFO"
    colors: bool | None = None
    format: LogFormat = "verbose"
    lifecycle_events: bool = False


@dataclass(frozen=True)
class TroupeConfig:
    """Top-level configuration container.

    Typically created via ``load_config()`` but can be constructed manually.

    Examples
    --------
    >>> TroupeConfig().node.name
    'troupe'
    """

    node: NodeConfig = field(default_factory=NodeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def discover_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``troupe.toml``.

    Parameters
    ----------
    start : Path | None
        Directory to start searching from.

    Returns
    -------
    Path | None
        Path to the discovered config file, or ``None`` if not found.
    """
    current = start or Path.cwd()
    current = current.resolve()
    while True:
        candidate = current / "troupe.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(path: Path | None = None) -> TroupeConfig:
    """Load a ``TroupeConfig`` from a TOML file.

    If *path* is ``None``, auto-discovers ``troupe.toml`` by walking up from
    the current working directory. Returns the default config if no file is
    found.

    Raises
    ------
    FileNotFoundError
        If an explicit *path* is given but does not exist.
    ConfigError
        If a value is outside its allowed set.

    Examples
    --------
    >>> config = load_config(Path("troupe.toml"))
    >>> config.node.name
    'bank'
    """
    if path is None:
        discovered = discover_config()
        if discovered is None:
            return TroupeConfig()
        path = discovered

    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open("rb") as f:
        raw = tomllib.load(f)

    node_raw: dict[str, Any] = raw.get("node", {})
    logging_raw: dict[str, Any] = raw.get("logging", {})

    try:
        node = NodeConfig(**node_raw)
        logging = LoggingConfig(**logging_raw)
    except TypeError as exc:
        msg = f"Invalid option in {path}: {exc}"
        raise ConfigError(msg) from exc

    if node.id_generator not in _ID_GENERATORS:
        msg = f"Unknown id_generator {node.id_generator!r}, expected one of {_ID_GENERATORS}"
        raise ConfigError(msg)
    if logging.format not in _LOG_FORMATS:
        msg = f"Unknown log format {logging.format!r}, expected one of {_LOG_FORMATS}"
        raise ConfigError(msg)

    return TroupeConfig(node=node, logging=logging)
