"""Exception types raised by troupe.

Runtime operations (``send``, ``spawn``, handler dispatch) never raise to
their callers; these exceptions signal programming or configuration errors.
"""

from __future__ import annotations


class TroupeError(Exception):
    """Base class for every troupe error."""


class AddressCollisionError(TroupeError):
    """Raised when an address is registered twice in the same node.

    The id generator is trusted to be collision-free, so this indicates a
    broken generator rather than a recoverable condition.
    """

    def __init__(self, address: str) -> None:
        super().__init__(f"Actor address already registered: {address}")
        self.address = address


class ConfigError(TroupeError):
    """Raised when a configuration value cannot be applied."""
