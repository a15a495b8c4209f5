"""
Exception types raised by the message pipeline.

Only configuration failures abort a message. Delivery and invite resolution
failures are reported through these types by the helpers that own them and
are handled locally, so one message never affects another in flight.
"""

from __future__ import annotations


class WardenError(Exception):
    """Base class for every error raised by Warden."""


class ConfigUnavailable(WardenError):
    """Settings or rule resolution failed; the current message is dropped."""


class StorageUnavailable(ConfigUnavailable):
    """The persisted store could not be read or written."""


class ActionDeliveryFailure(WardenError):
    """A reply, log, delete or channel edit call failed."""

    def __init__(self, action: str, target: int | None, cause: BaseException | None = None) -> None:
        self.action = action
        self.target = target
        self.cause = cause
        super().__init__(f"{action} failed for {target}: {cause}")


class ResolutionFailure(WardenError):
    """An invite code could not be resolved to a guild."""

    def __init__(self, code: str, cause: BaseException | None = None) -> None:
        self.code = code
        self.cause = cause
        super().__init__(f"Could not resolve invite {code!r}: {cause}")
