"""Exceptions raised by the link transport."""

from __future__ import annotations


class LinkError(Exception):
    """Base class for RealFlight link errors."""


class ConnectError(LinkError):
    """Raised when a connection to the simulator cannot be established."""


class SendError(LinkError):
    """Raised when a request cannot be written to its connection."""


class ReplyTimeoutError(LinkError):
    """Raised when no reply becomes readable within the timeout."""


class EmptyReplyError(LinkError):
    """Raised when the peer closes the connection without sending anything."""
