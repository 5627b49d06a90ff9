"""Control session driving the RealFlight link one cycle at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..io.socket_pool import SocketPool
from .actions import PLACEHOLDER_BODY, Action
from .config import LinkConfig
from .controls import ControlLike, build_channel_vector
from .decoder import TelemetryDecoder
from .errors import LinkError
from .keytable import DecodedState
from .soap import (
    DEFAULT_REPLY_CAPACITY,
    ConnectionSource,
    ProtocolFramer,
    Reply,
    exchange_data_body,
)

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


@dataclass
class ExchangeStats:
    cycles: int = 0
    ok: int = 0
    failed: int = 0
    truncated: int = 0
    handshakes: int = 0

    def to_dict(self) -> dict:
        return {
            "cycles": self.cycles,
            "ok": self.ok,
            "failed": self.failed,
            "truncated": self.truncated,
            "handshakes": self.handshakes,
        }


class ControlSession:
    """Inject the external controller once, then exchange controls for telemetry.

    Every call to :meth:`update` is one control-loop cycle. Transport failures
    are logged and reported as ``False``; the previous telemetry stays in
    :attr:`telemetry` and the next cycle simply tries again.
    """

    def __init__(
        self,
        pool: ConnectionSource,
        *,
        handshake_timeout_ms: int = 1000,
        exchange_timeout_ms: int = 1000,
        reply_capacity: int = DEFAULT_REPLY_CAPACITY,
        decoder: Optional[TelemetryDecoder] = None,
        owns_pool: bool = False,
    ) -> None:
        self._pool = pool
        self._owns_pool = owns_pool
        self._framer = ProtocolFramer(pool, reply_capacity=reply_capacity)
        self._decoder = decoder or TelemetryDecoder()
        self.handshake_timeout_ms = handshake_timeout_ms
        self.exchange_timeout_ms = exchange_timeout_ms
        self.state = SessionState.UNINITIALIZED
        self.telemetry = DecodedState()
        self.stats = ExchangeStats()
        self.last_channels: List[float] = []

    @classmethod
    def from_config(cls, config: LinkConfig) -> "ControlSession":
        """Create a session owning a started :class:`SocketPool` for *config*."""

        pool = SocketPool(
            config.host,
            config.port,
            max_size=config.pool_size,
            timeout=config.socket_timeout,
            refill_interval=config.refill_interval,
        )
        pool.start()
        pool.wait_ready(timeout=0.1)
        log.info("link configured for %s:%d (profile %s)", config.host, config.port, config.name)
        return cls(
            pool,
            handshake_timeout_ms=config.handshake_timeout_ms,
            exchange_timeout_ms=config.exchange_timeout_ms,
            reply_capacity=config.reply_capacity,
            owns_pool=True,
        )

    def __enter__(self) -> "ControlSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def update(self, inputs: ControlLike) -> bool:
        """Run one cycle; returns ``True`` when fresh telemetry was decoded."""

        self.stats.cycles += 1
        if not self.active and not self.handshake():
            self.stats.failed += 1
            return False
        if self.exchange(inputs):
            self.stats.ok += 1
            return True
        self.stats.failed += 1
        return False

    def handshake(self) -> bool:
        try:
            self._framer.request(
                Action.INJECT_CONTROLLER,
                PLACEHOLDER_BODY,
                timeout_ms=self.handshake_timeout_ms,
            )
        except LinkError as exc:
            log.warning("controller injection failed: %s", exc)
            return False
        self.state = SessionState.ACTIVE
        self.stats.handshakes += 1
        log.info("controller interface injected")
        return True

    def exchange(self, inputs: ControlLike) -> bool:
        channels = build_channel_vector(inputs)
        self.last_channels = channels
        try:
            reply = self._framer.request(
                Action.EXCHANGE_DATA,
                exchange_data_body(channels),
                timeout_ms=self.exchange_timeout_ms,
            )
        except LinkError as exc:
            log.warning("data exchange failed: %s", exc)
            return False
        self._apply(reply)
        return True

    def _apply(self, reply: Reply) -> None:
        if reply.truncated:
            self.stats.truncated += 1
            log.debug("decoding truncated reply (%d bytes)", len(reply))
        self._decoder.apply(reply.data, self.telemetry)

    def reset_aircraft(self) -> bool:
        """Ask the simulator to put the aircraft back at its start position."""

        try:
            self._framer.request(
                Action.RESET_AIRCRAFT,
                PLACEHOLDER_BODY,
                timeout_ms=self.handshake_timeout_ms,
            )
        except LinkError as exc:
            log.warning("aircraft reset failed: %s", exc)
            return False
        return True

    def release(self) -> bool:
        """Hand control back to the simulator's own controller device."""

        try:
            self._framer.request(
                Action.RESTORE_CONTROLLER,
                PLACEHOLDER_BODY,
                timeout_ms=self.handshake_timeout_ms,
            )
        except LinkError as exc:
            log.warning("controller restore failed: %s", exc)
            return False
        finally:
            self.state = SessionState.UNINITIALIZED
        log.info("original controller restored")
        return True

    def close(self) -> None:
        """Abort any request in flight; the pool is closed only when the session owns it."""

        self._framer.abort()
        if not self._owns_pool:
            return
        close = getattr(self._pool, "close", None)
        if close is not None:
            close()
