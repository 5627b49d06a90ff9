"""Control input value object and its mapping onto the 12 RC channels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

CHANNEL_COUNT = 12
CHANNEL_CENTER = 0.5


class ControlLike(Protocol):
    """Attributes read from a control input on every cycle."""

    aileron: float
    elevator: float
    throttle: float
    rudder: float
    flaps: float
    gear: float


@dataclass
class ControlInput:
    """Stick, throttle and switch positions, each nominally in ``[0, 1]``.

    The defaults are the neutral start used by the harness: centered sticks,
    idle throttle, flaps up and gear down.
    """

    aileron: float = 0.5
    elevator: float = 0.5
    throttle: float = 0.0
    rudder: float = 0.5
    flaps: float = 0.0
    gear: float = 0.0


def build_channel_vector(inputs: ControlLike) -> List[float]:
    """Return the 12 channel values sent to the simulator for *inputs*.

    Channel order is positional on the wire: aileron, elevator, throttle,
    rudder, flaps, gear, then six unused channels held at center.
    """

    channels = [CHANNEL_CENTER] * CHANNEL_COUNT
    channels[0] = float(inputs.aileron)
    channels[1] = float(inputs.elevator)
    channels[2] = float(inputs.throttle)
    channels[3] = float(inputs.rudder)
    channels[4] = float(inputs.flaps)
    channels[5] = float(inputs.gear)
    return channels
