"""Telemetry extraction from raw ``ExchangeData`` replies."""

from __future__ import annotations

import re
from typing import Dict, Iterable

from .keytable import KEYTABLE, DecodedState, KeyTableEntry

# Leading numeric prefix, so "12.5m" still yields 12.5.
_NUMBER_PREFIX = re.compile(rb"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_value(raw: bytes) -> float:
    """Convert the text between a tag pair into a float.

    ``true``/``false`` map to 1.0/0.0; anything that does not start with a
    number decodes to 0.0.
    """

    if raw == b"true":
        return 1.0
    if raw == b"false":
        return 0.0
    try:
        return float(raw)
    except ValueError:
        pass
    match = _NUMBER_PREFIX.match(raw)
    if not match:
        return 0.0
    return float(match.group(0))


def extract_value(reply: bytes, tag: str) -> float:
    """Return the value of the first ``<tag>…</tag>`` in *reply*, or 0.0."""

    open_tag = f"<{tag}>".encode("ascii")
    close_tag = f"</{tag}>".encode("ascii")
    start = reply.find(open_tag)
    if start < 0:
        return 0.0
    start += len(open_tag)
    end = reply.find(close_tag, start)
    if end < 0:
        return 0.0
    return parse_value(reply[start:end])


def decode_reply(
    reply: bytes, keytable: Iterable[KeyTableEntry] = KEYTABLE
) -> Dict[str, float]:
    return {entry.slot: extract_value(reply, entry.tag) for entry in keytable}


class TelemetryDecoder:
    """Scan replies tag by tag and write the results into a :class:`DecodedState`.

    This is a substring scan, not an XML parse: it tolerates partial documents
    but always matches the first occurrence of a tag in the whole buffer.
    """

    def __init__(self, keytable: Iterable[KeyTableEntry] = KEYTABLE) -> None:
        self._keytable = tuple(keytable)

    def apply(self, reply: bytes, state: DecodedState) -> DecodedState:
        for slot, value in decode_reply(reply, self._keytable).items():
            setattr(state, slot, value)
        return state
