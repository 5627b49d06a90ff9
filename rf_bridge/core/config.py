"""Link profiles for the RealFlight simulator.

``config.yaml`` holds named profiles; each one resolves to a frozen
:class:`LinkConfig` carrying the endpoint, pool sizing and reply timeouts that
:meth:`rf_bridge.core.session.ControlSession.from_config` consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

from ruamel.yaml import YAML


class ProfileError(RuntimeError):
    """Raised when the configuration file or requested profile is invalid."""


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"
DEFAULT_PROFILE = "realflight"

_yaml = YAML(typ="safe")


def load_profiles(path: Path | None = None) -> Dict[str, Mapping[str, object]]:
    """Return the profile mapping stored in ``config.yaml``.

    Parameters
    ----------
    path:
        Optional path to a YAML configuration file. When omitted the built-in
        ``config.yaml`` packaged alongside :mod:`rf_bridge` is used.
    """

    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise ProfileError(f"configuration file not found: {config_path}")
    data = _yaml.load(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "profiles" not in data:
        raise ProfileError("config file must contain a 'profiles' mapping")
    profiles = data["profiles"]
    if not isinstance(profiles, dict):
        raise ProfileError("'profiles' must be a mapping")
    normalized: Dict[str, Mapping[str, object]] = {}
    for name, profile in profiles.items():
        if not isinstance(profile, Mapping):
            raise ProfileError(f"profile '{name}' must be a mapping")
        normalized[name] = profile
    return normalized


@dataclass(frozen=True)
class LinkConfig:
    """Connection and timing settings for one simulator endpoint."""

    name: str = DEFAULT_PROFILE
    host: str = "127.0.0.1"
    port: int = 18083
    pool_size: int = 3
    socket_timeout: float = 1.0
    refill_interval: float = 0.05
    handshake_timeout_ms: int = 1000
    exchange_timeout_ms: int = 1000
    reply_capacity: int = 10000

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, object]) -> "LinkConfig":
        required = ("host", "port")
        missing = [key for key in required if key not in data]
        if missing:
            raise ProfileError(f"profile '{name}' is missing required keys: {', '.join(missing)}")
        defaults = cls()
        try:
            config = cls(
                name=name,
                host=str(data["host"]),
                port=int(data["port"]),
                pool_size=int(data.get("pool_size", defaults.pool_size)),
                socket_timeout=float(data.get("socket_timeout", defaults.socket_timeout)),
                refill_interval=float(data.get("refill_interval", defaults.refill_interval)),
                handshake_timeout_ms=int(
                    data.get("handshake_timeout_ms", defaults.handshake_timeout_ms)
                ),
                exchange_timeout_ms=int(
                    data.get("exchange_timeout_ms", defaults.exchange_timeout_ms)
                ),
                reply_capacity=int(data.get("reply_capacity", defaults.reply_capacity)),
            )
        except (TypeError, ValueError) as exc:
            raise ProfileError(f"profile '{name}' has an invalid value: {exc}") from exc
        config.validate()
        return config

    def validate(self) -> None:
        if not 0 < self.port < 65536:
            raise ProfileError(f"profile '{self.name}' port out of range: {self.port}")
        if self.pool_size < 0:
            raise ProfileError(f"profile '{self.name}' pool_size cannot be negative")
        if self.socket_timeout <= 0:
            raise ProfileError(f"profile '{self.name}' socket_timeout must be positive")
        if self.refill_interval <= 0:
            raise ProfileError(f"profile '{self.name}' refill_interval must be positive")
        if self.handshake_timeout_ms <= 0:
            raise ProfileError(f"profile '{self.name}' handshake_timeout_ms must be positive")
        if self.exchange_timeout_ms <= 0:
            raise ProfileError(f"profile '{self.name}' exchange_timeout_ms must be positive")
        if self.reply_capacity <= 0:
            raise ProfileError(f"profile '{self.name}' reply_capacity must be positive")

    def with_overrides(self, **overrides: Optional[object]) -> "LinkConfig":
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        updated = replace(self, **values)
        updated.validate()
        return updated


def resolve_profile(name: str, profiles: Mapping[str, Mapping[str, object]]) -> LinkConfig:
    """Resolve *name* from *profiles* and return a :class:`LinkConfig`."""

    if name not in profiles:
        available = ", ".join(sorted(profiles)) or "<none>"
        raise ProfileError(f"unknown profile '{name}'. available: {available}")
    return LinkConfig.from_mapping(name, profiles[name])
