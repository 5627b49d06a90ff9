from pathlib import Path

import pytest

from rf_bridge.core.config import (
    DEFAULT_PROFILE,
    LinkConfig,
    ProfileError,
    load_profiles,
    resolve_profile,
)


def test_default_profile_matches_link_defaults():
    profiles = load_profiles()
    config = resolve_profile(DEFAULT_PROFILE, profiles)
    assert config.host == "127.0.0.1"
    assert config.port == 18083
    assert config.pool_size == 3
    assert config.socket_timeout == pytest.approx(1.0)
    assert config.exchange_timeout_ms == 1000
    assert config.reply_capacity == 10000


def test_overrides_ignore_none():
    config = LinkConfig()
    updated = config.with_overrides(host="10.0.0.2", port=None, pool_size=5)
    assert updated.host == "10.0.0.2"
    assert updated.port == config.port
    assert updated.pool_size == 5
    assert config.with_overrides(host=None) is config


def test_invalid_override_rejected():
    with pytest.raises(ProfileError):
        LinkConfig().with_overrides(port=70000)


def test_unknown_profile_lists_available():
    with pytest.raises(ProfileError, match="realflight"):
        resolve_profile("missing", load_profiles())


def test_missing_file(tmp_path: Path):
    with pytest.raises(ProfileError):
        load_profiles(tmp_path / "nope.yaml")


def test_custom_file_with_partial_profile(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "profiles:\n  bench:\n    host: 10.1.1.5\n    port: 18084\n    pool_size: 1\n",
        encoding="utf-8",
    )
    config = resolve_profile("bench", load_profiles(path))
    assert config.name == "bench"
    assert config.host == "10.1.1.5"
    assert config.port == 18084
    assert config.pool_size == 1
    assert config.handshake_timeout_ms == 1000


def test_profile_missing_required_keys(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("profiles:\n  bench:\n    pool_size: 1\n", encoding="utf-8")
    with pytest.raises(ProfileError, match="host"):
        resolve_profile("bench", load_profiles(path))


def test_profile_with_bad_value(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("profiles:\n  bench:\n    host: h\n    port: abc\n", encoding="utf-8")
    with pytest.raises(ProfileError):
        resolve_profile("bench", load_profiles(path))


def test_file_without_profiles(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("other: 1\n", encoding="utf-8")
    with pytest.raises(ProfileError):
        load_profiles(path)


@pytest.mark.parametrize(
    "key", ["refill_interval", "handshake_timeout_ms", "exchange_timeout_ms"]
)
@pytest.mark.parametrize("value", [0, -1])
def test_non_positive_timing_rejected(tmp_path: Path, key, value):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"profiles:\n  bench:\n    host: h\n    port: 18083\n    {key}: {value}\n",
        encoding="utf-8",
    )
    with pytest.raises(ProfileError, match=key):
        resolve_profile("bench", load_profiles(path))


def test_non_positive_refill_interval_override_rejected():
    with pytest.raises(ProfileError, match="refill_interval"):
        LinkConfig().with_overrides(refill_interval=0.0)
