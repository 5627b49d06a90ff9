"""Command line harness driving the RealFlight link control loop."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List

from rf_bridge.core.config import DEFAULT_PROFILE, ProfileError, load_profiles, resolve_profile
from rf_bridge.core.controls import ControlInput
from rf_bridge.core.session import ControlSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rf-bridge", description="RealFlight link control loop test"
    )
    parser.add_argument("host", nargs="?", help="Simulator address (overrides profile)")
    parser.add_argument("port", nargs="?", type=int, help="Simulator port (overrides profile)")
    parser.add_argument("--config", help="Path to config.yaml overriding defaults")
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE,
        help="Link profile defined in config.yaml",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=0,
        help="Stop after this many cycles (0 runs until interrupted)",
    )
    parser.add_argument(
        "--throttle-step",
        type=float,
        default=0.03,
        help="Throttle increase per cycle until full throttle",
    )
    parser.add_argument("--pool-size", type=int, help="Override profile pool size")
    parser.add_argument("--timeout-ms", type=int, help="Override exchange timeout")
    parser.add_argument(
        "--jsonl",
        action="store_true",
        help="Emit one JSON line of telemetry per successful cycle",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Reset the aircraft after the controller is injected",
    )
    parser.add_argument(
        "--restore",
        action="store_true",
        help="Hand control back to the simulator's controller on exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def install_signal_handlers(stop: threading.Event) -> None:
    def _handler(signum, _frame) -> None:
        print(f"\nInterrupt signal ({signum}) received. Shutting down...")
        stop.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def run_loop(
    session: ControlSession,
    inputs: ControlInput,
    stop: threading.Event,
    *,
    cycles: int = 0,
    throttle_step: float = 0.03,
    jsonl: bool = False,
    reset: bool = False,
) -> int:
    """Drive *session* until *stop* is set or *cycles* have run.

    Returns the number of successful exchanges.
    """

    announced = False
    count = 0
    while not stop.is_set() and (cycles <= 0 or count < cycles):
        was_active = session.active
        ok = session.update(inputs)
        count += 1
        if reset and session.active and not was_active:
            session.reset_aircraft()
        if ok and not announced:
            print("[SUCCESS] Connected and received first response!")
            announced = True
        if ok and jsonl:
            payload = {"cycle": count, "throttle": inputs.throttle}
            payload.update(session.telemetry.to_dict())
            print(json.dumps(payload, ensure_ascii=False))
        if inputs.throttle < 1.0:
            inputs.throttle = min(1.0, inputs.throttle + throttle_step)
    return session.stats.ok


def _print_summary(session: ControlSession) -> None:
    state = session.telemetry
    stats = session.stats
    print(" ".join(f"{key}={value}" for key, value in stats.to_dict().items()))
    print(f"  Position X: {state.position_x_m} m")
    print(f"  Position Y: {state.position_y_m} m")
    print(f"  Altitude:   {state.altitude_agl_m} m")
    print(f"  Airspeed:   {state.airspeed_mps} m/s")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        profiles = load_profiles(Path(args.config) if args.config else None)
        config = resolve_profile(args.profile, profiles).with_overrides(
            host=args.host,
            port=args.port,
            pool_size=args.pool_size,
            exchange_timeout_ms=args.timeout_ms,
        )
    except ProfileError as exc:
        parser.error(str(exc))

    stop = threading.Event()
    install_signal_handlers(stop)

    inputs = ControlInput()
    print(f"Connecting to: {config.host}:{config.port}")
    with ControlSession.from_config(config) as session:
        successes = run_loop(
            session,
            inputs,
            stop,
            cycles=args.cycles,
            throttle_step=args.throttle_step,
            jsonl=args.jsonl,
            reset=args.reset,
        )
        if args.restore and session.active:
            session.release()
        _print_summary(session)
    return 0 if successes else 1


if __name__ == "__main__":
    sys.exit(main())
