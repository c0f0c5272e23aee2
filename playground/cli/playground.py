"""
Rendezvous Playground CLI - run the scenarios and narrate what happens.

Usage examples:
    python -m playground.cli.playground doorbell --occupied
    python -m playground.cli.playground burglar --time-unit 0.1
    python -m playground.cli.playground house
    python -m playground.cli.playground apples --json
"""

import argparse
import dataclasses
import sys
import threading

from rendezvous.base.config import PlaygroundConfig, setup_logging, set_config
from rendezvous.errors import RendezvousError
from rendezvous.house.doorbell import ring_and_wait
from rendezvous.house.house import House
from rendezvous.scenarios.burglar import burglar_visit
from rendezvous.scenarios.orchard import BLUE, GREEN, RED, Apple, watch_apples


def _emit(args, report) -> None:
    if args.json:
        print(report.model_dump_json(indent=2))


def run_doorbell(args, cfg: PlaygroundConfig) -> int:
    """Ring once and report whether anyone came to the door."""
    house = House(name="doorbell-house", config=cfg)
    if not args.occupied:
        house.lock()

    resolved = threading.Event()

    def _on_resolved(event):
        print("🚪 Door answered" if event.answered else "🔕 Nobody came to the door")
        resolved.set()

    print("🔔 Ringing the doorbell...")
    report = ring_and_wait(house, on_resolved=_on_resolved, config=cfg)
    print(f"⏱  Wait finished: {report.wait_result.value} after {report.elapsed_seconds:.2f}s")
    resolved.wait()
    _emit(args, report)
    return 0


def run_burglar(args, cfg: PlaygroundConfig) -> int:
    """The burglar checks a house; the owner may or may not be home."""
    house = House(name="victim", config=cfg)
    if not args.occupied:
        house.lock()

    print("\n=== Burglar routine ===\n")
    report = burglar_visit(house, config=cfg)
    if report.broke_in:
        print("🚨 The alarm went off" if report.alarm_triggered else "😱 The burglar got in unnoticed")
    else:
        print("🏃 Someone was home, the burglar left quickly")
    _emit(args, report)
    return 0


def run_house(args, cfg: PlaygroundConfig) -> int:
    """A day in the life: air out, lock up, leave, get burgled."""
    print("\n===MY HOUSE===\n")
    house = House(name="my-house", config=cfg)
    house.open_window()
    house.lock()
    report = burglar_visit(house, config=cfg)
    print(f"🛡  Alarm booted lazily: {house.alarm_booted}, alerts: {house.alarm_alerts}")
    _emit(args, report)
    return 0


def run_apples(args, cfg: PlaygroundConfig) -> int:
    """Watch a few apples fade, then throw them all away."""
    fade = cfg.orchard.fade_seconds
    apples = [
        Apple.picked("Red Apple", RED, fade_seconds=fade),
        Apple.picked("Green Apple", GREEN, fade_seconds=fade),
        Apple.picked("Blue Apple", BLUE, fade_seconds=fade),
    ]
    all_gone = threading.Event()

    def _on_all_discarded():
        print("🍎 all apples have been thrown away")
        all_gone.set()

    report = watch_apples(apples, ticks=args.ticks, on_all_discarded=_on_all_discarded, config=cfg)
    all_gone.wait()
    for name, samples in report.samples.items():
        last = samples[-1].color if samples else None
        print(f"  {name}: {len(samples)} look(s), last color {last}")
    _emit(args, report)
    return 0


def _build_config(args) -> PlaygroundConfig:
    cfg = PlaygroundConfig.from_env()
    overrides = {}
    if args.time_unit is not None:
        overrides["time_unit"] = args.time_unit
    if args.timeout is not None or args.response_delay is not None:
        overrides["doorbell"] = dataclasses.replace(
            cfg.doorbell,
            timeout_units=cfg.doorbell.timeout_units if args.timeout is None else args.timeout,
            response_delay_units=(cfg.doorbell.response_delay_units
                                  if args.response_delay is None else args.response_delay),
        )
    if args.log_level:
        overrides["log"] = dataclasses.replace(cfg.log, level=args.log_level)
    return dataclasses.replace(cfg, **overrides) if overrides else cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rendezvous Playground")
    parser.add_argument("--time-unit", type=float, help="Real seconds per time unit")
    parser.add_argument("--timeout", type=float, help="Doorbell wait, in time units")
    parser.add_argument("--response-delay", type=float, help="Occupant's walk to the door, in time units")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--json", action="store_true", help="Also print the report as JSON")
    subparsers = parser.add_subparsers(dest="command", help="Available scenarios")

    doorbell_parser = subparsers.add_parser("doorbell", help="Ring once and wait")
    doorbell_parser.add_argument("--occupied", action="store_true", help="Someone is home")
    doorbell_parser.set_defaults(func=run_doorbell)

    burglar_parser = subparsers.add_parser("burglar", help="Run the burglar's routine")
    burglar_parser.add_argument("--occupied", action="store_true", help="Someone is home")
    burglar_parser.set_defaults(func=run_burglar)

    house_parser = subparsers.add_parser("house", help="Open a window, lock up, get visited")
    house_parser.set_defaults(func=run_house)

    apples_parser = subparsers.add_parser("apples", help="Watch apples fade on worker threads")
    apples_parser.add_argument("--ticks", type=int, help="Looks per apple")
    apples_parser.set_defaults(func=run_apples)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        cfg = _build_config(args)
    except RendezvousError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    set_config(cfg)
    setup_logging(cfg)
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
