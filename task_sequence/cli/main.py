"""CLI entrypoint for plan validation, forecasting and live tracking."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from task_sequence.core import TrackingEngine, forecast_plan
from task_sequence.io import ConfigError, ConfigLoader
from task_sequence.model import WaitStatus


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _write_jsonl(path: str, rows: list[dict[str, Any]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _write_json(path: str, payload: dict[str, Any]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        spec = ConfigLoader().validate(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    print(f"[OK] config validation passed, events={len(spec.events)}")
    return 0


def cmd_estimate(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1
    if args.max_polls <= 0:
        print("[ERROR] --max-polls must be > 0")
        return 1
    if args.assume_confirmed_after is not None and args.assume_confirmed_after < 0:
        print("[ERROR] --assume-confirmed-after must be >= 0")
        return 1

    try:
        rows = forecast_plan(
            spec,
            assume_confirmed_after=args.assume_confirmed_after,
            max_polls=args.max_polls,
        )
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        return 1

    out = args.out or "artifacts/forecast.jsonl"
    _write_jsonl(out, [row.to_dict() for row in rows])
    feasible = bool(rows) and rows[-1].status == WaitStatus.CONFIRMED
    if not feasible:
        last = rows[-1] if rows else None
        reason = f"{last.event_id}: {last.status.value}" if last else "no estimate"
        print(f"[WARN] plan infeasible ({reason}), forecast={out}")
        return 2
    print(f"[OK] forecast completed, estimates={len(rows)}, forecast={out}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1
    if args.until is not None and args.until <= 0:
        print("[ERROR] --until must be > 0")
        return 1

    engine = TrackingEngine()
    try:
        engine.build(spec)
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        return 1
    engine.run(until=args.until)

    records = [record.to_dict() for record in engine.records]
    metrics = engine.metric_report()
    records_out = args.records_out or "artifacts/records.jsonl"
    metrics_out = args.metrics_out or "artifacts/metrics.json"
    _write_jsonl(records_out, records)
    _write_json(metrics_out, metrics)

    print(
        f"[OK] tracking completed, records={len(records)}, now={engine.now:.3f}, "
        f"confirmed={metrics['events_confirmed']}/{metrics['events_total']}, "
        f"metrics={metrics_out}"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task-sequence", description="Task sequence event estimation CLI")
    parser.add_argument("--log-level", default="warning", help="logging level (debug, info, warning, error)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="validate plan config file")
    validate_parser.add_argument("-c", "--config", required=True, help="path to plan YAML/JSON")
    validate_parser.set_defaults(func=cmd_validate)

    estimate_parser = subparsers.add_parser("estimate", help="forecast a plan offline")
    estimate_parser.add_argument("-c", "--config", required=True, help="path to plan YAML/JSON")
    estimate_parser.add_argument(
        "--assume-confirmed-after",
        type=int,
        default=None,
        help="assume confirmation after this many unconfirmed estimates per event",
    )
    estimate_parser.add_argument("--max-polls", type=int, default=100, help="estimate limit per event")
    estimate_parser.add_argument("--out", default=None, help="path to write JSONL forecast rows")
    estimate_parser.set_defaults(func=cmd_estimate)

    run_parser = subparsers.add_parser("run", help="track a plan with scripted confirmations")
    run_parser.add_argument("-c", "--config", required=True, help="path to plan YAML/JSON")
    run_parser.add_argument("--until", type=float, default=None, help="override sim duration")
    run_parser.add_argument("--records-out", default=None, help="path to write JSONL records")
    run_parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    run_parser.set_defaults(func=cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
