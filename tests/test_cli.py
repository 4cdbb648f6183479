from __future__ import annotations

import json
from pathlib import Path

import yaml

from task_sequence.cli.main import main


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def test_cli_validate_ok() -> None:
    code = main(["validate", "-c", str(EXAMPLES / "wait_for_confirmation.yaml")])
    assert code == 0


def test_cli_validate_unknown_plugin(tmp_path: Path, capsys) -> None:
    payload = yaml.safe_load((EXAMPLES / "wait_for_confirmation.yaml").read_text(encoding="utf-8"))
    payload["confirmation"]["source"] = "carrier_pigeon"
    config = tmp_path / "plan.yaml"
    config.write_text(yaml.safe_dump(payload), encoding="utf-8")

    code = main(["validate", "-c", str(config)])

    assert code == 1
    assert "unknown confirmation source" in capsys.readouterr().out


def test_cli_validate_missing_file(tmp_path: Path) -> None:
    assert main(["validate", "-c", str(tmp_path / "missing.yaml")]) == 1


def test_cli_run_outputs(tmp_path: Path) -> None:
    records_out = tmp_path / "records.jsonl"
    metrics_out = tmp_path / "metrics.json"

    code = main(
        [
            "run",
            "-c",
            str(EXAMPLES / "wait_for_confirmation.yaml"),
            "--records-out",
            str(records_out),
            "--metrics-out",
            str(metrics_out),
        ]
    )

    assert code == 0
    lines = records_out.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["status"] == "confirmed"
    metrics = json.loads(metrics_out.read_text(encoding="utf-8"))
    assert metrics["events_confirmed"] == 2


def test_cli_run_rejects_bad_until() -> None:
    code = main(["run", "-c", str(EXAMPLES / "wait_for_confirmation.yaml"), "--until", "0"])
    assert code == 1


def test_cli_estimate_feasible_and_infeasible(tmp_path: Path) -> None:
    out = tmp_path / "forecast.jsonl"
    config = str(EXAMPLES / "fixed_interval_timeout.yaml")

    infeasible = main(["estimate", "-c", config, "--out", str(out)])
    rows = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert infeasible == 2
    assert rows[-1]["status"] == "timed_out"

    feasible = main(["--log-level", "debug", "estimate", "-c", config, "--assume-confirmed-after", "1", "--out", str(out)])
    rows = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert feasible == 0
    assert rows[-1]["status"] == "confirmed"


def test_cli_estimate_rejects_bad_arguments() -> None:
    config = str(EXAMPLES / "fixed_interval_timeout.yaml")
    assert main(["estimate", "-c", config, "--max-polls", "0"]) == 1
    assert main(["estimate", "-c", config, "--assume-confirmed-after", "-2"]) == 1


def test_cli_validate_rejects_scripted_confirmations_for_offline_source(tmp_path: Path, capsys) -> None:
    payload = yaml.safe_load((EXAMPLES / "wait_for_confirmation.yaml").read_text(encoding="utf-8"))
    payload["confirmation"] = {"source": "fixed_interval", "params": {"confirm_after": 2}}
    config = tmp_path / "plan.yaml"
    config.write_text(yaml.safe_dump(payload), encoding="utf-8")

    assert main(["validate", "-c", str(config)]) == 1
    assert "need a messaging source" in capsys.readouterr().out
