from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from task_sequence.io import ConfigError, ConfigLoader
from task_sequence.model import PlanSpec


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _base_payload() -> dict[str, Any]:
    return {
        "version": "0.1",
        "constraints": {"drain_battery": True, "threshold_soc": 0.2},
        "ambient_sink": {"name": "constant_rate", "params": {"drain_per_second": 0.001}},
        "confirmation": {"source": "messaging", "params": {}},
        "initial_state": {"time": 0.0, "battery_soc": 0.8},
        "events": [{"id": "e1", "initial_wait_duration": 5, "timeout_duration": 20}],
        "confirmations": [{"event_id": "e1", "at": 3}],
        "sim": {"duration": 50, "seed": 1},
    }


def test_load_examples() -> None:
    loader = ConfigLoader()
    for path in sorted(EXAMPLES.glob("*.yaml")):
        assert isinstance(loader.load(str(path)), PlanSpec)


def test_load_data_defaults() -> None:
    spec = ConfigLoader().load_data(
        {"events": [{"id": "e1", "initial_wait_duration": 1, "timeout_duration": 2}], "sim": {"duration": 5}}
    )

    assert spec.version == "0.1"
    assert spec.confirmation.source == "default"
    assert spec.constraints.drain_battery is True
    assert spec.ambient_sink is None


def test_negative_durations_are_accepted() -> None:
    payload = _base_payload()
    payload["events"][0]["initial_wait_duration"] = -4
    payload["events"][0]["timeout_duration"] = -1

    spec = ConfigLoader().load_data(payload)

    assert spec.events[0].initial_wait_duration == -4


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda p: p.update(version="9.9"), "unsupported config version"),
        (lambda p: p.update(events=[]), "schema validation failed"),
        (lambda p: p["constraints"].update(threshold_soc=1.5), "schema validation failed"),
        (lambda p: p.update(unknown=True), "schema validation failed"),
        (lambda p: p["events"].append(dict(p["events"][0])), "duplicate events.id"),
        (lambda p: p["confirmations"][0].update(event_id="nope"), "unknown event 'nope'"),
        (lambda p: p["initial_state"].update(battery_soc=None), "requires initial_state.battery_soc"),
        (lambda p: p["confirmation"].update(source="fixed_interval"), "need a messaging source"),
        (lambda p: p.pop("confirmation"), "need a messaging source"),
    ],
)
def test_invalid_payloads_rejected(mutate, message: str) -> None:
    payload = _base_payload()
    mutate(payload)

    with pytest.raises(ConfigError, match=message):
        ConfigLoader().load_data(payload)


def test_read_errors(tmp_path: Path) -> None:
    loader = ConfigLoader()
    with pytest.raises(ConfigError, match="not found"):
        loader.load(str(tmp_path / "missing.yaml"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid config syntax"):
        loader.load(str(broken))

    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="root must be object"):
        loader.load(str(listing))


def test_save_roundtrip_yaml_and_json(tmp_path: Path) -> None:
    loader = ConfigLoader()
    spec = loader.load_data(_base_payload())

    yaml_path = tmp_path / "plan.yaml"
    json_path = tmp_path / "plan.json"
    loader.save(spec, str(yaml_path))
    loader.save(spec, str(json_path))

    assert yaml.safe_load(yaml_path.read_text(encoding="utf-8"))["events"][0]["id"] == "e1"
    assert json.loads(json_path.read_text(encoding="utf-8"))["sim"]["seed"] == 1
    assert loader.load(str(yaml_path)) == spec


def test_validate_resolves_plugins(tmp_path: Path) -> None:
    loader = ConfigLoader()
    good = tmp_path / "good.yaml"
    good.write_text(yaml.safe_dump(_base_payload()), encoding="utf-8")
    assert loader.validate(str(good)).events[0].id == "e1"

    payload = _base_payload()
    payload["ambient_sink"]["name"] = "flux_capacitor"
    bad = tmp_path / "bad.yaml"
    bad.write_text(yaml.safe_dump(payload), encoding="utf-8")

    with pytest.raises(ConfigError, match="unknown power sink flux_capacitor"):
        loader.validate(str(bad))
    assert loader.load(str(bad)).ambient_sink.name == "flux_capacitor"


def test_check_plugins_rejects_bad_params() -> None:
    payload = _base_payload()
    payload["confirmations"] = []
    payload["confirmation"] = {"source": "fixed_interval", "params": {"confirm_after": 0}}
    spec = ConfigLoader().load_data(payload)

    with pytest.raises(ConfigError, match="confirm_after"):
        ConfigLoader.check_plugins(spec)
