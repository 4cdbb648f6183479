"""Plan configuration loading and validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import jsonschema
import yaml
from pydantic import ValidationError

from task_sequence.battery import create_power_sink
from task_sequence.confirmation import create_confirmation_source
from task_sequence.model import PlanSpec

from .schema import PLAN_SCHEMA


class ConfigError(Exception):
    """Configuration loading/validation error."""


def _dump_yaml(payload: dict[str, Any]) -> str:
    return yaml.safe_dump(payload, sort_keys=False)


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


_YAML_SUFFIXES = {".yaml", ".yml"}


class ConfigLoader:
    """Load plan files (YAML or JSON) into ``PlanSpec``.

    Checks run in three layers: the version tag, the JSON schema, then the
    pydantic models. ``validate`` additionally resolves the plugin names the
    plan refers to, which loading alone does not.
    """

    SUPPORTED_VERSION = "0.1"
    MAX_REPORTED_SCHEMA_ERRORS = 8

    def load(self, path: str) -> PlanSpec:
        return self.load_data(self._read(path))

    def load_data(self, payload: dict[str, Any]) -> PlanSpec:
        data = {**payload, "version": self._check_version(payload)}
        self._check_schema(data)
        try:
            return PlanSpec.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def validate(self, path: str) -> PlanSpec:
        spec = self.load(path)
        self.check_plugins(spec)
        return spec

    @staticmethod
    def check_plugins(spec: PlanSpec) -> None:
        """Instantiate the configured sink and confirmation source once."""
        try:
            if spec.ambient_sink is not None:
                create_power_sink(spec.ambient_sink.name, spec.ambient_sink.params)
            create_confirmation_source(spec.confirmation.source, spec.confirmation.params)
        except (TypeError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc

    def save(self, spec: PlanSpec, path: str) -> None:
        output_path = Path(path)
        dump: Callable[[dict[str, Any]], str] = (
            _dump_yaml if output_path.suffix.lower() in _YAML_SUFFIXES else _dump_json
        )
        output_path.write_text(dump(spec.model_dump(mode="json", exclude_none=True)), encoding="utf-8")

    @staticmethod
    def _read(path: str) -> dict[str, Any]:
        input_path = Path(path)
        if not input_path.is_file():
            raise ConfigError(f"config file not found: {path}")

        text = input_path.read_text(encoding="utf-8")
        parse = yaml.safe_load if input_path.suffix.lower() in _YAML_SUFFIXES else json.loads
        try:
            data = parse(text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"invalid config syntax: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("config root must be object")
        return data

    def _check_version(self, payload: dict[str, Any]) -> str:
        version = str(payload.get("version", self.SUPPORTED_VERSION))
        if version != self.SUPPORTED_VERSION:
            raise ConfigError(f"unsupported config version '{version}'")
        return version

    def _check_schema(self, payload: dict[str, Any]) -> None:
        validator = jsonschema.Draft202012Validator(PLAN_SCHEMA)
        errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path])
        if not errors:
            return
        lines = [
            f"{'.'.join(str(part) for part in err.path) or '<root>'}: {err.message}"
            for err in errors[: self.MAX_REPORTED_SCHEMA_ERRORS]
        ]
        raise ConfigError("schema validation failed: " + " | ".join(lines))
