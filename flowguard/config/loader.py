from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from flowguard.config.schema import SuiteConfig


class ConfigLoader:
    """Loads and validates a suite configuration from JSON or a .properties file."""

    @staticmethod
    def load(path: str | Path, overrides: Mapping[str, Any] | None = None) -> SuiteConfig:
        config_path = Path(path)
        if config_path.suffix == ".properties":
            payload: dict[str, Any] = {"environment": ConfigLoader.read_properties(config_path)}
        else:
            with config_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        if overrides:
            environment = dict(payload.get("environment", {}))
            environment.update({key: value for key, value in overrides.items() if value is not None})
            payload["environment"] = environment
        return SuiteConfig.model_validate(payload)

    @staticmethod
    def read_properties(path: str | Path) -> dict[str, str]:
        properties: dict[str, str] = {}
        for raw_line in Path(path).read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line[0] in "#!":
                continue
            separators = [index for index in (line.find("="), line.find(":")) if index > 0]
            if not separators:
                properties[line] = ""
                continue
            split_at = min(separators)
            properties[line[:split_at].strip()] = line[split_at + 1 :].strip()
        return properties
