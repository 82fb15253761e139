"""Persist and load fixture analysis profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Tuple

from fixturestats.config import DEFAULT_WINDOW_SIZES, StatFieldConfig, iter_field_configs
from fixturestats.models import ReferenceFixture


@dataclass
class AnalysisProfile:
    window_sizes: Tuple[int, ...] = DEFAULT_WINDOW_SIZES
    thresholds: Dict[str, List[float]] = field(default_factory=dict)
    require_completed: bool = True
    exclude_non_representative: bool = True
    reference_fixtures: List[ReferenceFixture] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.window_sizes = tuple(int(size) for size in self.window_sizes)
        if not self.window_sizes or any(size < 0 for size in self.window_sizes):
            raise ValueError(f"window sizes must be non-negative and non-empty, got {self.window_sizes!r}")

    def field_configs(self) -> List[StatFieldConfig]:
        """Configured statistic fields with any per-field threshold overrides applied."""

        configs: List[StatFieldConfig] = []
        for config in iter_field_configs():
            override = self.thresholds.get(config.name)
            if override is not None:
                config = replace(config, thresholds=tuple(float(value) for value in override))
            configs.append(config)
        return configs

    @classmethod
    def load(cls, path: Path) -> "AnalysisProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            window_sizes=tuple(data.get("window_sizes", DEFAULT_WINDOW_SIZES)),
            thresholds={name: list(values) for name, values in data.get("thresholds", {}).items()},
            require_completed=bool(data.get("require_completed", True)),
            exclude_non_representative=bool(data.get("exclude_non_representative", True)),
            reference_fixtures=[
                ReferenceFixture.model_validate(item) for item in data.get("reference_fixtures", [])
            ],
        )

    def save(self, path: Path) -> None:
        payload = {
            "window_sizes": list(self.window_sizes),
            "thresholds": self.thresholds,
            "require_completed": self.require_completed,
            "exclude_non_representative": self.exclude_non_representative,
            "reference_fixtures": [fixture.model_dump() for fixture in self.reference_fixtures],
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
