"""Configuration model for the snapshot harness."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from snapkit.models.device import DeviceConfig, get_preset

RECORD_ENV_VAR = "SNAPKIT_RECORD"

# Tolerance used when the rendering backend can differ across GPUs
NON_BIT_EXACT_PERCEPTUAL_PRECISION = 0.8


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


class HarnessConfig(BaseModel):
    # Recording
    record: bool = False
    record_missing: bool = True
    fail_on_mismatch: bool = True
    fail_on_record: bool = False

    # Matching
    precision: float = Field(default=1.0, ge=0.0, le=1.0)
    perceptual_precision: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    bit_exact_backend: bool = True

    # Settle delays (seconds)
    render_delay: float = Field(default=0.1, ge=0.0)
    window_delay: float = Field(default=0.5, ge=0.0)
    snapshot_delay: float = Field(default=0.1, ge=0.0)

    # Host window used when mounting subjects
    window_default_width: int = 375
    window_height: int = 10000  # tall enough to lay out lazily rendered content

    # Storage
    baselines_dir: str = "__snapshots__"
    failures_dir: str = "__snapshots__/failures"

    # Device presets by key, see snapkit.models.device.PRESETS
    devices: list[str] = Field(default_factory=lambda: ["canvas", "canvas-dark"])

    # Browser backend
    headless: bool = True

    @field_validator("record", mode="before")
    @classmethod
    def resolve_env_record(cls, v):
        if isinstance(v, str) and v == "env":
            return _env_flag(RECORD_ENV_VAR)
        return v

    @field_validator("devices")
    @classmethod
    def check_device_keys(cls, v: list[str]) -> list[str]:
        for key in v:
            try:
                get_preset(key)
            except KeyError as e:
                raise ValueError(str(e.args[0])) from None
        return v

    def model_post_init(self, __context) -> None:
        if _env_flag(RECORD_ENV_VAR):
            self.record = True

    @property
    def resolved_perceptual_precision(self) -> float:
        if self.perceptual_precision is not None:
            return self.perceptual_precision
        return 1.0 if self.bit_exact_backend else NON_BIT_EXACT_PERCEPTUAL_PRECISION

    def device_configs(self) -> list[DeviceConfig]:
        return [get_preset(key) for key in self.devices]

    @classmethod
    def load(cls, path: str | Path) -> "HarnessConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
