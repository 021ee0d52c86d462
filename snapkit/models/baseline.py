"""Snapshot baseline registry data structures."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BaselineEntry(BaseModel):
    identifier: str
    index: int  # capture order within the identifier, starting at 1
    width: int  # pixels
    height: int
    scale: float
    image_path: str  # relative path from baselines_dir to the PNG
    captured_at: str  # ISO timestamp
    image_hash: str  # SHA-256 hex digest


class BaselineRegistry(BaseModel):
    last_updated: str = ""
    baselines: dict[str, BaselineEntry] = Field(default_factory=dict)
    # key format: "{identifier}.{index}"
