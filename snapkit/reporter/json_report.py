"""JSON report output."""

from __future__ import annotations

import json
import time
from pathlib import Path

from snapkit.models.snapshot import MatchResult


def build_report(test_name: str, results: list[MatchResult]) -> dict:
    return {
        "test_name": test_name,
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "total": len(results),
        "passed": sum(1 for r in results if r.passed),
        "failed": sum(1 for r in results if not r.passed),
        "recorded": sum(1 for r in results if r.recorded),
        "results": [r.model_dump() for r in results],
    }


def generate_json_report(test_name: str, results: list[MatchResult], output_path: Path) -> None:
    """Write a machine-readable JSON report."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(build_report(test_name, results), f, indent=2, default=str)
