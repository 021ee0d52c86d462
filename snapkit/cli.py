"""CLI entry point for the snapshot harness."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from snapkit.baselines.comparator import BaselineComparator
from snapkit.browser.launcher import open_browser
from snapkit.browser.page_subject import PageSubjectFactory, scroll_accessor_for
from snapkit.executor.runner import SnapshotMismatchError, SnapshotRecordedError, SnapshotRunner
from snapkit.models.config import HarnessConfig
from snapkit.models.device import PRESETS
from snapkit.models.snapshot import MatchResult, SnapshotRequest
from snapkit.models.type_size import MINIMAL_SIZES, STANDARD_SIZES, TypeSize, label_of, parse_type_size
from snapkit.reporter.json_report import generate_json_report

console = Console()

DEFAULT_CONFIG = "snapkit.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(path: str) -> HarnessConfig:
    """Load the config file, falling back to defaults when the file is absent."""
    try:
        return HarnessConfig.load(path)
    except FileNotFoundError:
        if path != DEFAULT_CONFIG:
            console.print(f"[red]Config file not found: {path}[/red]")
            console.print("Run 'snapkit init' to create a default config.")
            sys.exit(1)
        return HarnessConfig()


def _type_size(ctx, param, value):
    try:
        if isinstance(value, tuple):
            return tuple(parse_type_size(v) for v in value)
        return parse_type_size(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression snapshots across devices, color schemes and type sizes"""
    setup_logging(verbose)


@cli.command()
@click.argument("source")
@click.option("--name", "-n", default="Snapshot", help="Test name used in snapshot identifiers")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
@click.option("--device", "-d", "devices", multiple=True, help="Device preset (repeatable)")
@click.option("--type-size", default="large", callback=_type_size, help="Type size used for naming")
@click.option("--docc-size", "docc_sizes", multiple=True, callback=_type_size,
              help="Type size marked as a documentation variant (repeatable)")
@click.option("--scroll", is_flag=True, help="Snapshot every page of the document scroll")
@click.option("--scroll-selector", default=None, help="CSS selector of the scroll container to page through")
@click.option("--window", is_flag=True, help="Mount the page in a tall host window before capture")
@click.option("--record", is_flag=True, help="Overwrite the reference images")
@click.option("--bit-exact/--no-bit-exact", default=None,
              help="Whether the renderer gives identical pixels on every GPU")
@click.option("--report", "report_path", default=None, help="Write a JSON report to this path")
def capture(
    source: str,
    name: str,
    config: str,
    devices: tuple[str, ...],
    type_size: TypeSize,
    docc_sizes: tuple[TypeSize, ...],
    scroll: bool,
    scroll_selector: Optional[str],
    window: bool,
    record: bool,
    bit_exact: Optional[bool],
    report_path: Optional[str],
) -> None:
    """Snapshot SOURCE (a URL or an HTML file) and compare it with its references."""
    cfg = _load_config(config)
    overrides: dict = {}
    if devices:
        overrides["devices"] = list(devices)
    if record:
        overrides["record"] = True
    if bit_exact is not None:
        overrides["bit_exact_backend"] = bit_exact
    try:
        cfg = HarnessConfig(**{**cfg.model_dump(), **overrides})
    except ValueError as e:
        raise click.BadParameter(str(e)) from None

    path = Path(source)
    if path.exists():
        source = path.resolve().as_uri()

    accessor = None
    if scroll or scroll_selector:
        accessor = scroll_accessor_for(scroll_selector)

    try:
        results = asyncio.run(_capture(cfg, source, name, type_size, docc_sizes, accessor, window))
    except (SnapshotMismatchError, SnapshotRecordedError) as e:
        results = e.results
        _print_results(results)
        _write_report(report_path, name, results)
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    _print_results(results)
    _write_report(report_path, name, results)


async def _capture(
    cfg: HarnessConfig,
    source: str,
    name: str,
    type_size: TypeSize,
    docc_sizes: tuple[TypeSize, ...],
    accessor,
    window: bool,
) -> list[MatchResult]:
    runner = SnapshotRunner(BaselineComparator.from_config(cfg), cfg)
    async with open_browser(headless=cfg.headless) as browser:
        request = SnapshotRequest(
            subject_factory=PageSubjectFactory(browser, source, animations=runner.animations),
            test_name=name,
            scroll_accessor=accessor,
            devices=cfg.device_configs(),
            type_size=type_size,
            docc_sizes=frozenset(docc_sizes),
            mount_in_window=window,
        )
        return await runner.assert_snapshots(request)


def _print_results(results: list[MatchResult]) -> None:
    table = Table(title="Snapshots")
    table.add_column("Identifier", style="bold")
    table.add_column("#", justify="right")
    table.add_column("Result")
    table.add_column("Details")
    for r in results:
        if r.recorded:
            status = "[yellow]recorded[/yellow]"
        elif r.passed:
            status = "[green]match[/green]"
        else:
            status = "[red]mismatch[/red]"
        table.add_row(r.identifier, str(r.index), status, r.message)
    console.print(table)


def _write_report(report_path: Optional[str], name: str, results: list[MatchResult]) -> None:
    if report_path:
        generate_json_report(name, results, Path(report_path))
        console.print(f"  JSON report: [blue]{report_path}[/blue]")


@cli.command()
def devices() -> None:
    """List the builtin device presets."""
    table = Table(title="Device presets")
    table.add_column("Key", style="bold")
    table.add_column("Name")
    table.add_column("Size")
    table.add_column("Scale")
    table.add_column("Scheme")
    for key, device in PRESETS.items():
        size = f"{device.width}x{device.height}" if device.size else "flexible"
        table.add_row(key, device.name, size, f"{device.scale:g}x", device.traits.resolved_color_scheme)
    console.print(table)


@cli.command()
def sizes() -> None:
    """List type sizes and the curated test matrices."""
    table = Table(title="Type sizes")
    table.add_column("Value", style="bold")
    table.add_column("Label")
    table.add_column("Standard index")
    table.add_column("Minimal")
    for size in TypeSize:
        index = str(STANDARD_SIZES.index(size)) if size in STANDARD_SIZES else ""
        table.add_row(size.value, label_of(size), index, "yes" if size in MINIMAL_SIZES else "")
    console.print(table)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def init(config: str) -> None:
    """Create a default config file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config} already exists. Overwrite?"):
            return
    HarnessConfig().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print("  [blue]snapkit capture https://example.com --name Home[/blue]")


if __name__ == "__main__":
    cli()
