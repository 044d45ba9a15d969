"""
Command-line interface for planesweep.

Provides commands for slicing mesh files, running YAML jobs and listing the
jobs available in a configuration directory.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from planesweep import __version__
from planesweep.core.config import (
    ConfigManager,
    load_job_config,
    parse_slicing_config,
)
from planesweep.core.exceptions import PlaneSweepError
from planesweep.core.logging import configure_logging
from planesweep.geometry.solid import TrimeshSolid, load_solid
from planesweep.slicing.generators import generate_toolpaths
from planesweep.slicing.toolpath import ToolpathSet

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default="config",
    help="Configuration directory",
)
@click.option("--log-level", default="WARNING", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, config_dir: Path, log_level: str, json_logs: bool) -> None:
    """planesweep - slice solid models into additive or subtractive toolpaths."""
    configure_logging(level=log_level, json_output=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


def _print_summary(toolpath: ToolpathSet, title: str) -> None:
    table = Table(title=title)
    table.add_column("Layer", justify="right", style="cyan")
    table.add_column("Z", justify="right")
    table.add_column("Loops", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Length", justify="right")

    for layer_index, z in enumerate(toolpath.heights):
        segments = toolpath.get_segments_by_layer(layer_index)
        table.add_row(
            str(layer_index),
            f"{z:.4f}",
            str(len(segments)),
            str(sum(len(seg.points) for seg in segments)),
            f"{sum(seg.get_length() for seg in segments):.3f}",
        )

    console.print(table)
    console.print(
        f"[green]✓[/green] {toolpath.process_type}: {toolpath.layer_count} heights, "
        f"{len(toolpath.segments)} segments, total length {toolpath.get_total_length():.3f}"
    )


def _write_output(toolpath: ToolpathSet, output: Optional[Path]) -> None:
    if output is None:
        return
    output.write_text(json.dumps(toolpath.to_dict(), indent=2))
    console.print(f"  Wrote {output}")


@main.command("slice")
@click.argument("model_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--mode",
    "-m",
    type=click.Choice(["additive", "subtractive"]),
    default="additive",
    help="Manufacturing mode",
)
@click.option("--step", "-s", type=float, required=True, help="Layer height or step-down")
@click.option("--min-z", type=float, default=None, help="Lowest height (default: model bottom)")
@click.option("--max-z", type=float, default=None, help="Highest height (default: model top)")
@click.option("--workers", "-w", type=int, default=None, help="Slice heights on N threads")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write toolpaths as JSON")
def slice_model(
    model_path: Path,
    mode: str,
    step: float,
    min_z: Optional[float],
    max_z: Optional[float],
    workers: Optional[int],
    output: Optional[Path],
) -> None:
    """Slice a mesh file."""
    step_key = "layer_height" if mode == "additive" else "step_down"
    try:
        config = parse_slicing_config(
            {"mode": mode, step_key: step, "min_z": min_z, "max_z": max_z}
        )
        toolpath = generate_toolpaths(load_solid(model_path), config, max_workers=workers)
    except PlaneSweepError as e:
        console.print(f"[red]✗[/red] Slicing failed: {e}")
        raise SystemExit(1)

    _print_summary(toolpath, f"{model_path.name} ({mode})")
    _write_output(toolpath, output)


@main.command("run")
@click.argument("job_path", type=click.Path(exists=True, path_type=Path))
@click.option("--workers", "-w", type=int, default=None, help="Slice heights on N threads")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write toolpaths as JSON")
def run_job(job_path: Path, workers: Optional[int], output: Optional[Path]) -> None:
    """Run a YAML slicing job."""
    try:
        job = load_job_config(job_path)
        if not job.model:
            console.print(f"[red]✗[/red] Job '{job.name}' does not name a model")
            raise SystemExit(1)
        toolpath = generate_toolpaths(load_solid(job.model), job.slicing, max_workers=workers)
    except PlaneSweepError as e:
        console.print(f"[red]✗[/red] Job failed: {e}")
        raise SystemExit(1)

    _print_summary(toolpath, f"Job: {job.name}")
    _write_output(toolpath, output)


@main.command("demo")
def demo() -> None:
    """Slice a 10 mm cube in both modes."""
    cube = TrimeshSolid.cube((0.0, 0.0, 0.0), (10.0, 10.0, 10.0))

    additive = generate_toolpaths(
        cube,
        parse_slicing_config({"mode": "additive", "layer_height": 1.0, "min_z": 0.0, "max_z": 10.0}),
    )
    _print_summary(additive, "Additive: layer_height=1.0")

    subtractive = generate_toolpaths(
        cube,
        parse_slicing_config({"mode": "subtractive", "step_down": 2.0, "min_z": 0.0, "max_z": 10.0}),
    )
    _print_summary(subtractive, "Subtractive: step_down=2.0")


@main.group()
def jobs() -> None:
    """Job configuration commands."""
    pass


@jobs.command("list")
@click.pass_context
def jobs_list(ctx: click.Context) -> None:
    """List job configurations in the config directory."""
    try:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        names = config_mgr.list_jobs()

        if not names:
            console.print("[yellow]No job configurations found.[/yellow]")
            return

        table = Table(title="Available Jobs")
        table.add_column("Name", style="cyan")
        table.add_column("Mode")
        table.add_column("Step", justify="right")
        table.add_column("Model")

        for name in names:
            job = config_mgr.get_job(name)
            table.add_row(name, job.slicing.mode, str(job.slicing.step), job.model or "-")

        console.print(table)

    except PlaneSweepError as e:
        console.print(f"[red]✗[/red] Failed to list jobs: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
