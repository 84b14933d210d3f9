"""
Command-line interface for ArmSim.

Provides commands for solving inverse kinematics, running the headless
simulation loop, and inspecting arm profiles.
"""

import math
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from armsim import __version__
from armsim.core.config import ConfigManager, SimulationConfig
from armsim.core.exceptions import ArmSimError, UnreachableTargetError
from armsim.core.logging import configure_logging
from armsim.motion.kinematics import GeometrySolver, JointAngles
from armsim.simulation.controller import MotionController

console = Console()


def _load_profile(config_dir: Optional[Path], profile: Optional[str]) -> SimulationConfig:
    """Resolve --profile against the config directory; defaults when not given."""
    if profile is None:
        return SimulationConfig()
    if config_dir is None:
        raise click.UsageError("--profile requires --config-dir")
    return ConfigManager(config_dir).get_arm(profile)


def _fmt_point(point: tuple[float, float, float]) -> str:
    return "(" + ", ".join(f"{v:.3f}" for v in point) + ")"


def _angles_table(title: str, angles: JointAngles) -> Table:
    table = Table(title=title)
    table.add_column("Joint", style="cyan")
    table.add_column("Radians", justify="right")
    table.add_column("Degrees", justify="right")
    for name, value in (
        ("base", angles.base),
        ("shoulder", angles.shoulder),
        ("elbow", angles.elbow),
    ):
        table.add_row(name, f"{value:.4f}", f"{math.degrees(value):.2f}")
    return table


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory (contains arms/*.yaml)",
)
@click.option("--log-level", default="WARNING", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
@click.pass_context
def main(
    ctx: click.Context, config_dir: Optional[Path], log_level: str, json_logs: bool
) -> None:
    """ArmSim - 3-DOF robotic arm motion-and-control simulator."""
    configure_logging(level=log_level, json_output=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


# =============================================================================
# Kinematics Commands
# =============================================================================


@main.command("solve")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.argument("z", type=float)
@click.option("--profile", "-p", default=None, help="Arm profile name")
@click.pass_context
def solve(ctx: click.Context, x: float, y: float, z: float, profile: Optional[str]) -> None:
    """Solve joint angles for target X Y Z."""
    try:
        config = _load_profile(ctx.obj["config_dir"], profile)
        angles = GeometrySolver(config.arm).solve((x, y, z))
    except UnreachableTargetError as e:
        console.print(f"[yellow]⚠[/yellow] Unreachable: {e}")
        raise SystemExit(2)
    except ArmSimError as e:
        console.print(f"[red]✗[/red] Failed to solve: {e}")
        raise SystemExit(1)

    console.print(_angles_table(f"IK solution for {_fmt_point((x, y, z))}", angles))


# =============================================================================
# Simulation Commands
# =============================================================================


@main.command("run")
@click.option("--ticks", "-n", default=600, show_default=True, type=click.IntRange(min=1))
@click.option("--fps", default=60.0, show_default=True, type=click.FloatRange(min=0, min_open=True))
@click.option("--auto", "auto", is_flag=True, help="Start the pick-and-place sequence")
@click.option("--profile", "-p", default=None, help="Arm profile name")
@click.option("--samples", default=5, show_default=True, help="Telemetry samples to show")
@click.pass_context
def run(
    ctx: click.Context,
    ticks: int,
    fps: float,
    auto: bool,
    profile: Optional[str],
    samples: int,
) -> None:
    """Run the simulation loop headless and print the final state."""
    try:
        config = _load_profile(ctx.obj["config_dir"], profile)
        controller = MotionController(config)
        if auto:
            controller.start_auto_sequence()
        controller.run(ticks, fps=fps)
    except ArmSimError as e:
        console.print(f"[red]✗[/red] Simulation failed: {e}")
        raise SystemExit(1)

    status = controller.status()
    console.print(f"[green]✓[/green] Ran {ticks} ticks at {fps:g} Hz ({config.name})")

    table = Table(title="Controller State")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Mode", status.mode_label)
    table.add_row("Target", _fmt_point(status.target))
    table.add_row("Reachable", "✓" if status.reachable else "✗")
    table.add_row("End effector", _fmt_point(status.end_effector))
    table.add_row("Gripping", "✓" if status.gripping else "-")
    table.add_row("Holding", status.attached_entity_id or "-")
    console.print(table)

    console.print(_angles_table("Actual Angles", status.actual_angles))

    entities_table = Table(title="Entities")
    entities_table.add_column("ID", style="cyan")
    entities_table.add_column("Position")
    for entity_id, position in controller.entities.positions().items():
        entities_table.add_row(entity_id, _fmt_point(position))
    console.print(entities_table)

    if status.telemetry and samples > 0:
        telemetry_table = Table(title="Telemetry")
        telemetry_table.add_column("Tick", justify="right")
        telemetry_table.add_column("Velocity (rad/s)", justify="right")
        telemetry_table.add_column("Load", justify="right")
        for sample in status.telemetry[-samples:]:
            telemetry_table.add_row(
                str(sample.tick), f"{sample.velocity:.4f}", f"{sample.load:.4f}"
            )
        console.print(telemetry_table)


# =============================================================================
# Configuration Commands
# =============================================================================


@main.group()
def config() -> None:
    """Arm profile commands."""
    pass


def _manager(ctx: click.Context) -> ConfigManager:
    config_dir = ctx.obj["config_dir"]
    if config_dir is None:
        raise click.UsageError("--config-dir is required for config commands")
    return ConfigManager(config_dir)


@config.command("list-arms")
@click.pass_context
def config_list_arms(ctx: click.Context) -> None:
    """List available arm profiles."""
    try:
        manager = _manager(ctx)
        arms = manager.list_arms()

        if not arms:
            console.print("[yellow]No arm profiles found.[/yellow]")
            return

        table = Table(title="Available Arms")
        table.add_column("Name", style="cyan")
        table.add_column("Links (L1/L2/L3)")
        table.add_column("Entities", justify="right")

        for name in arms:
            arm = manager.get_arm(name)
            table.add_row(
                name,
                f"{arm.arm.base_height:g}/{arm.arm.upper_arm:g}/{arm.arm.forearm:g}",
                str(len(arm.entities)),
            )

        console.print(table)

    except ArmSimError as e:
        console.print(f"[red]✗[/red] Failed to list arms: {e}")
        raise SystemExit(1)


@config.command("show")
@click.argument("name")
@click.pass_context
def config_show(ctx: click.Context, name: str) -> None:
    """Show every setting of an arm profile."""
    try:
        data = _manager(ctx).describe(name)
    except ArmSimError as e:
        console.print(f"[red]✗[/red] Failed to load arm profile: {e}")
        raise SystemExit(1)

    table = Table(title=f"Arm Profile: {name}")
    table.add_column("Section", style="cyan")
    table.add_column("Setting")
    table.add_column("Value")
    for section, values in data.items():
        if isinstance(values, dict):
            for key, value in values.items():
                table.add_row(section, key, str(value))
        elif isinstance(values, list):
            for item in values:
                table.add_row(section, "", str(item))
        else:
            table.add_row(section, "", str(values))
    console.print(table)


if __name__ == "__main__":
    main()
