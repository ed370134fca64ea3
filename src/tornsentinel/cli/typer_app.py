"""
Torn Sentinel Typer CLI Application

Commands:
- snapshot: fetch resources once and print them
- watch: poll resources on an interval through one shared cache
- gym: project gym gains for a training session
"""

from __future__ import annotations

import asyncio
import random
from typing import Annotated, Optional

import typer
from rich.console import Console

from tornsentinel.cli.error_handler import handle_cli_error
from tornsentinel.cli.json_formatter import format_json_output
from tornsentinel.cli.render import gym_table, snapshot_table
from tornsentinel.config import get_config
from tornsentinel.gym.calculator import HappinessLossMode, simulate_session
from tornsentinel.gym.gyms import STATS, gym_by_name
from tornsentinel.services.torn.models import ResourceSnapshot
from tornsentinel.services.torn.orchestrator import GymInputs, ResourceOrchestrator
from tornsentinel.services.torn.resources import ResourceKey
from tornsentinel.shared.constants import CLIDefaults, CLIHelp
from tornsentinel.shared.errors import TornSentinelError, create_validation_error
from tornsentinel.shared.logging import setup_structured_logger

__version__ = CLIDefaults.VERSION

console = Console()

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


@app.callback()
def main(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            help="Show version information and exit.",
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    try:
        settings = get_config()
        setup_structured_logger(
            level=log_level or settings.logging.level,
            log_file=settings.logging.file,
            use_rich_console=settings.logging.console_output,
        )
    except TornSentinelError as e:
        raise typer.Exit(handle_cli_error(e, "main")) from e


ResourceOption = Annotated[
    Optional[list[ResourceKey]],
    typer.Option("--resource", "-r", case_sensitive=False, help=CLIHelp.RESOURCE_OPTION_HELP),
]
JsonOption = Annotated[bool, typer.Option("--json", help=CLIHelp.JSON_OPTION_HELP)]


def _print_snapshot(
    command: str,
    snapshot: ResourceSnapshot,
    request_count: int,
    *,
    json_output: bool,
) -> None:
    if json_output:
        data = {
            "resources": snapshot.values,
            "failures": snapshot.failures,
            "requests_per_minute": request_count,
        }
        typer.echo(format_json_output(success=snapshot.complete, command=command, data=data).decode())
    else:
        console.print(snapshot_table(snapshot, request_count))


@app.command("snapshot", help=CLIHelp.SNAPSHOT_HELP)
def snapshot_command(
    resources: ResourceOption = None,
    json_output: JsonOption = False,
) -> None:
    keys = resources or [ResourceKey.USER_SNAPSHOT]

    async def run() -> tuple[ResourceSnapshot, int]:
        async with ResourceOrchestrator() as orchestrator:
            snapshot = await orchestrator.fetch(keys)
            return snapshot, orchestrator.current_request_rate_count()

    try:
        snapshot, request_count = asyncio.run(run())
    except (TornSentinelError, KeyboardInterrupt) as e:
        raise typer.Exit(handle_cli_error(e, "snapshot", json_output=json_output)) from e

    _print_snapshot("snapshot", snapshot, request_count, json_output=json_output)
    if not snapshot.complete:
        raise typer.Exit(1)


@app.command("watch", help=CLIHelp.WATCH_HELP)
def watch_command(
    resources: ResourceOption = None,
    interval: Annotated[
        float,
        typer.Option("--interval", "-i", min=0.0, help=CLIHelp.INTERVAL_OPTION_HELP),
    ] = CLIDefaults.WATCH_INTERVAL,
    iterations: Annotated[
        int,
        typer.Option("--iterations", "-n", min=0, help=CLIHelp.ITERATIONS_OPTION_HELP),
    ] = CLIDefaults.WATCH_ITERATIONS,
    json_output: JsonOption = False,
) -> None:
    keys = resources or [ResourceKey.USER_SNAPSHOT]

    async def run() -> None:
        async with ResourceOrchestrator() as orchestrator:
            poll = 0
            while iterations == 0 or poll < iterations:
                if poll:
                    await asyncio.sleep(interval)
                snapshot = await orchestrator.fetch(keys)
                _print_snapshot(
                    "watch",
                    snapshot,
                    orchestrator.current_request_rate_count(),
                    json_output=json_output,
                )
                poll += 1

    try:
        asyncio.run(run())
    except (TornSentinelError, KeyboardInterrupt) as e:
        raise typer.Exit(handle_cli_error(e, "watch", json_output=json_output)) from e


@app.command("gym", help=CLIHelp.GYM_HELP)
def gym_command(
    gym_name: Annotated[
        Optional[str],
        typer.Option("--gym", "-g", help="Gym name (default: active gym when --live)."),
    ] = None,
    stat: Annotated[
        Optional[str],
        typer.Option("--stat", "-s", help="Stat to train (default: the gym's best stat)."),
    ] = None,
    stat_value: Annotated[
        Optional[float],
        typer.Option("--stat-value", help="Current value of the trained stat."),
    ] = None,
    happiness: Annotated[Optional[float], typer.Option("--happiness", help="Current happiness.")] = None,
    energy: Annotated[Optional[float], typer.Option("--energy", "-e", help="Energy to spend.")] = None,
    modifier: Annotated[
        Optional[float],
        typer.Option("--modifier", "-m", help="Gym gain modifier (default: 1.0, or perks when --live)."),
    ] = None,
    mode: Annotated[
        HappinessLossMode,
        typer.Option("--mode", case_sensitive=False, help="Happiness loss model."),
    ] = HappinessLossMode.AVERAGE,
    seed: Annotated[Optional[int], typer.Option("--seed", help="Seed for the random mode.")] = None,
    live: Annotated[bool, typer.Option("--live", help="Fill missing inputs from the API.")] = False,
    json_output: JsonOption = False,
) -> None:
    try:
        inputs = asyncio.run(_fetch_gym_inputs()) if live else None
        gym = gym_by_name(gym_name) if gym_name else (inputs.gym if inputs else None)
        if gym is None:
            raise create_validation_error(
                f"Unknown or missing gym: {gym_name!r}",
                operation="gym",
                field="gym",
            )

        stat = (stat or gym.best_factor[0]).lower()
        if stat not in STATS:
            raise create_validation_error(f"Unknown stat: {stat!r}", operation="gym", field="stat")

        if inputs is not None:
            if stat_value is None and inputs.battle_stats is not None:
                stat_value = getattr(inputs.battle_stats, stat)
            if inputs.user is not None:
                if happiness is None and inputs.user.happy is not None:
                    happiness = float(inputs.user.happy.current)
                if energy is None and inputs.user.energy is not None:
                    energy = float(inputs.user.energy.current)
            if modifier is None and inputs.modifier is not None:
                modifier = inputs.modifier.multiplier(stat)

        for name, value in (("stat-value", stat_value), ("happiness", happiness), ("energy", energy)):
            if value is None:
                raise create_validation_error(f"--{name} is required", operation="gym", field=name)

        result = simulate_session(
            stat_value,
            happiness,
            energy,
            gym.energy,
            gym.factor_for(stat),
            modifier if modifier is not None else 1.0,
            mode,
            rng=random.Random(seed) if seed is not None else None,
        )
    except (TornSentinelError, KeyboardInterrupt) as e:
        raise typer.Exit(handle_cli_error(e, "gym", json_output=json_output)) from e

    if json_output:
        data = {"gym": gym.name, "stat": stat, "result": result}
        typer.echo(format_json_output(success=True, command="gym", data=data).decode())
    else:
        console.print(gym_table(gym, stat, result))


async def _fetch_gym_inputs() -> GymInputs:
    async with ResourceOrchestrator() as orchestrator:
        return await orchestrator.fetch_gym_inputs()


if __name__ == "__main__":
    app()
