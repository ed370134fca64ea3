"""Rich rendering of snapshots for the CLI."""

from __future__ import annotations

from typing import Any

from rich.table import Table

from tornsentinel.gym.calculator import GymSessionResult
from tornsentinel.gym.gyms import Gym, gym_by_id
from tornsentinel.services.torn.models import (
    ActiveGym,
    BankRates,
    BattleStats,
    CityBankDetails,
    EducationCourses,
    FactionSnapshot,
    GymModifier,
    NetworthSnapshot,
    RankedWarsSnapshot,
    ResourceSnapshot,
    UserSnapshot,
)
from tornsentinel.shared.formatting import (
    TENOR_LABELS,
    format_currency,
    format_number,
    format_time_remaining,
    tenor_from_time_left,
)


def summarize(value: Any) -> str:
    """One-line human summary of a canonical snapshot."""
    if isinstance(value, UserSnapshot):
        parts = [f"{value.name} [{value.player_id}]"]
        if value.level is not None:
            parts.append(f"Lv {value.level}")
        if value.energy is not None:
            parts.append(f"E {value.energy.current}/{value.energy.maximum}")
        if value.happy is not None:
            parts.append(f"H {value.happy.current}/{value.happy.maximum}")
        if value.status is not None:
            parts.append(value.status.state)
        if value.travel is not None and value.travel.time_left:
            parts.append(f"{value.travel.destination} in {format_time_remaining(value.travel.time_left)}")
        return " · ".join(parts)
    if isinstance(value, NetworthSnapshot):
        summary = f"Total {format_currency(value.total)}"
        if value.bank is not None:
            summary += f" · Bank {format_currency(value.bank.amount)}"
            if value.bank.time_left:
                summary += f" ({format_time_remaining(value.bank.time_left)})"
        return summary
    if isinstance(value, CityBankDetails):
        tenor = tenor_from_time_left(value.time_left)
        return (
            f"{format_currency(value.amount)} · {TENOR_LABELS.get(tenor, tenor)}"
            f" · {format_time_remaining(value.time_left)}"
        )
    if isinstance(value, BankRates):
        return " · ".join(f"{tenor} {rate:g}%" for tenor, rate in value.rates.items())
    if isinstance(value, BattleStats):
        return (
            f"STR {format_number(value.strength)} · DEF {format_number(value.defense)}"
            f" · SPD {format_number(value.speed)} · DEX {format_number(value.dexterity)}"
        )
    if isinstance(value, ActiveGym):
        gym = gym_by_id(value.gym_id)
        return gym.name if gym else f"Gym #{value.gym_id}"
    if isinstance(value, GymModifier):
        return f"x{value.multiplier():.4f} from {len(value.bonuses)} perk(s)"
    if isinstance(value, FactionSnapshot):
        tag = f"[{value.tag}] " if value.tag else ""
        capacity = f"/{value.capacity}" if value.capacity else ""
        return f"{tag}{value.name} · {len(value.members)}{capacity} members"
    if isinstance(value, RankedWarsSnapshot):
        war = value.latest
        if war is None:
            return "No ranked wars"
        scores = " vs ".join(f"{f.name} {format_number(f.score)}" for f in war.factions)
        return f"{scores} · lead {format_number(war.lead)}/{format_number(war.target)}"
    if isinstance(value, EducationCourses):
        return f"{len(value.courses)} courses"
    return type(value).__name__


def snapshot_table(snapshot: ResourceSnapshot, request_count: int | None = None) -> Table:
    title = "Torn Sentinel"
    if request_count is not None:
        title += f" · {request_count} req/min"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Resource", style="cyan")
    table.add_column("Status")
    table.add_column("Summary")

    for key, value in snapshot.values.items():
        if value is not None:
            table.add_row(key.value, "[green]ok[/green]", summarize(value))
        else:
            error = snapshot.failures.get(key)
            reason = error.code.value if error is not None else "unavailable"
            table.add_row(key.value, "[red]missing[/red]", reason)
    return table


def gym_table(gym: Gym, stat: str, result: GymSessionResult) -> Table:
    table = Table(title=f"{gym.name} · {stat}", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Trains", format_number(result.actions_performed))
    table.add_row("Total gain", f"{result.total_gain:,.2f}")
    table.add_row("Final stat", f"{result.final_stat:,.2f}")
    table.add_row("Final happiness", f"{result.final_happiness:,.0f}")
    table.add_row("Gain per energy", f"{result.avg_gain_per_energy:,.4f}")
    return table


__all__ = ["gym_table", "snapshot_table", "summarize"]
