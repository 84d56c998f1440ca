"""
Display and rendering helpers for the Dispatch Simulator CLI.

Handles theming, tables and progress displays. Functions named ``*_table``
or ``*_panel`` return renderables (usable with rich.live.Live); ``show_*``
functions print directly to the shared console.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..state.schema import (
    PILLARS,
    ActiveMission,
    Character,
    CompletedMission,
    Difficulty,
    Mission,
    MissionCompletion,
    MissionPhase,
    StatPool,
)
from ..systems.geometry import combine_stats
from ..systems.phases import calculate_mission_progress
from ..systems.progression import level_progress, xp_to_next_level
from ..systems.validation import DeploymentCheck

# Shared console instance
console = Console()

THEME = {
    "primary": "steel_blue",
    "secondary": "grey70",
    "warning": "dark_goldenrod",
    "danger": "dark_red",
    "success": "green4",
    "accent": "cyan",
    "dim": "dim",
}

DIFFICULTY_COLORS = {
    Difficulty.EASY: "green",
    Difficulty.MEDIUM: "yellow",
    Difficulty.HARD: "dark_orange",
    Difficulty.EXTREME: "red",
}

PHASE_COLORS = {
    MissionPhase.TRAVEL_OUTBOUND: "steel_blue",
    MissionPhase.ACTIVE: "dark_goldenrod",
    MissionPhase.TRAVEL_RETURN: "steel_blue",
    MissionPhase.RESTING: "grey70",
    MissionPhase.COMPLETED: "green4",
}


def bar(fraction: float, width: int = 20) -> str:
    """Text progress bar for a fraction in [0, 1]."""
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(round(fraction * width))
    return "█" * filled + "░" * (width - filled)


def success_color(probability: float) -> str:
    if probability >= 0.8:
        return THEME["success"]
    if probability >= 0.5:
        return THEME["warning"]
    if probability >= 0.3:
        return "dark_orange"
    return THEME["danger"]


def format_time(ms: float) -> str:
    seconds = max(ms, 0) / 1000
    if seconds >= 60:
        return f"{int(seconds // 60)}m {int(seconds % 60):02d}s"
    return f"{seconds:.1f}s"


# -----------------------------------------------------------------------------
# Stats
# -----------------------------------------------------------------------------

def stats_inline(stats: StatPool) -> str:
    return " ".join(f"{p.value[:3]} {stats[p]}" for p in PILLARS)


def stat_comparison_table(team: StatPool, requirements: StatPool, max_value: int = 10) -> Table:
    """Side-by-side bars standing in for the radar overlay."""
    table = Table(show_header=True, box=None, padding=(0, 1))
    table.add_column("Pillar", style=THEME["secondary"])
    table.add_column("Team")
    table.add_column("Required")

    for pillar in PILLARS:
        have, need = team[pillar], requirements[pillar]
        color = THEME["success"] if have >= need else THEME["danger"]
        table.add_row(
            pillar.value,
            f"[{color}]{bar(have / max_value, 10)} {have}[/{color}]",
            f"[{THEME['dim']}]{bar(need / max_value, 10)} {need}[/{THEME['dim']}]",
        )
    return table


# -----------------------------------------------------------------------------
# Roster and missions
# -----------------------------------------------------------------------------

def roster_table(
    agents: list[Character],
    is_available: Callable[[str], bool] | None = None,
) -> Table:
    table = Table(title=f"[bold {THEME['primary']}]Roster[/bold {THEME['primary']}]")
    table.add_column("ID", style=THEME["dim"])
    table.add_column("Name", style="bold")
    table.add_column("Lvl", justify="right")
    table.add_column("XP")
    table.add_column("Stats")
    table.add_column("Pts", justify="right")
    table.add_column("Flight")
    table.add_column("Rest", justify="right")
    table.add_column("Status")

    for agent in agents:
        flight = "licensed" if agent.flies_licensed else ("unlicensed" if agent.can_fly else "-")
        points = f"[{THEME['accent']}]{agent.available_points}[/{THEME['accent']}]" if agent.available_points else "0"
        available = is_available(agent.id) if is_available else True
        status = (
            f"[{THEME['success']}]ready[/{THEME['success']}]"
            if available else f"[{THEME['warning']}]deployed[/{THEME['warning']}]"
        )
        table.add_row(
            agent.id,
            agent.name,
            str(agent.level),
            f"{bar(level_progress(agent), 8)} {xp_to_next_level(agent.level, agent.experience)} to go",
            stats_inline(agent.stats),
            points,
            flight,
            f"{agent.rest_time:g}",
            status,
        )
    return table


def missions_table(missions: list[Mission], completed: Callable[[str], bool] | None = None) -> Table:
    table = Table(title=f"[bold {THEME['primary']}]Missions[/bold {THEME['primary']}]")
    table.add_column("ID", style=THEME["dim"])
    table.add_column("Name", style="bold")
    table.add_column("Difficulty")
    table.add_column("Requirements")
    table.add_column("Max", justify="right")
    table.add_column("Travel", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("XP", justify="right")

    for mission in sorted(missions, key=lambda m: m.difficulty.rank):
        color = DIFFICULTY_COLORS[mission.difficulty]
        name = mission.name
        if completed and completed(mission.id):
            name = f"[{THEME['dim']}]{name} (done)[/{THEME['dim']}]"
        table.add_row(
            mission.id,
            name,
            f"[{color}]{mission.difficulty.value}[/{color}]",
            stats_inline(mission.requirements),
            str(mission.max_agents),
            f"{mission.travel_time:g}",
            f"{mission.mission_duration:g}",
            str(mission.reward_experience),
        )
    return table


def deployment_panel(mission: Mission, team: list[Character], check: DeploymentCheck) -> Panel:
    """Preview of a deployment: rules, odds, timing and stat overlay."""
    lines = Text()
    for req in check.requirements:
        mark, color = ("✓", THEME["success"]) if req.met else ("✗", THEME["danger"])
        lines.append(f"{mark} {req.label}", style=color)
        if req.detail:
            lines.append(f"  {req.detail}", style=THEME["dim"])
        lines.append("\n")

    odds = check.success_probability
    lines.append("\nSuccess probability: ")
    lines.append(f"{odds * 100:.0f}%", style=f"bold {success_color(odds)}")
    lines.append("\n")

    timing = check.time_breakdown
    lines.append(
        f"Travel {timing.travel_time_outbound:g} + mission {timing.mission_duration:g} "
        f"+ return {timing.travel_time_return:g} + rest {timing.rest_time:g} "
        f"= {timing.total_time:g} units\n",
        style=THEME["secondary"],
    )
    if timing.has_fast_travelers:
        fast = ", ".join(f"{t.name} {t.travel_time:g}" for t in timing.agent_travel_times)
        lines.append(f"Travel speeds vary: {fast}\n", style=THEME["dim"])
    if timing.has_quick_recovery:
        lines.append(
            f"Rest times vary: {timing.shortest_rest_time:g} to {timing.longest_rest_time:g}\n",
            style=THEME["dim"],
        )

    team_stats = combine_stats(*[a.stats for a in team])
    return Panel(
        Group(lines, stat_comparison_table(team_stats, mission.requirements)),
        title=f"[bold]{mission.name}[/bold]",
        subtitle=", ".join(a.name for a in team) or "no agents",
        border_style=THEME["primary"] if check.feasible else THEME["danger"],
    )


# -----------------------------------------------------------------------------
# Deployed missions
# -----------------------------------------------------------------------------

def active_missions_table(missions: list[ActiveMission], now: float) -> Table:
    table = Table(title=f"[bold {THEME['primary']}]Active Missions[/bold {THEME['primary']}]")
    table.add_column("Mission", style="bold")
    table.add_column("Team")
    table.add_column("Phase")
    table.add_column("Phase progress")
    table.add_column("Total")
    table.add_column("Remaining", justify="right")

    for active in missions:
        progress = calculate_mission_progress(active, now)
        color = PHASE_COLORS[progress.phase]
        table.add_row(
            active.mission.name,
            ", ".join(a.name for a in active.agents),
            f"[{color}]{progress.phase.label}[/{color}]",
            bar(progress.phase_progress, 12),
            f"{bar(progress.total_progress, 12)} {progress.total_progress * 100:.0f}%",
            format_time(progress.remaining_ms),
        )
    return table


def completed_missions_table(missions: list[CompletedMission]) -> Table:
    table = Table(title=f"[bold {THEME['success']}]Just Completed[/bold {THEME['success']}]")
    table.add_column("Mission", style="bold")
    table.add_column("Team")
    table.add_column("XP", justify="right")

    for done in missions:
        table.add_row(
            done.mission.name,
            ", ".join(a.name for a in done.agents),
            f"+{done.mission.reward_experience}",
        )
    return table


def dispatch_view(active: list[ActiveMission], completed: list[CompletedMission], now: float) -> Group:
    parts = []
    if active:
        parts.append(active_missions_table(active, now))
    if completed:
        parts.append(completed_missions_table(completed))
    if not parts:
        parts.append(Text("No missions in flight.", style=THEME["dim"]))
    return Group(*parts)


def history_table(entries: list[tuple[MissionCompletion, Mission]], agent_names: dict[str, str]) -> Table:
    table = Table(title=f"[bold {THEME['primary']}]Mission History[/bold {THEME['primary']}]")
    table.add_column("Completed", style=THEME["dim"])
    table.add_column("Mission", style="bold")
    table.add_column("Difficulty")
    table.add_column("Agents")
    table.add_column("XP", justify="right")

    for completion, mission in entries:
        when = datetime.fromtimestamp(completion.completed_at / 1000).strftime("%Y-%m-%d %H:%M")
        color = DIFFICULTY_COLORS[mission.difficulty]
        table.add_row(
            when,
            mission.name,
            f"[{color}]{mission.difficulty.value}[/{color}]",
            ", ".join(agent_names.get(a, a) for a in completion.agents),
            f"+{completion.experience_gained}",
        )
    return table


# -----------------------------------------------------------------------------
# Messages
# -----------------------------------------------------------------------------

def show_error(message: str, title: str = "Error") -> None:
    console.print(Panel(message, title=title, border_style=THEME["danger"]))


def show_info(message: str) -> None:
    console.print(f"[{THEME['secondary']}]{message}[/{THEME['secondary']}]")
