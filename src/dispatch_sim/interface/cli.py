"""
Dispatch Simulator command-line interface.

Usage:
    dispatch-sim roster
    dispatch-sim missions [--difficulty Hard] [--all]
    dispatch-sim odds mission-002 agent-001 agent-005
    dispatch-sim deploy mission-001 agent-002 [--instant]
    dispatch-sim allocate agent-005 Intellect [--remove]
    dispatch-sim history
    dispatch-sim reset [--agents] [--progress]
    dispatch-sim config [KEY VALUE]
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from pathlib import Path

from rich.live import Live

from ..state.clock import ManualClock, SystemClock
from ..state.errors import DeploymentError, DispatchError
from ..state.event_bus import EventType, GameEvent
from ..state.manager import DispatchManager
from ..state.schema import Difficulty, Pillar
from .config import DEFAULT_CONFIG, load_config, set_option
from .renderer import (
    THEME,
    completed_missions_table,
    console,
    deployment_panel,
    dispatch_view,
    history_table,
    missions_table,
    roster_table,
    show_error,
    show_info,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def resolve_agent_id(manager: DispatchManager, ref: str) -> str:
    """Accept an agent id or a (case-insensitive) name."""
    for agent in manager.agents():
        if agent.id == ref or agent.name.lower() == ref.lower():
            return agent.id
    return ref


def resolve_mission_id(manager: DispatchManager, ref: str) -> str:
    for mission in manager.catalog.missions():
        if mission.id == ref or mission.name.lower() == ref.lower():
            return mission.id
    return ref


def build_manager(args: argparse.Namespace, instant: bool = False) -> DispatchManager:
    config = load_config(args.data_dir)
    time_scale = getattr(args, "time_scale", None) or config["time_scale_ms"]
    clock = ManualClock(start=SystemClock().now()) if instant else SystemClock()
    return DispatchManager(
        store=args.data_dir,
        clock=clock,
        time_scale=time_scale,
        completion_display_ms=config["completion_display_ms"],
    )


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_roster(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    console.print(roster_table(manager.agents(), manager.is_agent_available))
    return 0


def cmd_missions(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    if args.difficulty:
        try:
            Difficulty(args.difficulty)
        except ValueError:
            show_error(
                f"Unknown difficulty: {args.difficulty}. Choose from {', '.join(d.value for d in Difficulty)}."
            )
            return 1

    if args.all:
        missions = manager.catalog.missions()
        if args.difficulty:
            missions = manager.catalog.missions_by_difficulty(args.difficulty)
    else:
        missions = manager.available_missions(args.difficulty)

    if not missions:
        show_info("No missions available.")
        return 0

    console.print(missions_table(missions, manager.progress.is_completed))
    return 0


def cmd_odds(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    mission_id = resolve_mission_id(manager, args.mission)
    agent_ids = [resolve_agent_id(manager, a) for a in args.agents]

    check = manager.check_deployment(mission_id, agent_ids)
    mission = manager.get_mission(mission_id)
    team = [manager.get_agent(a) for a in agent_ids]
    console.print(deployment_panel(mission, team, check))
    return 0


def cmd_deploy(args: argparse.Namespace) -> int:
    config = load_config(args.data_dir)
    manager = build_manager(args, instant=args.instant)
    mission_id = resolve_mission_id(manager, args.mission)
    agent_ids = [resolve_agent_id(manager, a) for a in args.agents]

    level_ups: list[GameEvent] = []
    manager.bus.on(EventType.AGENT_LEVELED_UP, level_ups.append)

    force = args.force or not config["enforce_team_limits"]
    try:
        active = manager.deploy(mission_id, agent_ids, force=force)
    except DeploymentError as e:
        mission = manager.get_mission(mission_id)
        team = [manager.get_agent(a) for a in agent_ids]
        console.print(deployment_panel(mission, team, e.check))
        show_error(str(e), title="Deployment refused")
        return 1

    show_info(f"Deployed {active.mission.name} ({active.id}).")
    finished = run_until_idle(manager, config["tick_interval"], instant=args.instant)

    if finished:
        console.print(completed_missions_table(finished))
    for event in level_ups:
        agent = manager.get_agent(event.data["agent_id"])
        console.print(
            f"[bold {THEME['accent']}]{agent.name} reached level {event.data['after']}![/bold {THEME['accent']}] "
            f"[{THEME['dim']}]{event.data['available_points']} point(s) to spend[/{THEME['dim']}]"
        )
    return 0


def run_until_idle(manager: DispatchManager, interval: float, instant: bool = False) -> list:
    """Tick until no missions are in flight. Returns everything that completed."""
    dispatcher = manager.dispatcher
    finished = []

    if instant:
        clock = manager.clock
        while not dispatcher.is_idle():
            next_end = min(m.end_time for m in dispatcher.active_missions)
            clock.advance(max(math.ceil(next_end) - clock.now(), 0))
            finished.extend(manager.tick())
        return finished

    with Live(
        dispatch_view(dispatcher.active_missions, dispatcher.completed_missions, dispatcher.current_time),
        console=console,
        refresh_per_second=4,
    ) as live:
        while not dispatcher.is_idle():
            time.sleep(interval)
            finished.extend(manager.tick())
            live.update(dispatch_view(
                dispatcher.active_missions,
                dispatcher.completed_missions,
                dispatcher.current_time,
            ))
    return finished


def cmd_allocate(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    agent_id = resolve_agent_id(manager, args.agent)
    try:
        pillar = Pillar(args.pillar)
    except ValueError:
        show_error(f"Unknown pillar: {args.pillar}. Choose from {', '.join(p.value for p in Pillar)}.")
        return 1

    before = manager.get_agent(agent_id)
    if args.remove:
        after = manager.deallocate_point(agent_id, pillar)
    else:
        after = manager.allocate_point(agent_id, pillar)

    if after == before:
        reason = "already at the minimum" if args.remove else "no points available"
        show_info(f"No change to {after.name}'s {pillar.value}: {reason}.")
    else:
        show_info(
            f"{after.name}: {pillar.value} {before.stats[pillar]} -> {after.stats[pillar]} "
            f"({after.available_points} point(s) left)"
        )
    return 0


def cmd_history(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    entries = manager.progress.history(manager.catalog)
    if not entries:
        show_info("No missions completed yet.")
        return 0

    names = {a.id: a.name for a in manager.agents()}
    console.print(history_table(entries, names))
    show_info(f"Total experience earned: {manager.progress.progress.total_experience}")
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    manager = build_manager(args)
    both = not args.agents and not args.progress
    manager.reset(agents=both or args.agents, progress=both or args.progress)
    show_info("Progress reset.")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    if args.key is None:
        for key, value in load_config(args.data_dir).items():
            console.print(f"[{THEME['dim']}]{key}[/{THEME['dim']}] = {value}")
        return 0

    if args.value is None:
        show_error("Provide a value to set.")
        return 1

    try:
        config = set_option(args.key, args.value, args.data_dir)
    except KeyError:
        show_error(f"Unknown option: {args.key}. Options: {', '.join(DEFAULT_CONFIG)}.")
        return 1
    except ValueError as e:
        show_error(str(e))
        return 1

    show_info(f"{args.key} = {config[args.key]}")
    return 0


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dispatch-sim", description="Dispatch Simulator")
    parser.add_argument(
        "--data-dir", "-d",
        type=Path,
        default=Path("saves"),
        help="Directory for saved progress and config",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("roster", help="List agents")
    p.set_defaults(func=cmd_roster)

    p = sub.add_parser("missions", help="List missions")
    p.add_argument("--difficulty", help="Easy, Medium, Hard or Extreme")
    p.add_argument("--all", action="store_true", help="Include completed missions")
    p.set_defaults(func=cmd_missions)

    p = sub.add_parser("odds", help="Preview a deployment")
    p.add_argument("mission")
    p.add_argument("agents", nargs="*")
    p.set_defaults(func=cmd_odds)

    p = sub.add_parser("deploy", help="Deploy a team and watch it")
    p.add_argument("mission")
    p.add_argument("agents", nargs="*")
    p.add_argument("--force", action="store_true", help="Skip team rules")
    p.add_argument("--instant", action="store_true", help="Fast-forward to completion")
    p.add_argument("--time-scale", type=float, help="Milliseconds per time unit")
    p.set_defaults(func=cmd_deploy)

    p = sub.add_parser("allocate", help="Spend or refund a stat point")
    p.add_argument("agent")
    p.add_argument("pillar")
    p.add_argument("--remove", action="store_true", help="Refund instead of spend")
    p.set_defaults(func=cmd_allocate)

    p = sub.add_parser("history", help="Show completed missions")
    p.set_defaults(func=cmd_history)

    p = sub.add_parser("reset", help="Clear saved progress")
    p.add_argument("--agents", action="store_true", help="Only agent progress")
    p.add_argument("--progress", action="store_true", help="Only mission history")
    p.set_defaults(func=cmd_reset)

    p = sub.add_parser("config", help="Show or change settings")
    p.add_argument("key", nargs="?")
    p.add_argument("value", nargs="?")
    p.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except DispatchError as e:
        show_error(str(e))
        return 1
    except KeyboardInterrupt:
        show_info("Interrupted. Missions in flight are not saved.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
