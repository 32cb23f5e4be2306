"""Civilization simulator CLI."""

import argparse
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt
from rich.table import Table

from civsim.engine.game import GameEngine, TurnReport
from civsim.engine.random_source import create_random_source
from civsim.models import (
    TECH_LEVEL_MAX,
    VICTORY_STABLE_ECONOMY_TURNS,
    Difficulty,
    GameEvent,
    ResourceType,
    TechBranch,
)
from civsim.utils.config import LOG_LEVELS, ConfigError, GameConfig, load_config
from civsim.utils.logging_setup import configure_logging

console = Console()

MENU = [
    "Next turn",
    "Invest in technology",
    "Research technology",
    "Civilization status",
    "Technology tree",
    "Event log",
    "Save game",
    "Quit",
]


def format_signed(value: float) -> str:
    """Format a number with an explicit sign."""
    return f"{value:+.1f}"


def progress_bar(value: float, maximum: float, width: int = 20) -> str:
    """Render a text progress bar."""
    filled = int(width * max(0.0, min(value / maximum, 1.0))) if maximum > 0 else 0
    return "█" * filled + "░" * (width - filled)


def create_status_table(engine: GameEngine) -> Table:
    """Create a rich table with the civilization's vitals and resources."""
    civ = engine.civ
    table = Table(
        title=f"{civ.name} - Turn {civ.turn} - {civ.current_era.display_name}",
        show_header=True,
        header_style="bold magenta",
    )

    table.add_column("Stat", style="cyan", width=16)
    table.add_column("Value", style="white", justify="right", width=12)
    table.add_column("Trend", style="yellow", width=24)

    table.add_row("Population", f"{civ.population:,}", "")
    table.add_row(
        "Happiness", f"{civ.happiness:.1f}%", progress_bar(civ.happiness, 100.0)
    )
    table.add_row("Ecology", f"{civ.ecology:.1f}%", progress_bar(civ.ecology, 100.0))
    table.add_row("Military", f"{civ.military:.1f}", "")
    table.add_row(
        "Stable economy",
        f"{civ.stable_economy_turns}/{VICTORY_STABLE_ECONOMY_TURNS}",
        "turns",
    )

    for resource_type in ResourceType:
        stock = civ.resources.get_resource(resource_type)
        net = civ.resources.get_net_income(resource_type)
        style = "green" if net >= 0 else "red"
        table.add_row(
            resource_type.display_name,
            f"{stock:,.0f}",
            f"[{style}]{format_signed(net)}/turn[/{style}]",
        )

    return table


def create_tech_table(engine: GameEngine) -> Table:
    """Create a rich table for the technology branches."""
    tech = engine.civ.tech
    table = Table(
        title=(
            f"Technology - level {tech.get_overall_tech_level()}/{TECH_LEVEL_MAX} "
            f"({tech.get_current_era().display_name})"
        ),
        show_header=True,
        header_style="bold magenta",
    )

    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Branch", style="cyan", width=12)
    table.add_column("Level", style="green", width=6, justify="right")
    table.add_column("Progress", style="yellow", width=20)
    table.add_column("Points", style="white", width=14, justify="right")

    for i, status in enumerate(tech.branch_status(), 1):
        table.add_row(
            str(i),
            status.branch.display_name,
            str(status.level),
            progress_bar(status.progress, status.threshold, 15),
            f"{status.progress:.0f}/{status.threshold:.0f}",
        )

    return table


def create_research_table(engine: GameEngine) -> Table:
    """Create a rich table listing available technologies."""
    table = Table(title="Available Technologies", header_style="bold magenta")

    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Technology", style="cyan", width=20)
    table.add_column("Branch", style="green", width=10)
    table.add_column("Cost", style="yellow", width=6, justify="right")
    table.add_column("Description", style="white", width=36)

    for i, tech in enumerate(engine.civ.tech.get_available_techs(), 1):
        table.add_row(
            str(i),
            tech.name,
            tech.branch.display_name,
            str(tech.cost),
            tech.description,
        )

    return table


def create_event_log_table(engine: GameEngine, count: int = 15) -> Table:
    """Create a rich table for the most recent events."""
    table = Table(title="Event Log", header_style="bold magenta")

    table.add_column("Event", style="cyan", width=26)
    table.add_column("Type", style="yellow", width=18)
    table.add_column("Description", style="white", width=50)

    for event in engine.events.recent(count):
        table.add_row(event.name, event.event_type.display_name, event.description)

    return table


def describe_event(event: GameEvent) -> str:
    """One line listing an event's non-zero effects."""
    effects = [
        ("Population", (event.population_multiplier - 1.0) * 100.0, "%"),
        ("Happiness", event.happiness_effect, ""),
        ("Ecology", event.ecology_effect, ""),
        ("Military", event.military_effect, ""),
        ("Money", event.economy_effect, ""),
        ("Food", event.food_effect, ""),
        ("Energy", event.energy_effect, ""),
        ("Materials", event.materials_effect, ""),
        ("Tech", float(event.tech_boost), ""),
    ]
    parts = [
        f"{label} {format_signed(value)}{unit}"
        for label, value, unit in effects
        if value
    ]
    return ", ".join(parts) if parts else "No effect"


def show_turn_report(report: TurnReport) -> None:
    console.print(
        Panel.fit(
            f"[bold]{report.event.name}[/bold]\n"
            f"{report.event.description}\n"
            f"[dim]{describe_event(report.event)}[/dim]",
            title=f"Turn {report.turn}",
            border_style="blue",
        )
    )
    if report.era_changed:
        console.print(
            f"\n[bold magenta]*** NEW ERA: {report.era.display_name} ***[/bold magenta]"
        )


def show_end_screen(engine: GameEngine) -> None:
    result = engine.result
    style = "green" if result.is_victory else "red"
    console.print(
        Panel.fit(
            f"[bold {style}]{result.display_name}[/bold {style}]",
            border_style=style,
        )
    )
    console.print(f"  Turns played: [cyan]{engine.civ.turn}[/cyan]")
    console.print(f"  Final population: [cyan]{engine.civ.population:,}[/cyan]")
    console.print(
        f"  Technology level: [cyan]{engine.civ.tech.get_overall_tech_level()}[/cyan]"
    )
    console.print(f"  Final era: [cyan]{engine.civ.current_era.display_name}[/cyan]")


def handle_investment(engine: GameEngine) -> None:
    console.print(create_tech_table(engine))
    branches = list(TechBranch)
    choice = IntPrompt.ask(
        "Branch (0 to cancel)", choices=[str(i) for i in range(len(branches) + 1)]
    )
    if choice == 0:
        return

    money = engine.civ.resources.get_resource(ResourceType.MONEY)
    if money <= 0:
        console.print("[red]No money to invest![/red]")
        return

    limit = min(money, engine.max_investment)
    amount = FloatPrompt.ask(f"Amount (max {limit:.0f})")
    branch = branches[choice - 1]
    if engine.invest(branch, amount):
        console.print(
            f"[green]✓ Invested {amount:.0f} in {branch.display_name}![/green]"
        )
    else:
        console.print(f"[red]✗ Cannot invest {amount:.0f} (limit {limit:.0f})[/red]")


def handle_research(engine: GameEngine) -> None:
    available = engine.civ.tech.get_available_techs()
    if not available:
        console.print("[yellow]No technologies available for research.[/yellow]")
        console.print("[dim]Invest in technology branches to unlock new ones.[/dim]")
        return

    console.print(create_research_table(engine))
    choice = IntPrompt.ask(
        "Technology (0 to cancel)", choices=[str(i) for i in range(len(available) + 1)]
    )
    if choice == 0:
        return

    tech = available[choice - 1]
    if engine.research(tech.name):
        console.print(f"[green]✓ Researched: {tech.name}![/green]")
        console.print(f"[dim]{tech.description}[/dim]")
    else:
        money = engine.civ.resources.get_resource(ResourceType.MONEY)
        console.print(
            f"[red]✗ Not enough money! Need {tech.cost}, have {money:.0f}[/red]"
        )


def handle_save(engine: GameEngine, save_path: Path) -> None:
    if engine.save(save_path):
        console.print(f"[green]✓ Saved to {save_path}[/green]")
    else:
        console.print(f"[red]✗ {engine.last_error}[/red]")


def run_interactive(engine: GameEngine, config: GameConfig) -> None:
    """Menu-driven game loop."""
    while not engine.is_over:
        console.print(create_status_table(engine))
        for i, label in enumerate(MENU, 1):
            console.print(f"  [cyan]{i}[/cyan]. {label}")

        choice = IntPrompt.ask(
            "Action", choices=[str(i) for i in range(1, len(MENU) + 1)]
        )

        if choice == 1:
            report = engine.play_turn()
            if report is not None:
                show_turn_report(report)
        elif choice == 2:
            handle_investment(engine)
        elif choice == 3:
            handle_research(engine)
        elif choice == 4:
            console.print(create_status_table(engine))
        elif choice == 5:
            console.print(create_tech_table(engine))
            researched = engine.civ.tech.get_researched_techs()
            if researched:
                names = ", ".join(tech.name for tech in researched)
                console.print(f"[bold]Researched:[/bold] {names}")
        elif choice == 6:
            console.print(create_event_log_table(engine))
        elif choice == 7:
            handle_save(engine, config.save_path)
        else:
            if Confirm.ask("Save before quitting?"):
                handle_save(engine, config.save_path)
            return

    show_end_screen(engine)


def run_batch(engine: GameEngine, turns: int, quiet: bool) -> None:
    """Play a number of turns without player actions."""
    for _ in range(turns):
        report = engine.play_turn()
        if report is None:
            break
        if not quiet:
            show_turn_report(report)

    if quiet:
        print(f"{engine.civ.turn} {engine.result.value} {engine.civ.population}")
        return

    console.print(create_status_table(engine))
    console.print(create_tech_table(engine))
    if engine.is_over:
        show_end_screen(engine)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Turn-based Civilization Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Interactive game on Normal
  %(prog)s --difficulty hard --name Rome
  %(prog)s --turns 100 --seed 42        # Simulate 100 turns unattended
  %(prog)s --config game.json           # Load settings from JSON
  %(prog)s --load savegame.json         # Continue a saved game
        """,
    )

    parser.add_argument("--name", type=str, help="Civilization name")
    parser.add_argument(
        "--difficulty",
        type=Difficulty,
        choices=list(Difficulty),
        metavar="{easy,normal,hard,nightmare}",
        help="Game difficulty (default: normal)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible games")
    parser.add_argument("--config", type=Path, help="Path to configuration JSON file")
    parser.add_argument("--load", type=Path, help="Load a saved game before playing")
    parser.add_argument("--save", type=Path, help="Save file path")
    parser.add_argument(
        "--turns", type=int, help="Play this many turns unattended, then exit"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Minimal output in batch mode"
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Logging level"
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    return parser.parse_args()


def main() -> None:
    """Run the civilization simulator."""
    args = parse_args()

    try:
        config = load_config(args.config).with_overrides(
            civilization_name=args.name,
            difficulty=args.difficulty,
            seed=args.seed,
            save_path=args.save,
            log_level=args.log_level,
            log_file=args.log_file,
        )
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        return

    configure_logging(config.log_level, config.log_file, console=console)

    engine = GameEngine(
        difficulty=config.difficulty,
        name=config.civilization_name,
        rng=create_random_source(config.seed),
        max_investment=config.max_investment,
    )

    if args.load and not engine.load(args.load):
        console.print(f"[red]✗ Load failed: {engine.last_error}[/red]")
        return

    if args.turns is not None:
        run_batch(engine, args.turns, args.quiet)
        return

    console.print(
        Panel.fit(
            "[bold cyan]Civilization Simulator[/bold cyan]\n"
            f"[yellow]{engine.civ.name} - {engine.difficulty.display_name}[/yellow]",
            border_style="blue",
        )
    )
    run_interactive(engine, config)


if __name__ == "__main__":
    main()
