"""nfakit CLI tool for inspecting and running automaton definitions.

This module provides a command-line interface for:
- Validating automaton definition files
- Displaying automaton structure
- Running input through an automaton
- Exporting Graphviz DOT source
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .. import __version__
from ..automaton import Automaton
from ..config.builder import load_automaton
from ..exceptions import NfaError
from ..guards import EPSILON

console = Console()


def _load(config_file: str) -> Automaton:
    try:
        return load_automaton(config_file)
    except NfaError as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)


def _format_states(states) -> str:
    return "{" + ", ".join(str(state.id) for state in sorted(states)) + "}"


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """nfakit CLI - Nondeterministic Finite Automaton Tool"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show automaton details')
def validate(config_file: str, verbose: bool):
    """Validate an automaton definition file"""
    automaton = _load(config_file)
    console.print("[green]✓[/green] Configuration is valid!")

    if verbose:
        console.print("\n[bold]Automaton Details:[/bold]")
        console.print(f"  Name: {automaton.name}")
        console.print(f"  Store: {getattr(automaton.factory, 'kind', '?')}")
        console.print(f"  States: {automaton.num_states}")
        console.print(f"  Transitions: {sum(len(automaton.transitions_of(s)) for s in automaton.states())}")
        console.print(f"  Accept states: {_format_states(automaton.get_marked())}")


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'table', 'tree']), default='text')
def show(config_file: str, output_format: str):
    """Display automaton structure"""
    automaton = _load(config_file)

    if output_format == 'text':
        click.echo(automaton.to_debug_string(), nl=False)

    elif output_format == 'table':
        table = Table(title=f"{automaton.name} - States")
        table.add_column("State", style="cyan")
        table.add_column("Markers", style="green")
        table.add_column("Transitions", style="blue")
        for state in automaton.states():
            markers = ", ".join(sorted(str(m) for m in automaton.markers_of(state)))
            edges = []
            for guard, target in automaton.transitions_of(state):
                label = "ε" if guard is EPSILON else escape(repr(guard.value))
                edges.append(f"{label} → {target.id}")
            table.add_row(str(state.id), markers, "\n".join(edges))
        console.print(table)

    else:
        tree = Tree(f"[bold]{automaton.name}[/bold]")
        active = automaton.get_active_states()
        for state in automaton.states():
            state_label = f"#{state.id}"
            if state.id == 0:
                state_label += " [green](start)[/green]"
            if state in active:
                state_label += " [yellow](active)[/yellow]"
            markers = automaton.markers_of(state)
            if markers:
                state_label += f" [red]({escape(', '.join(sorted(str(m) for m in markers)))})[/red]"
            branch = tree.add(state_label)
            for guard, target in automaton.transitions_of(state):
                label = "ε" if guard is EPSILON else escape(repr(guard.value))
                branch.add(f"{label} → #{target.id}")
        console.print(tree)


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.argument('input_text')
@click.option('--split', is_flag=True, help='Feed whitespace-separated tokens instead of characters')
def run(config_file: str, input_text: str, split: bool):
    """Run INPUT_TEXT through an automaton"""
    automaton = _load(config_file)
    values = input_text.split() if split else list(input_text)

    result = automaton.feed(values)

    console.print(f"Consumed: {result.consumed}/{len(values)}")
    console.print(f"Active states: {_format_states(automaton.get_active_states())}")
    if result.markers:
        console.print(f"Markers: {escape(', '.join(sorted(str(m) for m in result.markers)))}")
    if result.accepted:
        console.print("[green]✓[/green] Accepted")
    else:
        if not result.completed:
            console.print(f"[red]✗[/red] Rejected at position {result.consumed}: {escape(repr(values[result.consumed]))}")
        else:
            console.print("[red]✗[/red] Input consumed but no accept state reached")
        sys.exit(1)


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), help='Write DOT source to this file')
def dot(config_file: str, output: str | None):
    """Export an automaton as Graphviz DOT source"""
    automaton = _load(config_file)
    source = automaton.build_dot().source

    if output:
        Path(output).write_text(source)
        console.print(f"[green]✓[/green] Wrote DOT source to {output}")
    else:
        click.echo(source)


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
