"""Main CLI entry point for parley"""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from parley.__version__ import __version__
from parley.abilities.builder import build_abilities
from parley.cli.chat_runner import ChatConfig, run_chat_session
from parley.cli.nlu import parse_input
from parley.config.loader import ConfigLoader
from parley.core.constants import OutputMessageType
from parley.core.errors import ConfigError, ParleyError
from parley.core.nlu import NLUResult
from parley.observability.logging import configure_logging
from parley.runtime.engine import DialogueEngine

app = typer.Typer(
    name="parley",
    help="parley - turn-based slot-filling dialogue engine",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"parley version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """parley - turn-based slot-filling dialogue engine"""
    pass


@app.command()
def validate(
    config: Path = typer.Argument(..., help="Config file or directory"),
) -> None:
    """Load a config, build its abilities and list them."""
    try:
        parley_config = ConfigLoader.load(config)
        abilities = build_abilities(parley_config)
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Abilities in {config}")
    table.add_column("Ability", style="bold")
    table.add_column("Slot")
    table.add_column("Order", justify="right")
    table.add_column("Enabled")
    for ability in abilities:
        if not ability.slots:
            table.add_row(ability.name, "-", "-", "-")
        for slot in ability.slots:
            table.add_row(ability.name, slot.name, str(slot.order), "yes" if slot.default_is_enabled else "no")
    console.print(table)
    default = parley_config.settings.default_ability
    console.print(f"[green]OK[/] {len(abilities)} abilities, default: {default or '-'}")


@app.command()
def chat(
    config: Path = typer.Argument(..., help="Config file or directory"),
    default_ability: str | None = typer.Option(
        None, "--default-ability", "-d", help="Override the default ability"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override the log level from the config settings"
    ),
    debug: bool = typer.Option(False, "--debug", help="Print tracebacks on errors"),
) -> None:
    """Chat with the abilities of a config (input: text @intent slot=value)."""
    chat_config = ChatConfig(
        config_path=config,
        default_ability=default_ability,
        log_level=log_level.upper() if log_level else None,
        debug=debug,
    )
    try:
        asyncio.run(run_chat_session(chat_config))
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/] {e}")
        raise typer.Exit(code=1) from e


@app.command()
def inspect(
    config: Path = typer.Argument(..., help="Config file or directory"),
    script: Path = typer.Argument(..., help="YAML list of turns to replay"),
    conversation_id: str = typer.Option("inspect", "--conversation-id", help="Conversation key"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override the log level from the config settings"
    ),
) -> None:
    """Replay a script of turns and print the replies and the final snapshot.

    Each turn is either a line in chat syntax or a mapping with
    raw_text, intent and entities.
    """
    try:
        parley_config = ConfigLoader.load(config)
        configure_logging(parley_config.settings.logging, log_level.upper() if log_level else None)
        engine = DialogueEngine.from_config(parley_config)
        turns = _load_script(script)
        state = asyncio.run(_replay(engine, conversation_id, turns))
    except ParleyError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1) from e
    console.print_json(json.dumps(state, default=str))


def _load_script(path: Path) -> list[NLUResult]:
    if not path.exists():
        raise ConfigError(f"Script not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        raise ConfigError(f"Script {path} must be a list of turns")
    return [_to_nlu(turn) for turn in data]


def _to_nlu(turn: Any) -> NLUResult:
    if isinstance(turn, str):
        return parse_input(turn)
    if isinstance(turn, dict):
        return NLUResult.model_validate(turn)
    raise ConfigError(f"Unsupported turn in script: {turn!r}")


async def _replay(engine: DialogueEngine, conversation_id: str, turns: list[NLUResult]) -> Any:
    for number, turn in enumerate(turns, start=1):
        console.print(f"[bold green]#{number} You >[/] {turn.raw_text}")
        for message in await engine.process_turn(conversation_id, turn):
            kind = OutputMessageType(message["type"]).value
            console.print(f"[bold blue]#{number} Bot >[/] {message['message']}  [dim]({kind})[/]")
    return await engine.get_state(conversation_id)


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
