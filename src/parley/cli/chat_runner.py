"""Interactive chat runner for the parley CLI."""

import uuid
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from parley.cli.nlu import parse_input
from parley.config.loader import ConfigLoader
from parley.core.constants import OutputMessageType
from parley.core.errors import ParleyError
from parley.core.types import OutputMessage
from parley.observability.logging import configure_logging
from parley.runtime.engine import DialogueEngine

MESSAGE_STYLES = {
    OutputMessageType.query: "bold blue",
    OutputMessageType.retry: "yellow",
    OutputMessageType.validate_reason: "red",
    OutputMessageType.slot_fill: "cyan",
    OutputMessageType.ability_complete: "bold green",
}


@dataclass
class ChatConfig:
    """Configuration for chat runner."""

    config_path: Path
    default_ability: str | None = None
    conversation_id: str | None = None
    log_level: str | None = None
    debug: bool = False


class ChatRunner:
    """Interactive chat session over a DialogueEngine.

    Each line typed by the user is parsed by the keyword NLU and processed
    as one turn.
    """

    def __init__(self, config: ChatConfig, console: Console | None = None):
        self.config = config
        self.console = console or Console()
        self.conversation_id = config.conversation_id or f"cli_{uuid.uuid4().hex[:6]}"
        self.engine: DialogueEngine | None = None

    def setup(self) -> DialogueEngine:
        """Load config and build the engine.

        Raises:
            ConfigError: If config is invalid
        """
        parley_config = ConfigLoader.load(self.config.config_path)
        configure_logging(parley_config.settings.logging, self.config.log_level)
        if self.config.default_ability:
            parley_config.settings.default_ability = self.config.default_ability
        self.engine = DialogueEngine.from_config(parley_config)
        return self.engine

    async def handle_line(self, line: str) -> list[OutputMessage]:
        """Process one line of user input and print the replies."""
        if self.engine is None:
            self.setup()
        assert self.engine is not None
        messages = await self.engine.process_turn(self.conversation_id, parse_input(line))
        for message in messages:
            self.print_message(message)
        return messages

    def print_message(self, message: OutputMessage) -> None:
        style = MESSAGE_STYLES.get(message["type"], "")
        self.console.print(f"[{style}]Bot > [/]{message['message']}" if style else message["message"])

    async def start(self) -> None:
        """Start the interactive session."""
        if self.engine is None:
            self.setup()

        self.console.print(f"Session ID: [green]{self.conversation_id}[/]")
        self.console.print("Syntax: text @intent slot=value. Type 'exit' or 'quit' to end session.\n")

        # Greet with the first prompt of the default ability, if any
        await self.handle_line("")

        while True:
            try:
                user_input = Prompt.ask("[bold green]You[/]", console=self.console)
            except (KeyboardInterrupt, EOFError):
                self.console.print("\n[yellow]Goodbye![/]")
                break

            if self._is_exit_command(user_input):
                self.console.print("[yellow]Goodbye![/]")
                break
            if not user_input.strip():
                continue

            try:
                await self.handle_line(user_input)
            except ParleyError as e:
                if self.config.debug:
                    self.console.print_exception()
                else:
                    self.console.print(f"[red]Error: {e}[/]")

    def _is_exit_command(self, user_input: str) -> bool:
        return user_input.strip().lower() in ("quit", "exit", "q", "/quit", "/exit")


async def run_chat_session(config: ChatConfig) -> None:
    """Run an interactive chat session."""
    await ChatRunner(config).start()
