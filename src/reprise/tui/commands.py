"""Slash commands handled by the app itself."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NamedTuple

CommandHandler = Callable[[str], object]


@dataclass(frozen=True)
class SlashCommand:
    """A registered command and the names it answers to."""

    name: str
    handler: CommandHandler
    description: str
    threaded: bool = False
    aliases: tuple[str, ...] = field(default=())


class ResolvedCommand(NamedTuple):
    handler: CommandHandler
    args: str
    threaded: bool


class CommandRegistry:
    """Maps ``/name`` words to handlers.

    A handler is called with the rest of the line, stripped. Aliases run
    the same handler but are left out of listings and completions so each
    command shows up once. Slash commands never reach a kernel or the
    input history.
    """

    def __init__(self) -> None:
        self._by_name: dict[str, SlashCommand] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        description: str,
        *,
        threaded: bool = False,
        aliases: tuple[str, ...] = (),
    ) -> None:
        """Register a command, replacing any earlier one with the same name."""
        self._by_name[name] = SlashCommand(name, handler, description, threaded, aliases)
        for alias in aliases:
            self._aliases[alias] = name

    def get(self, word: str) -> SlashCommand | None:
        """Look up a command by name or alias."""
        return self._by_name.get(self._aliases.get(word, word))

    def list_commands(self) -> list[tuple[str, str]]:
        """(name, description) pairs sorted by name."""
        return sorted((cmd.name, cmd.description) for cmd in self._by_name.values())

    def resolve(self, text: str) -> ResolvedCommand | None:
        """Split a command line into its handler and argument string."""
        word, _, rest = text.strip().partition(" ")
        command = self.get(word) if word else None
        if command is None:
            return None
        return ResolvedCommand(command.handler, rest.strip(), command.threaded)

    def dispatch(self, text: str) -> bool:
        """Run the command named in text. Returns False when nothing matched."""
        resolved = self.resolve(text)
        if resolved is None:
            return False
        resolved.handler(resolved.args)
        return True

    def is_command(self, text: str) -> bool:
        """True for a single line starting with ``/``.

        Multi-line input goes to a kernel even when it starts with a slash.
        """
        stripped = text.strip()
        return stripped.startswith("/") and "\n" not in stripped

    def completions(self, prefix: str) -> list[tuple[str, str]]:
        """Commands whose name starts with prefix, for the completion popup."""
        prefix = prefix.strip()
        return [item for item in self.list_commands() if item[0].startswith(prefix)]
