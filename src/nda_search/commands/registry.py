"""Command registry for discovering and managing commands."""

from typing import TypeVar

from nda_search.commands.base import BaseCommand

CommandClass = TypeVar("CommandClass", bound=type[BaseCommand])


class CommandRegistry:
    """Registry for looking up commands by name or alias.

    Usage:
        @CommandRegistry.register
        class FullTextCommand(BaseCommand):
            ...

        cmd = CommandRegistry.get_instance("fulltext")
    """

    _commands: dict[str, type[BaseCommand]] = {}
    _aliases: dict[str, str] = {}  # alias -> command name

    @classmethod
    def register(cls, command_class: CommandClass) -> CommandClass:
        """Decorator to register a command class."""
        cls.register_command(command_class)
        return command_class

    @classmethod
    def register_command(cls, command_class: type[BaseCommand]) -> None:
        """Register a command class.

        Raises:
            ValueError: If the name or an alias is already taken.
        """
        instance = command_class()
        name = instance.name

        if name in cls._commands or name in cls._aliases:
            raise ValueError(f"Command '{name}' is already registered")

        for alias in instance.aliases:
            if alias in cls._aliases or alias in cls._commands:
                raise ValueError(
                    f"Alias '{alias}' conflicts with existing command or alias"
                )

        cls._commands[name] = command_class
        for alias in instance.aliases:
            cls._aliases[alias] = name

    @classmethod
    def get(cls, name: str) -> type[BaseCommand] | None:
        """Get a command class by name or alias."""
        if name in cls._commands:
            return cls._commands[name]
        if name in cls._aliases:
            return cls._commands[cls._aliases[name]]
        return None

    @classmethod
    def get_instance(cls, name: str) -> BaseCommand | None:
        command_class = cls.get(name)
        if command_class is None:
            return None
        return command_class()

    @classmethod
    def list_names(cls) -> list[str]:
        """List all command names (not aliases)."""
        return list(cls._commands.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._commands or name in cls._aliases

    @classmethod
    def unregister(cls, name: str) -> bool:
        """Unregister a command and its aliases.

        Returns:
            True if unregistered, False if not found.
        """
        if name not in cls._commands:
            return False

        del cls._commands[name]
        for alias in [a for a, target in cls._aliases.items() if target == name]:
            del cls._aliases[alias]
        return True

    @classmethod
    def clear(cls) -> None:
        """Clear all registered commands (mainly for testing)."""
        cls._commands.clear()
        cls._aliases.clear()

    @classmethod
    def get_command_info(cls) -> list[dict[str, str]]:
        """Name, description and aliases of every registered command."""
        info = []
        for command_class in cls._commands.values():
            instance = command_class()
            info.append(
                {
                    "name": instance.name,
                    "description": instance.description,
                    "aliases": ", ".join(instance.aliases),
                }
            )
        return info
