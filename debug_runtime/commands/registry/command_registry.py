from typing import Any, Dict, List, Optional, Type
import logging
from debug_runtime.commands.interfaces.command import (
    Command,
    ReversibleCommand,
    missing_capabilities,
)


logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Registry mapping terminal command names to command classes.

    The embedding terminal parses the player's input ("kill proc_1001") and
    asks the registry to build the matching command; the result is then
    handed to a CommandExecutor.

    Usage:
        registry = CommandRegistry()
        registry.register_command_class(KillProcessCommand, name="kill")
        registry.register_alias("terminate", "kill")
        command = registry.create_command("kill", process_manager, "proc_1001")
        result = await executor.execute(command)
    """

    def __init__(self, command_classes: Optional[List[Type[Command]]] = None):
        """
        Initialize command registry.

        Args:
            command_classes: Classes to register under their default names
        """
        logger.info("Initializing CommandRegistry")

        # Registry of command classes keyed by command name
        self._command_classes: Dict[str, Type[Command]] = {}

        # Alternative names resolving to a registered command name
        self._aliases: Dict[str, str] = {}

        for command_class in command_classes or []:
            self.register_command_class(command_class)

        logger.info(
            f"Registered {len(self._command_classes)} command classes: "
            f"{list(self._command_classes.keys())}"
        )

    def register_command_class(
        self, command_class: Type[Command], name: Optional[str] = None
    ) -> str:
        """
        Register a command class.

        Args:
            command_class: Subclass of Command
            name: Registry name; defaults to the class's `command_name`, or
                its class name when that is empty

        Returns:
            The name the class was registered under

        Raises:
            TypeError: If command_class is not a Command subclass
        """
        if not isinstance(command_class, type) or not issubclass(command_class, Command):
            raise TypeError(f"{command_class!r} is not a Command subclass")

        command_name = name or command_class.command_name or command_class.__name__

        if command_name in self._command_classes:
            logger.warning(f"Command '{command_name}' already registered, overriding")

        self._command_classes[command_name] = command_class
        logger.debug(f"Registered command class: {command_name}")
        return command_name

    def register_alias(self, alias: str, command_name: str) -> None:
        """
        Make `alias` resolve to an already registered command.

        Raises:
            ValueError: If command_name is unknown or alias is a command name
        """
        if command_name not in self._command_classes:
            raise ValueError(f"Command '{command_name}' not found")
        if alias in self._command_classes:
            raise ValueError(f"'{alias}' is already a command name")
        self._aliases[alias] = command_name

    def resolve_name(self, name: str) -> str:
        return self._aliases.get(name, name)

    def create_command(self, command_name: str, *args: Any, **kwargs: Any) -> Command:
        """
        Create a command instance.

        Args:
            command_name: Registered name or alias
            *args, **kwargs: Forwarded to the command's constructor

        Returns:
            New command instance

        Raises:
            ValueError: If command_name is not registered
            TypeError: If the created object does not satisfy the command contract
        """
        resolved = self.resolve_name(command_name)
        if resolved not in self._command_classes:
            available_commands = list(self._command_classes.keys())
            raise ValueError(
                f"Command '{command_name}' not found. Available commands: {available_commands}"
            )

        command = self._command_classes[resolved](*args, **kwargs)

        missing = missing_capabilities(command)
        if missing:
            raise TypeError(f"Command '{resolved}' is missing {missing}")

        logger.debug(f"Created command instance: {resolved}")
        return command

    def get_available_commands(self) -> List[str]:
        """
        Get list of all registered command names.

        Returns:
            List of available command names (aliases excluded)
        """
        return list(self._command_classes.keys())

    def get_command_info(self, command_name: str) -> Dict[str, Any]:
        """
        Get information about a specific command.

        Raises:
            ValueError: If command_name is not registered
        """
        resolved = self.resolve_name(command_name)
        if resolved not in self._command_classes:
            raise ValueError(f"Command '{command_name}' not found")

        command_class = self._command_classes[resolved]
        doc = (command_class.__doc__ or "").strip()

        return {
            "name": resolved,
            "class": command_class.__name__,
            "summary": doc.splitlines()[0] if doc else "",
            "reversible": issubclass(command_class, ReversibleCommand),
            "aliases": sorted(a for a, n in self._aliases.items() if n == resolved),
        }

    def remove_command_class(self, command_name: str) -> bool:
        """
        Remove a command class and its aliases from the registry.

        Returns:
            True if command was removed, False if not found
        """
        if command_name not in self._command_classes:
            return False

        del self._command_classes[command_name]
        self._aliases = {a: n for a, n in self._aliases.items() if n != command_name}

        logger.info(f"Removed command class: {command_name}")
        return True
