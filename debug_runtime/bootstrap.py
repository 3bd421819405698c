from typing import Optional, Tuple
import logging

from debug_runtime.commands.executor.command_executor import CommandExecutor
from debug_runtime.commands.impl.callable_command import CallableCommand
from debug_runtime.commands.registry.command_registry import CommandRegistry
from debug_runtime.config.settings import EngineSettings
from debug_runtime.logging_config import configure_logging


logger = logging.getLogger(__name__)


def build_command_executor(
    settings: Optional[EngineSettings] = None,
    registry: Optional[CommandRegistry] = None,
    env_file: Optional[str] = None,
) -> Tuple[CommandExecutor, CommandRegistry]:
    """
    Wire up a ready-to-use executor and registry.

    Args:
        settings: Engine settings; read from the environment when omitted
        registry: Registry to use; a new one holding the generic commands
            is created when omitted
        env_file: .env file consulted when settings are read from the environment

    Returns:
        (executor, registry)
    """
    if settings is None:
        settings = EngineSettings.from_env(env_file)

    configure_logging(settings.log_level)

    if registry is None:
        registry = CommandRegistry([CallableCommand])

    executor = CommandExecutor(max_history_size=settings.max_history_size)
    logger.info(
        f"Command engine ready with {len(registry.get_available_commands())} "
        f"registered commands"
    )
    return executor, registry
