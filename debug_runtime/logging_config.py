import logging

from debug_runtime.config.constants import DEFAULT_LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """
    Configure logging for the application.

    Third-party loggers default to WARNING; the debug_runtime loggers use
    `level`.

    Args:
        level: Logging level name (e.g. 'DEBUG', 'INFO')

    Raises:
        ValueError: If level is not a valid logging level name
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )

    logging.getLogger("debug_runtime").setLevel(numeric_level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
