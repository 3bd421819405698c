# Constants
DEFAULT_MAX_HISTORY_SIZE = 50
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_RECENT_EVENTS_SIZE = 100

BATCH_ID_PREFIX = "batch"
BATCH_HISTORY_KIND = "batch"
COMMAND_HISTORY_KIND = "command"

# Environment overrides
MAX_HISTORY_SIZE_ENV = "DEBUG_RUNTIME_MAX_HISTORY_SIZE"
LOG_LEVEL_ENV = "DEBUG_RUNTIME_LOG_LEVEL"

# Notification names
EXECUTION_COMPLETED = "execution_completed"
EXECUTION_FAILED = "execution_failed"
UNDO_COMPLETED = "undo_completed"
UNDO_FAILED = "undo_failed"
REDO_COMPLETED = "redo_completed"
REDO_FAILED = "redo_failed"
BATCH_COMPLETED = "batch_completed"
BATCH_FAILED = "batch_failed"

ALL_EVENTS = (
    EXECUTION_COMPLETED,
    EXECUTION_FAILED,
    UNDO_COMPLETED,
    UNDO_FAILED,
    REDO_COMPLETED,
    REDO_FAILED,
    BATCH_COMPLETED,
    BATCH_FAILED,
)

WILDCARD_EVENT = "*"
