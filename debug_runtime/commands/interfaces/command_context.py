from typing import Any, Dict, Optional
from dataclasses import dataclass, field


@dataclass
class CommandContext:
    """
    Opaque data passed through the executor to a command's execute/undo.

    The executor never inspects the context; it exists so the embedding
    application can hand per-call information (feature flags, the active
    session, the player's raw input) to commands without the commands
    knowing where it came from.
    """

    session_id: Optional[str] = None
    user_input: Optional[str] = None

    # Feature flags toggled by the embedding application
    flags: Dict[str, Any] = field(default_factory=dict)

    # Additional free-form data
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_flag(self, key: str, default: Any = None) -> Any:
        """Get feature flag value with fallback"""
        return self.flags.get(key, default)

    def is_enabled(self, key: str) -> bool:
        return bool(self.flags.get(key, False))

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Get metadata value with fallback"""
        return self.metadata.get(key, default)

    def add_metadata(self, key: str, value: Any) -> None:
        """Add metadata key-value pair"""
        self.metadata[key] = value
