from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional


@dataclass
class SelectionState:
    """What the daemon last saw and wrote for one selection."""
    last_content: bytes = b""
    last_blob_id: Optional[str] = None
    last_entry_text: str = ""
    last_entry_size: int = 0


@dataclass
class SelectionTracker:
    states: Dict[str, SelectionState] = field(default_factory=dict)
    last_content_any: bytes = b""

    @classmethod
    def for_selections(cls, selections: Iterable[str]) -> "SelectionTracker":
        return cls(states={name: SelectionState() for name in selections})

    def state(self, selection: str) -> SelectionState:
        if selection not in self.states:
            self.states[selection] = SelectionState()
        return self.states[selection]
