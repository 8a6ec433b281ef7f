import logging
import re
from typing import Optional, Pattern

from clipboard.linux import run_command

logger = logging.getLogger(__name__)


class ActiveWindow:
    """Matches the focused window's title against an ignore pattern."""

    def __init__(self, pattern: Optional[str]):
        self.pattern: Optional[Pattern[str]] = re.compile(pattern) if pattern else None

    def title(self) -> Optional[str]:
        output = run_command(
            ["xdotool", "getactivewindow", "getwindowname"], timeout=1.0)
        if output is None:
            return None
        return output.decode("utf-8", errors="replace").strip()

    def is_ignored(self) -> bool:
        if self.pattern is None:
            return False
        title = self.title()
        if title is None:
            return False
        if self.pattern.search(title):
            logger.debug(f"Active window {title!r} matches ignore pattern")
            return True
        return False
