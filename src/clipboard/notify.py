import logging
import shutil
import subprocess
import threading
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Blocks until a managed selection may have changed.

    Uses ``clipnotify`` when it is installed. A missing binary or a failed
    run falls back to waiting ``interval`` seconds. ``interrupt`` ends a
    pending wait early.
    """

    def __init__(
        self,
        selections: Sequence[str],
        interval: float = 0.5,
        stop_event: Optional[threading.Event] = None,
        binary: Optional[str] = None,
    ) -> None:
        self.selections = list(selections)
        self.interval = interval
        self._stop_event = stop_event or threading.Event()
        self._process: Optional[subprocess.Popen] = None
        self._binary = binary if binary is not None else shutil.which("clipnotify")
        if self._binary is None:
            logger.info(
                f"clipnotify not found, polling every {interval}s instead")

    @property
    def command(self) -> Optional[List[str]]:
        if not self._binary:
            return None
        return [self._binary, "-s", ",".join(self.selections)]

    def wait(self) -> bool:
        """Return True when clipnotify reported an event."""
        command = self.command
        if command is not None and not self._stop_event.is_set():
            try:
                with subprocess.Popen(
                    command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
                ) as process:
                    self._process = process
                    # A stop requested before the handle was published.
                    if self._stop_event.is_set():
                        self._terminate(process)
                    returncode = process.wait()
                if returncode == 0:
                    return True
                logger.debug(f"clipnotify exited with {returncode}")
            except OSError as e:
                logger.debug(f"clipnotify failed to run: {e}")
            finally:
                self._process = None

        self._stop_event.wait(self.interval)
        return False

    def interrupt(self) -> None:
        self._stop_event.set()
        process = self._process
        if process is not None:
            self._terminate(process)

    @staticmethod
    def _terminate(process: subprocess.Popen) -> None:
        try:
            process.terminate()
        except ProcessLookupError:
            logger.debug("clipnotify already exited")
