import subprocess
from typing import List, Optional

from clipboard.base import SelectionBackend

READ_TIMEOUT = 1.0
WRITE_TIMEOUT = 2.0


def run_command(command: List[str], timeout: float, payload: Optional[bytes] = None) -> Optional[bytes]:
    try:
        result = subprocess.run(
            command,
            input=payload,
            stdout=subprocess.PIPE if payload is None else subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=timeout,
        )
        return result.stdout if payload is None else b""
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
        return None


class CommandBackend(SelectionBackend):
    """Backend driving a pair of external read/write commands."""

    def _read_command(self, selection: str) -> Optional[List[str]]:
        raise NotImplementedError

    def _write_command(self, selection: str) -> Optional[List[str]]:
        raise NotImplementedError

    def _read(self, selection: str) -> Optional[bytes]:
        command = self._read_command(selection)
        if command is None:
            return None
        return run_command(command, timeout=READ_TIMEOUT)

    def _write(self, selection: str, payload: bytes) -> bool:
        command = self._write_command(selection)
        if command is None:
            return False
        # Writers fork to serve the selection, so stdout is not captured.
        return run_command(command, timeout=WRITE_TIMEOUT, payload=payload) is not None


class XselBackend(CommandBackend):
    name = "xsel"

    def _read_command(self, selection: str) -> Optional[List[str]]:
        return ["xsel", "--logfile", "/dev/null", "-o", f"--{selection}"]

    def _write_command(self, selection: str) -> Optional[List[str]]:
        return ["xsel", "--logfile", "/dev/null", "-i", f"--{selection}"]


class XclipBackend(CommandBackend):
    name = "xclip"

    def _read_command(self, selection: str) -> Optional[List[str]]:
        return ["xclip", "-selection", selection, "-o"]

    def _write_command(self, selection: str) -> Optional[List[str]]:
        return ["xclip", "-selection", selection, "-i"]


class WaylandBackend(CommandBackend):
    name = "wayland"

    _FLAGS = {"clipboard": [], "primary": ["--primary"]}

    def _read_command(self, selection: str) -> Optional[List[str]]:
        if selection not in self._FLAGS:
            return None
        return ["wl-paste", "--no-newline", "--type", "text/plain", *self._FLAGS[selection]]

    def _write_command(self, selection: str) -> Optional[List[str]]:
        if selection not in self._FLAGS:
            return None
        return ["wl-copy", "--type", "text/plain", *self._FLAGS[selection]]
