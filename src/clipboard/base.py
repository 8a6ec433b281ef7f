from abc import ABC, abstractmethod
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class SelectionBackend(ABC):
    """Reads and writes the plain-text content of a named selection."""

    name = "base"

    @abstractmethod
    def _read(self, selection: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def _write(self, selection: str, payload: bytes) -> bool:
        pass

    def read(self, selection: str) -> bytes:
        try:
            data = self._read(selection)
        except Exception as e:
            logger.debug(f"{self.name}: reading {selection} failed: {e}")
            data = None
        return data or b""

    def write(self, selection: str, payload: bytes) -> bool:
        try:
            return self._write(selection, payload)
        except Exception as e:
            logger.debug(f"{self.name}: writing {selection} failed: {e}")
            return False
