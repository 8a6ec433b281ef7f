import logging
from pathlib import Path

from models.clip import blob_id_for, summarize

logger = logging.getLogger(__name__)


class ContentStore:
    """Blob files named by the checksum of each clip's summary."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, blob_id: str) -> Path:
        return self.base_dir / blob_id

    def exists(self, blob_id: str) -> bool:
        return self.path_for(blob_id).is_file()

    def put(self, content: bytes) -> str:
        blob_id = blob_id_for(summarize(content))
        self.path_for(blob_id).write_bytes(content)
        logger.debug(f"Stored blob {blob_id} ({len(content)} bytes)")
        return blob_id

    def delete(self, blob_id: str) -> None:
        try:
            self.path_for(blob_id).unlink()
            logger.debug(f"Removed blob {blob_id}")
        except FileNotFoundError:
            logger.debug(f"Blob {blob_id} already gone")
