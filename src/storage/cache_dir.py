import getpass
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

CACHE_VERSION = 1
INDEX_PREFIX = "line_cache"
LOCK_NAME = "lock"


def default_base_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    for key in ("CM_DIR", "XDG_RUNTIME_DIR", "TMPDIR"):
        value = env.get(key)
        if value:
            return Path(value)
    return Path("/tmp")


class CacheDirectory:
    """Owner-only directory holding the lock, index logs and blobs."""

    def __init__(self, path: Path):
        self.path = path

    @classmethod
    def for_user(cls, base_dir: Optional[Path] = None, user: Optional[str] = None) -> "CacheDirectory":
        base = base_dir or default_base_dir()
        name = f"cliphistd.{CACHE_VERSION}.{user or getpass.getuser()}"
        return cls(base / name)

    def ensure(self) -> Path:
        self.path.mkdir(mode=0o700, parents=True, exist_ok=True)
        os.chmod(self.path, 0o700)
        logger.debug(f"Using cache directory {self.path}")
        return self.path

    @property
    def lock_path(self) -> Path:
        return self.path / LOCK_NAME

    def index_path(self, selection: str) -> Path:
        return self.path / f"{INDEX_PREFIX}_{selection}"
