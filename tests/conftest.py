from pathlib import Path
import itertools
import sys

import pytest

# ensure src is importable
REPO_ROOT = Path(__file__).resolve().parent.parent
SRC = REPO_ROOT / "src"
sys.path.insert(0, str(SRC))

from clipboard.base import SelectionBackend  # noqa: E402
from models.selection_state import SelectionTracker  # noqa: E402
from services.capture import CapturePipeline  # noqa: E402
from storage.cache_dir import INDEX_PREFIX, LOCK_NAME  # noqa: E402
from storage.content_store import ContentStore  # noqa: E402
from storage.index_log import IndexLog  # noqa: E402

SELECTIONS = ["clipboard", "primary"]


class FakeBackend(SelectionBackend):
    """In-memory selections standing in for xsel/xclip."""

    name = "fake"

    def __init__(self, contents=None):
        self.contents = dict(contents or {})
        self.writes = []

    def _read(self, selection):
        return self.contents.get(selection, b"")

    def _write(self, selection, payload):
        self.writes.append((selection, payload))
        self.contents[selection] = payload
        return True


class StubNotifier:

    def __init__(self, on_wait=None):
        self.calls = 0
        self.interrupted = False
        self._on_wait = on_wait

    def wait(self):
        self.calls += 1
        if self._on_wait is not None:
            self._on_wait(self.calls)
        return True

    def interrupt(self):
        self.interrupted = True


def blob_files(directory: Path):
    return sorted(
        p.name for p in directory.iterdir()
        if p.is_file()
        and not p.name.startswith(INDEX_PREFIX)
        and p.name != LOCK_NAME
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store(tmp_path):
    return ContentStore(tmp_path)


@pytest.fixture
def logs(tmp_path, store):
    return {name: IndexLog(tmp_path / f"{INDEX_PREFIX}_{name}", store) for name in SELECTIONS}


@pytest.fixture
def make_pipeline(store, logs, backend):
    def factory(own_clipboard=False, selections=SELECTIONS):
        counter = itertools.count(1_000)
        return CapturePipeline(
            store,
            logs,
            SelectionTracker.for_selections(selections),
            backend,
            selections,
            own_clipboard=own_clipboard,
            clock=lambda: next(counter),
        )
    return factory
