import stat

import pytest

from models.clip import IndexEntry, blob_id_for
from storage.cache_dir import CacheDirectory, default_base_dir
from storage.lock import CacheLock, LockTimeoutError


def test_put_writes_content_verbatim(store):
    blob_id = store.put(b"line one\nline two")
    assert blob_id == blob_id_for("line one (2 lines)")
    assert store.path_for(blob_id).read_bytes() == b"line one\nline two"


def test_put_overwrites_same_summary(store):
    first = store.put(b"x" * 300 + b"first")
    second = store.put(b"x" * 300 + b"second")
    assert first == second
    assert store.path_for(first).read_bytes().endswith(b"second")


def test_delete_is_idempotent(store):
    blob_id = store.put(b"hello")
    store.delete(blob_id)
    store.delete(blob_id)
    assert not store.exists(blob_id)


def test_append_and_read_entries(logs):
    log = logs["clipboard"]
    log.append(1, "one")
    log.append(2, "two words")
    assert log.path.read_text() == "1 one\n2 two words\n"
    assert log.entries() == [IndexEntry(1, "one"), IndexEntry(2, "two words")]
    assert len(log) == 2


def test_rollback_removes_last_line_and_blob(store, logs):
    log = logs["clipboard"]
    log.append(1, "keep")
    store.put(b"ab")
    last = log.append(2, "ab")

    removed = log.rollback_last_entry(last.size, expected=last.text)

    assert removed == last
    assert log.path.read_text() == "1 keep\n"
    assert not store.exists(blob_id_for("ab"))


def test_rollback_refuses_mismatched_tail(store, logs):
    log = logs["clipboard"]
    store.put(b"other")
    log.append(5, "other")

    assert log.rollback_last_entry(len(b"9 gone\n"), expected="9 gone") is None
    assert log.path.read_text() == "5 other\n"
    assert store.exists(blob_id_for("other"))


def test_rollback_refuses_partial_line(logs):
    log = logs["clipboard"]
    log.append(1, "first")
    log.append(2, "second")
    assert log.rollback_last_entry(4) is None
    assert log.rollback_last_entry(100) is None
    assert len(log) == 2


def test_rollback_on_missing_log(logs):
    assert logs["primary"].rollback_last_entry(10) is None


def test_compact_keeps_tail_and_collapses_repeats(logs):
    log = logs["clipboard"]
    log.path.write_text("1 a\n2 b\n3 c\n3 c\n4 d\n")

    dropped = log.compact_to_last_n(3)

    assert dropped == [IndexEntry(1, "a"), IndexEntry(2, "b")]
    assert log.path.read_text() == "3 c\n4 d\n"
    assert [p.name for p in log.path.parent.iterdir() if p.name.startswith(".")] == []


def test_cache_directory_layout(tmp_path):
    cache = CacheDirectory.for_user(tmp_path, user="alice")
    path = cache.ensure()

    assert path == tmp_path / "cliphistd.1.alice"
    assert stat.S_IMODE(path.stat().st_mode) == 0o700
    assert cache.lock_path == path / "lock"
    assert cache.index_path("primary") == path / "line_cache_primary"


def test_default_base_dir_precedence():
    assert str(default_base_dir({"CM_DIR": "/a", "XDG_RUNTIME_DIR": "/b"})) == "/a"
    assert str(default_base_dir({"XDG_RUNTIME_DIR": "/b", "TMPDIR": "/c"})) == "/b"
    assert str(default_base_dir({"TMPDIR": "/c"})) == "/c"
    assert str(default_base_dir({})) == "/tmp"


def test_lock_times_out_while_held(tmp_path):
    path = tmp_path / "lock"
    with CacheLock(path, timeout=1.0) as first:
        assert first.held
        with pytest.raises(LockTimeoutError):
            CacheLock(path, timeout=0.1).acquire()
    second = CacheLock(path, timeout=0.1)
    second.acquire()
    second.release()
    assert not second.held


def test_rollback_keeps_referenced_blob(store, logs):
    log = logs["clipboard"]
    store.put(b"shared")
    last = log.append(2, "shared")

    removed = log.rollback_last_entry(last.size, is_referenced=lambda blob_id: True)

    assert removed == last
    assert len(log) == 0
    assert store.exists(blob_id_for("shared"))


def test_compact_drops_malformed_lines(logs):
    log = logs["primary"]
    log.path.write_text("1 a\nnot an entry\n2 b\n")

    assert log.compact_to_last_n(5) == []
    assert log.path.read_text() == "1 a\n2 b\n"
    assert log.blob_ids() == {blob_id_for("a"), blob_id_for("b")}
