import json

import pytest

from nebuladb.storage.block import BlockFooter, BlockHeader, DocumentEntry
from nebuladb.storage.collection import Collection
from nebuladb.storage.config import StorageConfig


@pytest.fixture
def config():
    return StorageConfig(flush_threshold=1_000_000)


@pytest.fixture
def collection(tmp_path, config):
    return Collection.open("users", tmp_path, config)


def _with_blocks_file(collection):
    collection.insert(b"seed", b"{}")
    collection.close()


def test_open_creates_directory(tmp_path, config):
    coll = Collection.open("users", tmp_path, config)
    assert coll.name == "users"
    assert coll.path == tmp_path / "users"
    assert coll.path.is_dir()


def test_open_existing_directory(tmp_path, config):
    (tmp_path / "users").mkdir()
    coll = Collection.open("users", tmp_path, config)
    assert coll.path.is_dir()
    assert coll.scan() == []


def test_get_missing_document(collection):
    assert collection.get(b"nothing") is None


def test_scan_active_block_in_order(collection):
    for doc_id in (b"a", b"b", b"c"):
        collection.insert(doc_id, b'{"v": 1}')
    assert collection.scan() == [b"a", b"b", b"c"]


def test_scan_skips_tombstone_ids(collection):
    collection.insert(b"doc", b"{}")
    collection.insert(b"_doc_", b"{}")
    assert collection.scan() == [b"doc"]


def test_get_document_in_active_block(collection):
    _with_blocks_file(collection)
    collection.insert(b"b", b'{"name": "bee"}')
    assert collection.get(b"b") == b'{"name": "bee"}'


def test_delete_missing_returns_false(collection):
    _with_blocks_file(collection)
    assert collection.delete(b"ghost") is False


def test_delete_hides_document(collection):
    _with_blocks_file(collection)
    collection.insert(b"b", b'{"x": 1}')
    assert collection.delete(b"b") is True
    assert collection.get(b"b") is None
    assert collection.delete(b"b") is False


def test_delete_writes_tombstone(collection):
    _with_blocks_file(collection)
    collection.insert(b"b", b"{}")
    collection.delete(b"b")
    raw = collection.block_manager.find_document(b"_b_")
    tombstone = json.loads(raw)
    assert tombstone["_deleted"] is True
    assert tombstone["_id"] == "b"
    assert tombstone["_deleted_at"] > 0


def test_close_writes_block_file(collection):
    collection.insert(b"a", b"x")
    collection.close()
    blocks = collection.path / "blocks.bin"
    expected = BlockHeader.SIZE + DocumentEntry(b"a", b"x").size() + BlockFooter.SIZE
    assert blocks.stat().st_size == expected


def test_scan_includes_flushed_and_active(collection):
    collection.insert(b"first", b"{}")
    collection.close()
    collection.insert(b"second", b"{}")
    ids = collection.scan()
    assert ids[0] == b"second"
    assert b"first" in ids
    assert b"_first_" not in ids