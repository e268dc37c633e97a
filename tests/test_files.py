import pytest

from nebuladb.storage.files import FileManager


@pytest.fixture
def manager(tmp_path):
    return FileManager(tmp_path / "data")


def test_creates_data_dir(tmp_path):
    target = tmp_path / "nested" / "data"
    FileManager(target)
    assert target.is_dir()


def test_collection_path(manager):
    assert manager.collection_path("users") == manager.data_dir / "users"


def test_create_and_exists(manager):
    assert manager.collection_exists("users") is False
    manager.create_collection("users")
    assert manager.collection_exists("users") is True
    manager.create_collection("users")
    assert manager.collection_exists("users") is True


def test_exists_false_for_plain_file(manager):
    (manager.data_dir / "notadir").write_bytes(b"x")
    assert manager.collection_exists("notadir") is False


def test_list_collections_only_dirs(manager):
    manager.create_collection("b")
    manager.create_collection("a")
    (manager.data_dir / "file.txt").write_bytes(b"x")
    assert manager.list_collections() == ["a", "b"]


def test_list_collections_empty(manager):
    assert manager.list_collections() == []


def test_create_write_open_read(manager):
    with manager.create_file("users", "blocks.bin") as handle:
        handle.write(b"hello")
    assert manager.collection_exists("users")
    with manager.open_file("users", "blocks.bin") as handle:
        assert handle.read() == b"hello"


def test_create_file_truncates(manager):
    with manager.create_file("c", "f.bin") as handle:
        handle.write(b"content")
    with manager.create_file("c", "f.bin"):
        pass
    with manager.open_file("c", "f.bin") as handle:
        assert handle.read() == b""


def test_create_file_nested_name(manager):
    with manager.create_file("c", "sub/f.bin") as handle:
        handle.write(b"z")
    assert (manager.collection_path("c") / "sub" / "f.bin").read_bytes() == b"z"


def test_open_missing_file(manager):
    with pytest.raises(FileNotFoundError):
        manager.open_file("c", "missing.bin")


def test_delete_file(manager):
    with manager.create_file("c", "f.bin"):
        pass
    manager.delete_file("c", "f.bin")
    assert not (manager.collection_path("c") / "f.bin").exists()
    with pytest.raises(FileNotFoundError):
        manager.delete_file("c", "f.bin")