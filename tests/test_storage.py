import json
import os

import pytest

from storefront.core.config import Settings
from storefront.database.storage import (
    FileStorage,
    MemoryStorage,
    StorageError,
    build_storage,
)


def test_memory_storage_get_set_remove():
    storage = MemoryStorage()

    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"
    assert storage.keys() == ["k"]
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_memory_storage_remove_missing_key_is_noop():
    MemoryStorage().remove_item("missing")


def test_file_storage_persists_across_instances(tmp_path):
    path = tmp_path / "carts.json"
    FileStorage(str(path)).set_item("gelatico-cart:c1", "[]")

    assert FileStorage(str(path)).get_item("gelatico-cart:c1") == "[]"
    assert json.loads(path.read_text()) == {"gelatico-cart:c1": "[]"}


def test_file_storage_remove(tmp_path):
    storage = FileStorage(str(tmp_path / "carts.json"))
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.remove_item("a")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_file_storage_creates_missing_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "carts.json"
    FileStorage(str(path)).set_item("k", "v")

    assert path.exists()


def test_file_storage_missing_file_reads_empty(tmp_path):
    assert FileStorage(str(tmp_path / "absent.json")).get_item("k") is None


def test_file_storage_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "carts.json"
    path.write_text("not json")

    storage = FileStorage(str(path))

    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"


def test_file_storage_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    storage = FileStorage(os.path.join(str(blocker), "carts.json"))

    with pytest.raises(StorageError):
        storage.set_item("k", "v")


def test_build_storage_picks_backend(tmp_path):
    assert isinstance(build_storage(Settings(cart_storage_path=None)), MemoryStorage)

    file_backed = build_storage(Settings(cart_storage_path=str(tmp_path / "carts.json")))
    assert isinstance(file_backed, FileStorage)
