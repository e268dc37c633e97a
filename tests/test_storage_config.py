import copy

import pytest

from nebuladb.core import Config
from nebuladb.storage.config import CompressionType, StorageConfig


def test_compression_wire_values():
    assert [c.value for c in CompressionType] == [0, 1, 2, 3]
    assert CompressionType(3) is CompressionType.LZ4


def test_unknown_compression_byte_rejected():
    with pytest.raises(ValueError):
        CompressionType(4)


def test_defaults():
    config = StorageConfig()
    assert config.base == Config()
    assert config.block_size == 4 * 1024 * 1024
    assert config.compression is CompressionType.ZSTD
    assert config.flush_threshold == 1000


def test_compression_given_as_int_is_normalised():
    assert StorageConfig(compression=0).compression is CompressionType.NONE


def test_deep_copy_is_independent():
    config = StorageConfig()
    clone = copy.deepcopy(config)
    clone.base.data_dir = "/elsewhere"
    assert config.base.data_dir == "/tmp/nebuladb"


def test_base_not_shared_between_instances():
    first, second = StorageConfig(), StorageConfig()
    assert first.base is not second.base
    assert first.base == second.base


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        StorageConfig(flush_threshold=-1)