import dataclasses

import pytest

from nebuladb.wal.config import WalConfig


def test_defaults():
    config = WalConfig()
    assert config.dir_path == "wal"
    assert config.max_file_size == 64 * 1024 * 1024
    assert config.sync_on_write is True
    assert config.checkpoint_interval == 300


def test_round_trip_through_dict():
    config = WalConfig(dir_path="/data/wal", sync_on_write=False, checkpoint_interval=0)
    assert WalConfig(**dataclasses.asdict(config)) == config


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        WalConfig(checkpoint_interval=-5)


def test_negative_file_size_rejected():
    with pytest.raises(ValueError):
        WalConfig(max_file_size=-1)