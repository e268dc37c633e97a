import copy

import pytest

from nebuladb.components import ArchiveConfig, GraphConfig, IndexConfig, QueryConfig


def test_archive_defaults():
    config = ArchiveConfig()
    assert config.compression_level == 6
    assert config.max_size_mb == 1024


def test_graph_defaults():
    config = GraphConfig()
    assert config.max_depth == 10
    assert config.max_traversal_nodes == 1000


def test_index_defaults():
    config = IndexConfig()
    assert config.max_cache_size_mb == 64
    assert config.b_tree_order == 16


def test_query_defaults():
    config = QueryConfig()
    assert config.max_results == 1000
    assert config.timeout_ms == 30000


def test_copy_is_independent():
    original = QueryConfig()
    clone = copy.copy(original)
    clone.max_results = 5
    assert original.max_results == QueryConfig().max_results
    assert clone.max_results == 5


@pytest.mark.parametrize(
    "factory",
    [
        lambda: ArchiveConfig(compression_level=256),
        lambda: ArchiveConfig(max_size_mb=-1),
        lambda: GraphConfig(max_depth=300),
        lambda: IndexConfig(b_tree_order=-2),
        lambda: QueryConfig(timeout_ms=-1),
    ],
)
def test_out_of_range_values_rejected(factory):
    with pytest.raises(ValueError):
        factory()


def test_boundary_u8_accepted():
    assert GraphConfig(max_depth=255).max_depth == 255