import pandas as pd
import pytest

from arcroute.network.graph import Network
from arcroute.network.index import NetworkIndex
from arcroute.network.statistics import (
    average_path_length,
    betweenness,
    connected_components,
    diameter,
    graph_statistics,
)


def test_statistics_of_square(square_case):
    network, _, _, _ = square_case
    stats = graph_statistics(network, NetworkIndex.build(network))

    assert stats['Vertices'] == 4
    assert stats['Edges'] == 4
    assert stats['Arcs'] == 0
    assert stats['Required Edges'] == 2
    assert stats['Required Arcs'] == 0
    assert stats['Required Vertices'] == 0
    assert stats['Density'] == pytest.approx(8 / 12)
    assert stats['Connected Components'] == 1
    assert stats['Min Degree'] == 2
    assert stats['Max Degree'] == 2
    assert stats['Diameter'] == 11


def test_line_path_metrics(line_network):
    index = NetworkIndex.build(line_network)
    assert average_path_length(index) == pytest.approx(8 / 6)
    assert diameter(index) == 2


def test_betweenness_counts_ordered_pairs(line_network):
    result = betweenness(NetworkIndex.build(line_network))
    expected = pd.Series([0, 2, 0], index=pd.RangeIndex(1, 4, name='node'), name='betweenness')
    pd.testing.assert_series_equal(result, expected)


def test_components_ignore_arc_direction():
    network = Network(5)
    network.add_connection(0, 1, 1, directed=True)
    network.add_connection(2, 3, 1)
    assert connected_components(network) == 3


def test_disconnected_network_metrics_use_reachable_pairs():
    network = Network(4)
    network.add_connection(0, 1, 3)
    network.add_connection(2, 3, 5)
    index = NetworkIndex.build(network)
    assert average_path_length(index) == pytest.approx(4)
    assert diameter(index) == 5


def test_required_nodes_and_arcs_counted():
    network = Network(3)
    network.add_connection(0, 1, 1, directed=True, required=True)
    network.add_connection(1, 2, 1, directed=True)
    network.set_required_node(2)
    stats = graph_statistics(network, NetworkIndex.build(network))
    assert stats['Arcs'] == 2
    assert stats['Required Arcs'] == 1
    assert stats['Required Vertices'] == 1
    assert stats['Density'] == pytest.approx(2 / 6)
    assert stats['Min Degree'] == 1
    assert stats['Max Degree'] == 2


def test_betweenness_counts_each_tied_path():
    network = Network(4)
    for u, v in [(0, 1), (1, 2), (2, 3), (3, 0)]:
        network.add_connection(u, v, 1)
    result = betweenness(NetworkIndex.build(network))
    # Opposite corners tie through both neighbours
    assert result.tolist() == [2, 2, 2, 2]
