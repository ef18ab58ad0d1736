"""Descriptive statistics of a network and its shortest-path index."""

import logging
from typing import List

import numpy as np
import pandas as pd

from arcroute.network.graph import Network
from arcroute.network.index import NetworkIndex

logger = logging.getLogger(__name__)


def graph_statistics(network: Network, index: NetworkIndex) -> pd.Series:
    """
    Compute the summary metrics of a network.

    Args:
        network: Network with every link registered
        index: Shortest-path index built from ``network``

    Returns:
        Series indexed by metric name
    """
    links = network.links
    n = network.node_count
    edges = sum(1 for link in links if not link.directed)
    arcs = len(links) - edges
    degrees = _degrees(network)

    stats = {
        'Vertices': n,
        'Edges': edges,
        'Arcs': arcs,
        'Required Vertices': len(network.required_nodes),
        'Required Edges': sum(1 for link in links if link.required and not link.directed),
        'Required Arcs': sum(1 for link in links if link.required and link.directed),
        'Density': (2 * edges + arcs) / (n * (n - 1)) if n > 1 else 0.0,
        'Connected Components': connected_components(network),
        'Min Degree': int(degrees.min()),
        'Max Degree': int(degrees.max()),
        'Average Path Length': average_path_length(index),
        'Diameter': diameter(index),
    }
    return pd.Series(stats, name='value', dtype=object)


def _degrees(network: Network) -> np.ndarray:
    degrees = np.zeros(network.node_count, dtype=int)
    for link in network.links:
        degrees[link.u] += 1
        if link.v != link.u:
            degrees[link.v] += 1
    return degrees


def connected_components(network: Network) -> int:
    """Number of weakly connected components (arc directions ignored)."""
    parent = list(range(network.node_count))

    def find(u: int) -> int:
        while parent[u] != u:
            parent[u] = parent[parent[u]]
            u = parent[u]
        return u

    for link in network.links:
        root_u, root_v = find(link.u), find(link.v)
        if root_u != root_v:
            parent[root_u] = root_v
    return len({find(u) for u in range(network.node_count)})


def _finite_off_diagonal(distances: np.ndarray) -> np.ndarray:
    mask = np.isfinite(distances)
    np.fill_diagonal(mask, False)
    return mask


def average_path_length(index: NetworkIndex) -> float:
    """Mean shortest distance over ordered reachable pairs of distinct nodes."""
    distances = index.distances
    mask = _finite_off_diagonal(distances)
    if not mask.any():
        return 0.0
    return float(distances[mask].mean())


def diameter(index: NetworkIndex) -> float:
    """Largest finite shortest distance."""
    distances = index.distances
    finite = distances[np.isfinite(distances)]
    return float(finite.max()) if finite.size else 0.0


def betweenness(index: NetworkIndex) -> pd.Series:
    """
    Count, for each node, the ordered pairs whose shortest distance passes through it.

    A node ``v`` lies on a shortest ``s -> t`` path when
    ``d(s, t) == d(s, v) + d(v, t)`` with ``v`` distinct from ``s`` and ``t``.
    Tied shortest paths are each counted in full.
    """
    distances = index.distances
    n = index.node_count
    reachable = _finite_off_diagonal(distances)
    counts: List[int] = []
    for v in range(n):
        via_v = distances[:, v, None] + distances[None, v, :]
        on_path = reachable & np.isfinite(via_v) & np.isclose(distances, via_v)
        on_path[v, :] = False
        on_path[:, v] = False
        counts.append(int(on_path.sum()))
    return pd.Series(counts, index=pd.RangeIndex(1, n + 1, name='node'), name='betweenness')
