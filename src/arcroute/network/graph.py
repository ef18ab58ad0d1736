"""Mixed network of nodes, undirected edges and directed arcs."""

import logging
from dataclasses import dataclass
from typing import List, Set

from arcroute.exceptions import InvalidInstanceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    """Adjacency entry stored under its origin node."""
    to: int
    cost: float
    required: bool = False
    directed: bool = False


@dataclass(frozen=True)
class Link:
    """A link as it was declared: one entry per edge or arc."""
    u: int
    v: int
    cost: float
    directed: bool
    required: bool


class Network:
    """Adjacency structure of the routing network.

    Undirected edges are stored as two connections with identical cost, arcs as
    a single one. Links are never removed or modified after being added.
    """

    def __init__(self, node_count: int):
        if node_count <= 0:
            raise InvalidInstanceError(f"Node count must be positive, got {node_count}")
        self._node_count = node_count
        self._adjacency: List[List[Connection]] = [[] for _ in range(node_count)]
        self._links: List[Link] = []
        self._required_nodes: Set[int] = set()
        self._version = 0

    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def version(self) -> int:
        """Incremented on every added link; indexes built earlier are stale."""
        return self._version

    def _in_range(self, node: int) -> bool:
        return 0 <= node < self._node_count

    def add_connection(
        self,
        u: int,
        v: int,
        cost: float,
        directed: bool = False,
        required: bool = False
    ) -> bool:
        """Register an edge (or an arc when ``directed``).

        Out-of-range endpoints and negative costs are ignored with a warning.
        Returns whether the link was added.
        """
        if not (self._in_range(u) and self._in_range(v)):
            logger.warning(
                f"Ignoring link {u + 1}-{v + 1}: nodes must lie in 1..{self._node_count}"
            )
            return False
        if cost < 0:
            logger.warning(f"Ignoring link {u + 1}-{v + 1} with negative cost {cost}")
            return False

        self._adjacency[u].append(Connection(v, cost, required, directed))
        if not directed:
            self._adjacency[v].append(Connection(u, cost, required, directed))
        self._links.append(Link(u, v, cost, directed, required))
        self._version += 1
        return True

    def set_required_node(self, u: int) -> None:
        if not self._in_range(u):
            logger.warning(f"Ignoring required node {u + 1}: out of range")
            return
        self._required_nodes.add(u)

    def connections(self, u: int) -> List[Connection]:
        if not self._in_range(u):
            raise IndexError(f"Node {u + 1} is outside 1..{self._node_count}")
        return list(self._adjacency[u])

    @property
    def links(self) -> List[Link]:
        return list(self._links)

    @property
    def required_nodes(self) -> Set[int]:
        return set(self._required_nodes)
