"""
arcroute – heuristic solver for the mixed Capacitated Arc Routing Problem

Given a network of nodes, edges and arcs in which some elements are *required*
(each with a demand and a service cost), arcroute builds depot-based vehicle
routes that respect a vehicle capacity and serve every required element:

1. **Network** and shortest-path **index** (`arcroute.network`).
2. **Construction** of an initial solution by cheapest insertion (`arcroute.routing`).
3. **Local search** with relocate, swap, 2-opt and merge moves (`arcroute.routing`).
4. **Utilities** for instance parsing, statistics, DOT export and result files.

Typical workflow
----------------
>>> from arcroute import CARPParser, Solver
>>> instance = CARPParser("BHW1.dat").parse()
>>> solver = Solver(instance.network, instance.catalog, name=instance.name)
>>> solution = solver.solve(instance.depot, instance.capacity)
"""

from .exceptions import (
    CARPError,
    InvalidInstanceError,
    OverCapacityServiceError,
    PathReconstructionError,
    UnreachableServiceError,
)
from .models import INF, Route, Service, ServiceCatalog, ServiceKind, Solution
from .network import Network, NetworkIndex
from .parsers import CARPInstance, CARPParser
from .solver import Solver

__all__ = [
    "CARPError",
    "CARPInstance",
    "CARPParser",
    "INF",
    "InvalidInstanceError",
    "Network",
    "NetworkIndex",
    "OverCapacityServiceError",
    "PathReconstructionError",
    "Route",
    "Service",
    "ServiceCatalog",
    "ServiceKind",
    "Solution",
    "Solver",
    "UnreachableServiceError",
]
