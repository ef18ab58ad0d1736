"""Data model shared by construction, local search and reporting."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional

from arcroute.exceptions import InfeasibleServiceError, InvalidInstanceError

INF = math.inf


class ServiceKind(Enum):
    NODE = 'N'
    EDGE = 'E'
    ARC = 'A'


@dataclass(frozen=True)
class Service:
    """One unit of required work.

    ``source`` is the node where servicing starts and ``target`` the node where
    the vehicle stands afterwards. For edge services both orientations are
    legal, see :meth:`reversed`.
    """
    id: int
    kind: ServiceKind
    source: int
    target: int
    demand: int
    service_cost: float
    travel_cost: float = 0

    @property
    def is_node(self) -> bool:
        return self.kind is ServiceKind.NODE

    @property
    def can_flip(self) -> bool:
        return self.kind is ServiceKind.EDGE and self.source != self.target

    def reversed(self) -> 'Service':
        """Return the same edge service traversed the other way."""
        if not self.can_flip:
            return self
        return replace(self, source=self.target, target=self.source)

    def orientations(self) -> List['Service']:
        if self.can_flip:
            return [self, self.reversed()]
        return [self]


class ServiceCatalog:
    """Required services in arrival order."""

    def __init__(self, services: Optional[List[Service]] = None):
        self._services: List[Service] = list(services or [])

    def add_service(
        self,
        id: int,
        kind: ServiceKind | str,
        source: int,
        target: int,
        demand: int,
        service_cost: float,
        travel_cost: float = 0
    ) -> Service:
        kind = ServiceKind(kind)
        if demand < 0 or service_cost < 0 or travel_cost < 0:
            raise InvalidInstanceError(f"Negative demand or cost for service {id}")
        if kind is ServiceKind.NODE:
            if source != target:
                raise InvalidInstanceError(f"Node service {id} must have identical endpoints")
            travel_cost = 0
        service = Service(id, kind, source, target, demand, service_cost, travel_cost)
        self._services.append(service)
        return service

    @property
    def services(self) -> List[Service]:
        return list(self._services)

    @property
    def total_demand(self) -> int:
        return sum(s.demand for s in self._services)

    def ids(self) -> List[int]:
        return [s.id for s in self._services]

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[Service]:
        return iter(self._services)


@dataclass
class Route:
    """One vehicle's ordered service sequence, bracketed by the depot.

    ``total_demand`` and ``total_cost`` are caches owned by
    :class:`arcroute.routing.cost.CostEvaluator`.
    """
    services: List[Service] = field(default_factory=list)
    route_id: int = 0
    total_demand: int = 0
    total_cost: float = 0

    def service_ids(self) -> List[int]:
        return [s.id for s in self.services]

    def __len__(self) -> int:
        return len(self.services)


@dataclass
class Solution:
    routes: List[Route] = field(default_factory=list)
    total_cost: float = 0
    construction_time: float = 0.0
    search_time: float = 0.0
    time_to_best: float = 0.0
    moves: int = 0
    infeasibility: Optional[InfeasibleServiceError] = None

    @classmethod
    def infeasible(cls, error: InfeasibleServiceError) -> 'Solution':
        return cls(routes=[], total_cost=INF, infeasibility=error)

    @property
    def route_count(self) -> int:
        return len(self.routes)

    @property
    def execution_time(self) -> float:
        return self.construction_time + self.search_time

    @property
    def is_feasible(self) -> bool:
        return self.infeasibility is None and self.total_cost < INF

    def service_ids(self) -> List[int]:
        return [sid for route in self.routes for sid in route.service_ids()]

    def covers(self, catalog: ServiceCatalog) -> bool:
        """True when every catalog service appears exactly once."""
        served = self.service_ids()
        return len(served) == len(set(served)) and sorted(served) == sorted(catalog.ids())

    def signature(self) -> List[List[tuple]]:
        """Route contents with orientation, for comparing solutions."""
        return [[(s.id, s.source, s.target) for s in route.services] for route in self.routes]
